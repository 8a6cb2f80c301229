# -*- coding: utf-8 -*-
"""
RU: Конфигурация диагностики: можно ли раскрывать ключевой материал
в отладочном выводе.
EN: Diagnostics configuration: whether debug output may reveal key material.

The active configuration is process-wide and is read by IpSecAlgorithm
``repr()``/``str()``. Explicit formatting calls take the flag as a parameter
instead.
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping, Optional

from src import get_logger

_LOGGER: Final = get_logger(__name__)

BUILD_TYPE_ENV: Final[str] = "IPSEC_BUILD_TYPE"


class BuildType(str, Enum):
    """Тип сборки. Отладочными считаются только userdebug и eng."""

    # Production builds
    USER = "user"

    # Production image with debugging enabled
    USERDEBUG = "userdebug"

    # Development builds
    ENG = "eng"

    def is_debuggable(self) -> bool:
        return self is not BuildType.USER

    @classmethod
    def from_str(cls, value: str) -> BuildType:
        """
        Парсинг из строки (case-insensitive).

        Raises:
            ValueError: Некорректное значение
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown build type: {value!r}. "
                f"Allowed values: {[b.value for b in cls]}"
            ) from None


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Diagnostics parameters.

    Attributes:
        build_type: Build flavour the process runs in.
        reveal_secrets: Whether diagnostics may include key material.
            Defaults to ``build_type.is_debuggable()``; may only be True
            for debuggable builds.

    Examples:
        >>> DiagnosticsConfig().reveal_secrets
        False
        >>> DiagnosticsConfig(BuildType.ENG).reveal_secrets
        True
        >>> DiagnosticsConfig(BuildType.ENG, reveal_secrets=False).reveal_secrets
        False
    """

    build_type: BuildType = BuildType.USER
    reveal_secrets: Optional[bool] = None

    def __post_init__(self) -> None:
        if not isinstance(self.build_type, BuildType):
            raise TypeError("build_type must be a BuildType")
        if self.reveal_secrets is None:
            object.__setattr__(self, "reveal_secrets", self.build_type.is_debuggable())
        elif self.reveal_secrets and not self.build_type.is_debuggable():
            raise ValueError("reveal_secrets requires a debuggable build type")

    @staticmethod
    def from_environment() -> DiagnosticsConfig:
        """
        Create configuration from the IPSEC_BUILD_TYPE environment variable.

        An unset variable means a ``user`` build. An unrecognised value is
        logged and treated as ``user``.
        """
        raw = os.environ.get(BUILD_TYPE_ENV)
        if raw is None:
            return DiagnosticsConfig()
        try:
            return DiagnosticsConfig(BuildType.from_str(raw))
        except ValueError:
            _LOGGER.warning(
                "Ignoring invalid %s=%r, falling back to 'user'", BUILD_TYPE_ENV, raw
            )
            return DiagnosticsConfig()

    @staticmethod
    def from_mapping(config: Mapping[str, Any]) -> DiagnosticsConfig:
        """
        Create configuration from a ``load_config()`` dictionary.

        Raises:
            ValueError: if ``build_type`` is not a known build type.
        """
        build_type = BuildType.from_str(str(config.get("build_type", BuildType.USER.value)))
        reveal = config.get("reveal_secrets")
        return DiagnosticsConfig(
            build_type, reveal_secrets=None if reveal is None else bool(reveal)
        )


_active_lock: Final = threading.Lock()
_active: Optional[DiagnosticsConfig] = None


def get_diagnostics_config() -> DiagnosticsConfig:
    """Active configuration; initialised lazily from the environment."""
    global _active
    with _active_lock:
        if _active is None:
            _active = DiagnosticsConfig.from_environment()
        return _active


def set_diagnostics_config(config: Optional[DiagnosticsConfig]) -> None:
    """
    Replace the active configuration.

    Passing None resets it so that the next read consults the environment
    again.
    """
    global _active
    if config is not None and not isinstance(config, DiagnosticsConfig):
        raise TypeError("config must be a DiagnosticsConfig or None")
    with _active_lock:
        _active = config
    if config is not None:
        _LOGGER.info(
            "Diagnostics config set: build_type=%s reveal_secrets=%s",
            config.build_type.value,
            config.reveal_secrets,
        )


__all__ = [
    "BUILD_TYPE_ENV",
    "BuildType",
    "DiagnosticsConfig",
    "get_diagnostics_config",
    "set_diagnostics_config",
]
