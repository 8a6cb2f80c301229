"""
Unit-тесты для конфигурации диагностики.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Iterator, List

import pytest

from src import load_config
from src.security.ipsec.config import (
    BUILD_TYPE_ENV,
    BuildType,
    DiagnosticsConfig,
    get_diagnostics_config,
    set_diagnostics_config,
)


@pytest.fixture(autouse=True)
def _reset(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(BUILD_TYPE_ENV, raising=False)
    set_diagnostics_config(None)
    yield
    set_diagnostics_config(None)


class TestBuildType:
    def test_debuggable(self) -> None:
        assert not BuildType.USER.is_debuggable()
        assert BuildType.USERDEBUG.is_debuggable()
        assert BuildType.ENG.is_debuggable()

    @pytest.mark.parametrize("value", ["eng", "ENG", " Eng "])
    def test_from_str_case_insensitive(self, value: str) -> None:
        assert BuildType.from_str(value) is BuildType.ENG

    def test_from_str_invalid(self) -> None:
        with pytest.raises(ValueError, match="Unknown build type"):
            BuildType.from_str("debug")


class TestDiagnosticsConfig:
    def test_defaults(self) -> None:
        cfg = DiagnosticsConfig()
        assert cfg.build_type is BuildType.USER
        assert cfg.reveal_secrets is False

    @pytest.mark.parametrize("build_type", [BuildType.USERDEBUG, BuildType.ENG])
    def test_debuggable_builds_reveal_by_default(self, build_type: BuildType) -> None:
        assert DiagnosticsConfig(build_type).reveal_secrets is True

    def test_debuggable_build_may_opt_out(self) -> None:
        assert DiagnosticsConfig(BuildType.ENG, reveal_secrets=False).reveal_secrets is False

    def test_user_build_cannot_reveal(self) -> None:
        with pytest.raises(ValueError, match="debuggable"):
            DiagnosticsConfig(BuildType.USER, reveal_secrets=True)

    def test_build_type_must_be_enum(self) -> None:
        with pytest.raises(TypeError):
            DiagnosticsConfig("eng")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cfg = DiagnosticsConfig()
        with pytest.raises(AttributeError):
            cfg.reveal_secrets = True  # type: ignore[misc]

    def test_from_environment_unset(self) -> None:
        assert DiagnosticsConfig.from_environment() == DiagnosticsConfig()

    def test_from_environment_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BUILD_TYPE_ENV, "userdebug")
        cfg = DiagnosticsConfig.from_environment()
        assert cfg.build_type is BuildType.USERDEBUG
        assert cfg.reveal_secrets is True

    def test_from_environment_invalid_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BUILD_TYPE_ENV, "nonsense")
        assert DiagnosticsConfig.from_environment() == DiagnosticsConfig()

    def test_from_mapping(self) -> None:
        assert DiagnosticsConfig.from_mapping({}) == DiagnosticsConfig()
        cfg = DiagnosticsConfig.from_mapping({"build_type": "eng", "reveal_secrets": False})
        assert cfg.build_type is BuildType.ENG
        assert cfg.reveal_secrets is False

    def test_from_mapping_invalid(self) -> None:
        with pytest.raises(ValueError):
            DiagnosticsConfig.from_mapping({"build_type": "release"})


class TestActiveConfig:
    def test_lazy_environment_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(BUILD_TYPE_ENV, "eng")
        assert get_diagnostics_config().build_type is BuildType.ENG

    def test_set_and_reset(self) -> None:
        cfg = DiagnosticsConfig(BuildType.ENG)
        set_diagnostics_config(cfg)
        assert get_diagnostics_config() is cfg
        set_diagnostics_config(None)
        assert get_diagnostics_config() == DiagnosticsConfig()

    def test_set_rejects_other_types(self) -> None:
        with pytest.raises(TypeError):
            set_diagnostics_config({"build_type": "eng"})  # type: ignore[arg-type]

    def test_concurrent_reads_see_single_instance(self) -> None:
        seen: List[DiagnosticsConfig] = []
        lock = threading.Lock()

        def worker() -> None:
            cfg = get_diagnostics_config()
            with lock:
                seen.append(cfg)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 16
        assert all(cfg is seen[0] for cfg in seen)


def test_from_loaded_config_file(tmp_path: Path) -> None:
    path = tmp_path / "ipsec_config.json"
    path.write_text(json.dumps({"build_type": "userdebug"}), encoding="utf-8")
    cfg = DiagnosticsConfig.from_mapping(load_config(path))
    assert cfg.build_type is BuildType.USERDEBUG
    assert cfg.reveal_secrets is True


def test_environment_does_not_change_loaded_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(BUILD_TYPE_ENV, "eng")
    assert DiagnosticsConfig.from_environment().build_type is BuildType.ENG
    config = load_config(tmp_path / "absent.json")
    assert DiagnosticsConfig.from_mapping(config).build_type is BuildType.USER
