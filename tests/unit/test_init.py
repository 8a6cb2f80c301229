"""
Модульные тесты для src/__init__.py
Тестирует метаданные версии, конфигурацию и логирование пакета.
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterator

import pytest

import src as ipsec_pkg


@pytest.fixture
def package_level() -> Iterator[int]:
    """Восстановить уровень логгера пакета после теста."""
    logger = logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE)
    level = logger.level
    yield level
    logger.setLevel(level)


class TestVersionMetadata:
    """Тестирование метаданных версии и констант."""

    def test_version_format(self) -> None:
        assert re.match(r"^\d+\.\d+\.\d+$", ipsec_pkg.__version__)

    def test_version_components(self) -> None:
        expected_version = (
            f"{ipsec_pkg.VERSION_MAJOR}."
            f"{ipsec_pkg.VERSION_MINOR}."
            f"{ipsec_pkg.VERSION_PATCH}"
        )
        assert expected_version == ipsec_pkg.__version__


class TestLogging:
    """Тестирование get_logger и настройки логирования."""

    def test_package_logger_configured(self) -> None:
        root = logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE)
        assert root.handlers
        assert root.propagate is False

    def test_setup_is_idempotent(self) -> None:
        root = logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE)
        before = list(root.handlers)
        ipsec_pkg._setup_logging()
        assert root.handlers == before

    @pytest.mark.parametrize(
        "module_name,expected",
        [
            ("src.security.ipsec.record", "ipsec_algo.src.security.ipsec.record"),
            ("ipsec_algo.custom", "ipsec_algo.custom"),
            ("__main__", "ipsec_algo.main"),
            (".relative", "ipsec_algo.relative"),
        ],
    )
    def test_get_logger_namespacing(self, module_name: str, expected: str) -> None:
        assert ipsec_pkg.get_logger(module_name).name == expected


class TestLoadConfig:
    """Тестирование загрузки конфигурации."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        config = ipsec_pkg.load_config(tmp_path / "absent.json")
        assert config == {"log_level": "INFO", "build_type": "user"}

    def test_user_values_override_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"build_type": "eng", "extra": 1}), encoding="utf-8")
        config = ipsec_pkg.load_config(path)
        assert config["build_type"] == "eng"
        assert config["log_level"] == "INFO"
        assert config["extra"] == 1

    def test_invalid_json_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert ipsec_pkg.load_config(path)["build_type"] == "user"

    def test_non_object_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert ipsec_pkg.load_config(path)["build_type"] == "user"

    def test_log_level_from_file_is_applied(self, tmp_path: Path, package_level: int) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
        config = ipsec_pkg.load_config(path)
        assert config["log_level"] == "debug"
        assert logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE).level == logging.DEBUG

    def test_default_log_level_leaves_logger_untouched(
        self, tmp_path: Path, package_level: int
    ) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"build_type": "eng"}), encoding="utf-8")
        ipsec_pkg.load_config(path)
        assert logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE).level == package_level

    def test_unknown_log_level_returns_defaults(
        self, tmp_path: Path, package_level: int
    ) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"log_level": "VERBOSE", "build_type": "eng"}), encoding="utf-8"
        )
        assert ipsec_pkg.load_config(path) == {"log_level": "INFO", "build_type": "user"}
        assert logging.getLogger(ipsec_pkg.LOGGER_NAMESPACE).level == package_level

    def test_defaults_not_mutated(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"build_type": "eng"}), encoding="utf-8")
        ipsec_pkg.load_config(path)
        assert ipsec_pkg.load_config(tmp_path / "absent.json")["build_type"] == "user"


def test_check_dependencies() -> None:
    assert ipsec_pkg.check_dependencies() == {"cryptography": True}
