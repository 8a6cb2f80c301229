"""
Пакет IPsec Algorithm
=====================

Неизменяемые дескрипторы алгоритмов для IPsec-трансформ.

Этот пакет предоставляет:
    - Закрытый набор идентификаторов алгоритмов (AES-CBC, HMAC-*, AES-GCM)
    - Валидацию длины усечения (ICV) по таблице правил алгоритма
    - Точную сериализацию дескрипторов в двоичную запись и в словарь
    - Отладочное представление со скрытием ключевого материала

Пример базового использования:
    >>> from src import get_logger
    >>> from src.security.ipsec import IpSecAlgorithm, AlgorithmName
    >>>
    >>> logger = get_logger(__name__)
    >>> auth = IpSecAlgorithm(AlgorithmName.AUTH_HMAC_SHA256, key, 128)
    >>> logger.info("Configured %r", auth)   # ключ скрыт в user-сборке

Управление конфигурацией:
    >>> import os
    >>> os.environ['IPSEC_BUILD_TYPE'] = 'eng'
    >>>
    >>> from src.security.ipsec import DiagnosticsConfig
    >>> DiagnosticsConfig.from_environment().build_type
    <BuildType.ENG: 'eng'>
    >>>
    >>> from src import load_config
    >>> config = load_config()          # ipsec_config.json, если есть
    >>> DiagnosticsConfig.from_mapping(config).build_type
    <BuildType.USER: 'user'>

Лицензия: MIT
Python: 3.9+
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "IPsec Algorithm Development Team"
__description__ = "Immutable, validated algorithm descriptors for IPsec transforms"
__license__ = "MIT"
__python_requires__ = ">=3.9"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 9):
    raise RuntimeError(
        f"IPsec Algorithm требует Python 3.9 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

LOGGER_NAMESPACE = "ipsec_algo"

_LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _setup_logging() -> None:
    """
    Инициализировать общепакетную конфигурацию логирования.

    Настраивает логгер пакета с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком, если задана переменная
      окружения IPSEC_LOG_FILE
    - Форматом с временной меткой, уровнем, модулем и сообщением

    Уровень логирования задаётся переменной окружения IPSEC_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR, CRITICAL). Функция идемпотентна.
    """
    log_level_str = os.environ.get("IPSEC_LOG_LEVEL", "INFO").upper()
    log_level = _LOG_LEVELS.get(log_level_str, logging.INFO)

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    if root_logger.handlers:
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt=("[%(asctime)s] %(levelname)-8s " "[%(name)s.%(funcName)s:%(lineno)d] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file = os.environ.get("IPSEC_LOG_FILE")
    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=10 * 1024 * 1024,  # 10 МБ
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(
                "Не удалось инициализировать файловое логирование: %s. "
                "Используется только консоль.",
                e,
            )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер модуля в пространстве имён пакета.

    Логгеры именуются как 'ipsec_algo.<module_name>' и наследуют
    обработчики логгера пакета.

    Аргументы:
        module_name: Обычно `__name__` вызывающего модуля.

    Пример:
        >>> logger = get_logger("src.security.ipsec.record")
        >>> logger.name
        'ipsec_algo.src.security.ipsec.record'
    """
    if module_name.startswith(LOGGER_NAMESPACE):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{LOGGER_NAMESPACE}.main")
    clean_name = module_name.lstrip(".")
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{clean_name}")


# =============================================================================
# УПРАВЛЕНИЕ КОНФИГУРАЦИЕЙ
# =============================================================================

_DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "INFO",
    "build_type": "user",
}


def _apply_log_level(level_name: Any) -> None:
    """Установить уровень логгера пакета из значения конфигурации."""
    level = _LOG_LEVELS.get(str(level_name).upper())
    if level is None:
        raise ValueError(f"Неизвестный уровень логирования: {level_name!r}")
    logging.getLogger(LOGGER_NAMESPACE).setLevel(level)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить конфигурацию из JSON-файла или использовать значения
    по умолчанию.

    Ключи конфигурации:
        - log_level: str - Уровень логирования; если задан в файле,
          применяется к логгеру пакета (переопределяет IPSEC_LOG_LEVEL)
        - build_type: str - Тип сборки (user, userdebug, eng); определяет,
          может ли диагностика раскрывать ключевой материал

    Аргументы:
        config_path: Путь к файлу. Если None, ищет 'ipsec_config.json'
                    в текущем каталоге.

    Возвращает:
        Словарь со всеми ключами по умолчанию, переопределёнными
        пользовательскими значениями.

    Примечание:
        Отсутствующий или повреждённый файл не является ошибкой:
        записывается предупреждение и возвращаются значения по умолчанию.
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path("ipsec_config.json")

    config = _DEFAULT_CONFIG.copy()

    if not config_path.exists():
        logger.info(
            "Файл конфигурации %s не найден. Используется конфигурация по умолчанию.",
            config_path,
        )
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            raise ValueError(
                f"Файл конфигурации должен содержать JSON-объект, "
                f"получен {type(user_config).__name__}"
            )

        if "log_level" in user_config:
            _apply_log_level(user_config["log_level"])

        config.update(user_config)
        logger.info("Конфигурация загружена из %s", config_path)
        logger.debug("Конфигурация: %s", config)

    except json.JSONDecodeError as e:
        logger.warning(
            "Не удалось разобрать %s: недопустимый JSON в строке %d, столбце %d. "
            "Используется конфигурация по умолчанию.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning(
            "Не удалось прочитать %s: %s. Используется конфигурация по умолчанию.",
            config_path,
            e,
        )
    except ValueError as e:
        logger.warning(
            "Недопустимый формат конфигурации: %s. Используется конфигурация по умолчанию.",
            e,
        )

    return config


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить, установлены ли зависимости пакета.

    Возвращает словарь состояний вместо исключений.

    Пример:
        >>> check_dependencies()
        {'cryptography': True}
    """
    dependencies: Dict[str, bool] = {}

    try:
        import cryptography  # noqa: F401

        dependencies["cryptography"] = True
    except ImportError:
        dependencies["cryptography"] = False

    return dependencies


_setup_logging()

__all__ = [
    "__version__",
    "LOGGER_NAMESPACE",
    "get_logger",
    "load_config",
    "check_dependencies",
]
