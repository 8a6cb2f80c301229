"""
Исключения модуля IPsec-алгоритмов.

Иерархия:
    IpSecError (базовое)
    ├── InvalidArgumentError   (также ValueError)
    └── RecordFormatError
        └── TruncatedRecordError

Security Note:
    Исключения НЕ раскрывают ключевой материал. В context допускаются
    только имя алгоритма, длины и смещения.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
    "IpSecError",
    "InvalidArgumentError",
    "RecordFormatError",
    "TruncatedRecordError",
]


class IpSecError(Exception):
    """
    Базовое исключение для всех ошибок модуля.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        algorithm: Имя алгоритма, вызвавшего ошибку (опционально)
        context: Дополнительный контекст без секретов (опционально)

    Example:
        >>> try:
        ...     IpSecAlgorithm("cbc(aes)", key, 100)
        ... except IpSecError as e:
        ...     logger.error("Invalid descriptor: %s", e)
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.algorithm = algorithm
        self.context = context or {}

    def __str__(self) -> str:
        parts = [self.__class__.__name__, ": ", self.message]

        if self.algorithm:
            parts.append(f" [algorithm={self.algorithm}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        """Представление для отладки."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"algorithm={self.algorithm!r}, "
            f"context={self.context!r})"
        )


class InvalidArgumentError(IpSecError, ValueError):
    """
    Неизвестный алгоритм или недопустимая длина усечения.

    Выбрасывается синхронно при валидирующем создании IpSecAlgorithm.
    Наследует ValueError, поэтому перехватывается и стандартным
    обработчиком некорректных аргументов.

    Example:
        >>> raise InvalidArgumentError(
        ...     "Unknown algorithm or invalid length",
        ...     algorithm="cbc(aes)",
        ...     context={"truncation_length_bits": 100},
        ... )
    """

    pass


class RecordFormatError(IpSecError):
    """
    Повреждённая или некорректная сериализованная запись.

    Отличается от InvalidArgumentError: десериализация не валидирует
    параметры алгоритма, а только структуру записи.
    """

    pass


class TruncatedRecordError(RecordFormatError):
    """Запись закончилась раньше, чем ожидалось."""

    def __init__(self, needed: int, available: int, offset: int) -> None:
        super().__init__(
            "Record is truncated",
            context={"needed": needed, "available": available, "offset": offset},
        )
        self.needed = needed
        self.available = available
        self.offset = offset
