# -*- coding: utf-8 -*-
"""
RU: Неизменяемый дескриптор алгоритма IPsec-трансформы: имя алгоритма,
ключевой материал и длина усечения (ICV) в битах.
EN: Immutable descriptor of a single algorithm used by an IPsec transform.

Two ways to obtain an instance:

- ``IpSecAlgorithm(name, key, truncation_length_bits=None)`` validates the
  requested truncation length against the algorithm's rule, then clamps the
  stored value to the key bit-length.
- ``IpSecAlgorithm.from_trusted_record(...)`` and every deserialization path
  built on it (``read_from``, ``from_bytes``, ``from_dict``) restore a
  previously serialized state verbatim, without validation.

Key material is copied on the way in and never leaves the object as a shared
mutable buffer. ``repr()`` hides the key unless the active DiagnosticsConfig
allows revealing secrets.

Example:
    >>> algo = IpSecAlgorithm(AlgorithmName.CRYPT_AES_CBC, bytes(16))
    >>> algo.truncation_length_bits
    128
    >>> IpSecAlgorithm.from_bytes(algo.to_bytes()) == algo
    True
"""

from __future__ import annotations

from typing import Any, Dict, Final, List, Mapping, NoReturn, Optional, Sequence, Union

from src import get_logger
from src.security.ipsec.algorithms import (
    AlgorithmCategory,
    AlgorithmName,
    is_truncation_length_valid,
)
from src.security.ipsec.config import get_diagnostics_config
from src.security.ipsec.exceptions import InvalidArgumentError, RecordFormatError
from src.security.ipsec.record import INT32_MAX, INT32_MIN, RecordReader, RecordWriter
from src.security.ipsec.utils import BytesLike, b64_decode, b64_encode, hex_encode, secure_compare

_LOGGER: Final = get_logger(__name__)

_HIDDEN_KEY: Final[str] = "<hidden>"
_INVALID_MESSAGE: Final[str] = "Unknown algorithm or invalid length"

__all__ = [
    "IpSecAlgorithm",
    "algorithms_equal",
    "write_array",
    "read_array",
]


def _name_value(name: Union[AlgorithmName, str]) -> str:
    if isinstance(name, AlgorithmName):
        return name.value
    if isinstance(name, str):
        return name
    raise TypeError(f"algorithm name must be str, got {type(name).__name__}")


def _copy_key(key: BytesLike) -> bytes:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError(f"key must be bytes-like, got {type(key).__name__}")
    return bytes(key)


def _check_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be int, got {type(value).__name__}")
    return value


class IpSecAlgorithm:
    """
    Алгоритм, применяемый IPsec-трансформой.

    Attributes:
        name: Идентификатор алгоритма (например, "hmac(sha256)")
        key: Ключевой материал (неизменяемая копия)
        truncation_length_bits: Используемое число бит выхода алгоритма

    Raises:
        InvalidArgumentError: Неизвестный алгоритм или длина усечения вне
            допустимого набора/диапазона (проверяется исходное значение,
            до усечения по длине ключа)
        TypeError: Ключ не bytes-like, длина не int

    Example:
        >>> gcm = IpSecAlgorithm(AlgorithmName.AUTH_CRYPT_AES_GCM, bytes(20), 128)
        >>> gcm.key_length_bits
        160
    """

    __slots__ = ("_name", "_key", "_truncation_length_bits")

    _name: str
    _key: bytes
    _truncation_length_bits: int

    def __init__(
        self,
        name: Union[AlgorithmName, str],
        key: BytesLike,
        truncation_length_bits: Optional[int] = None,
    ) -> None:
        name_value = _name_value(name)
        key_copy = _copy_key(key)
        key_bits = len(key_copy) * 8
        if truncation_length_bits is None:
            requested = key_bits
        else:
            requested = _check_int(truncation_length_bits, "truncation_length_bits")

        if not is_truncation_length_valid(name_value, requested):
            _LOGGER.debug(
                "Rejected algorithm=%s truncation_length_bits=%d", name_value, requested
            )
            raise InvalidArgumentError(
                _INVALID_MESSAGE,
                algorithm=name_value,
                context={"truncation_length_bits": requested},
            )

        self._assign(name_value, key_copy, min(requested, key_bits))

    def _assign(self, name: str, key: bytes, truncation_length_bits: int) -> None:
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_truncation_length_bits", truncation_length_bits)

    def __setattr__(self, attr: str, value: Any) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, attr: str) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Trusted reconstruction
    # ------------------------------------------------------------------

    @classmethod
    def from_trusted_record(
        cls, name: str, key: BytesLike, truncation_length_bits: int
    ) -> IpSecAlgorithm:
        """
        Восстановить дескриптор из ранее сериализованного состояния.

        Правила алгоритма НЕ проверяются: значения принимаются как есть.
        Проверяются только типы полей и то, что длина усечения помещается
        в int32 двоичной записи.

        Raises:
            RecordFormatError: truncation_length_bits вне диапазона int32
        """
        truncation = _check_int(truncation_length_bits, "truncation_length_bits")
        if not INT32_MIN <= truncation <= INT32_MAX:
            raise RecordFormatError(
                "truncation_length_bits does not fit into int32",
                context={"truncation_length_bits": truncation},
            )
        instance = cls.__new__(cls)
        instance._assign(_name_value(name), _copy_key(key), truncation)
        _LOGGER.debug("Restored algorithm=%s from trusted record", instance._name)
        return instance

    def __reduce__(self) -> Any:
        return (_restore, (self._name, self._key, self._truncation_length_bits))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def key(self) -> bytes:
        """Ключевой материал. bytes неизменяемы, поэтому копия не нужна."""
        return self._key

    @property
    def truncation_length_bits(self) -> int:
        return self._truncation_length_bits

    @property
    def key_length_bits(self) -> int:
        return len(self._key) * 8

    @property
    def category(self) -> Optional[AlgorithmCategory]:
        """Категория алгоритма; None для имени из непроверенной записи."""
        try:
            return AlgorithmName(self._name).category()
        except ValueError:
            return None

    def get_name(self) -> str:
        return self._name

    def get_key(self) -> bytearray:
        """Новая изменяемая копия ключа при каждом вызове."""
        return bytearray(self._key)

    def get_truncation_length_bits(self) -> int:
        return self._truncation_length_bits

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def write_to(self, writer: RecordWriter) -> None:
        """Записать тройку (name, key, truncation_length_bits) в этом порядке."""
        writer.write_string(self._name)
        writer.write_byte_array(self._key)
        writer.write_int(self._truncation_length_bits)

    @classmethod
    def read_from(cls, reader: RecordReader) -> IpSecAlgorithm:
        """
        Прочитать дескриптор, записанный write_to().

        Raises:
            RecordFormatError: Повреждённая запись или отсутствующее поле
        """
        name = reader.read_string()
        key = reader.read_byte_array()
        truncation_length_bits = reader.read_int()
        if name is None or key is None:
            raise RecordFormatError(
                "Algorithm record is missing a field",
                context={"has_name": name is not None, "has_key": key is not None},
            )
        return cls.from_trusted_record(name, key, truncation_length_bits)

    def to_bytes(self) -> bytes:
        writer = RecordWriter()
        self.write_to(writer)
        return writer.to_bytes()

    @classmethod
    def from_bytes(cls, data: BytesLike) -> IpSecAlgorithm:
        """Прочитать ровно одну запись; лишние байты считаются ошибкой."""
        reader = RecordReader(data)
        algorithm = cls.read_from(reader)
        reader.finish()
        return algorithm

    def to_dict(self) -> Dict[str, Any]:
        """
        Сериализация в словарь (для JSON). Ключ кодируется в base64.

        Example:
            >>> algo.to_dict()
            {'name': 'cbc(aes)', 'key': 'AAAAAAAAAAAAAAAAAAAAAA==', 'truncation_length_bits': 128}
        """
        return {
            "name": self._name,
            "key": b64_encode(self._key),
            "truncation_length_bits": self._truncation_length_bits,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IpSecAlgorithm:
        """
        Десериализация из словаря to_dict() без проверки правил алгоритма.

        Raises:
            RecordFormatError: Отсутствует поле или неверный тип/кодировка
        """
        missing = [f for f in ("name", "key", "truncation_length_bits") if f not in data]
        if missing:
            raise RecordFormatError(
                "Algorithm mapping is missing fields", context={"missing": ", ".join(missing)}
            )
        name = data["name"]
        encoded_key = data["key"]
        truncation_length_bits = data["truncation_length_bits"]
        if not isinstance(name, str) or not isinstance(encoded_key, str):
            raise RecordFormatError("Algorithm mapping fields name and key must be strings")
        if isinstance(truncation_length_bits, bool) or not isinstance(truncation_length_bits, int):
            raise RecordFormatError("Algorithm mapping truncation_length_bits must be int")
        try:
            key = b64_decode(encoded_key)
        except ValueError:
            raise RecordFormatError("Algorithm mapping key is not valid base64") from None
        return cls.from_trusted_record(name, key, truncation_length_bits)

    # ------------------------------------------------------------------
    # Equality and diagnostics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IpSecAlgorithm):
            return NotImplemented
        return (
            self._name == other._name
            and self._truncation_length_bits == other._truncation_length_bits
            and secure_compare(self._key, other._key)
        )

    def __hash__(self) -> int:
        return hash((self._name, self._key, self._truncation_length_bits))

    def to_debug_string(self, *, reveal_key: bool = False) -> str:
        """
        Человекочитаемое представление.

        Args:
            reveal_key: Показать ключ в hex. Только для отладочных сборок.
        """
        key_repr = hex_encode(self._key, upper=True) if reveal_key else _HIDDEN_KEY
        return (
            f"{{name={self._name}, key={key_repr}, "
            f"truncation_length_bits={self._truncation_length_bits}}}"
        )

    def __repr__(self) -> str:
        return self.to_debug_string(reveal_key=bool(get_diagnostics_config().reveal_secrets))

    __str__ = __repr__


def _restore(name: str, key: bytes, truncation_length_bits: int) -> IpSecAlgorithm:
    return IpSecAlgorithm.from_trusted_record(name, key, truncation_length_bits)


def algorithms_equal(lhs: Optional[IpSecAlgorithm], rhs: Optional[IpSecAlgorithm]) -> bool:
    """Равенство, в котором None равен только None."""
    if lhs is None or rhs is None:
        return lhs is rhs
    return lhs == rhs


def write_array(writer: RecordWriter, items: Sequence[Optional[IpSecAlgorithm]]) -> None:
    """
    Записать последовательность дескрипторов.

    Формат: [count:int] затем для каждого элемента [present:int] и,
    если present == 1, запись дескриптора.
    """
    writer.write_int(len(items))
    for item in items:
        if item is None:
            writer.write_int(0)
        else:
            writer.write_int(1)
            item.write_to(writer)


def read_array(reader: RecordReader) -> List[Optional[IpSecAlgorithm]]:
    """
    Прочитать последовательность, записанную write_array().

    Raises:
        RecordFormatError: Отрицательное число элементов или неверный флаг
    """
    count = reader.read_int()
    if count < 0:
        raise RecordFormatError("Negative array length", context={"count": count})
    items: List[Optional[IpSecAlgorithm]] = []
    for index in range(count):
        present = reader.read_int()
        if present == 0:
            items.append(None)
        elif present == 1:
            items.append(IpSecAlgorithm.read_from(reader))
        else:
            raise RecordFormatError(
                "Invalid presence flag", context={"index": index, "flag": present}
            )
    return items

