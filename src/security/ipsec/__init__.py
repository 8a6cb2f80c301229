"""
RU: Дескрипторы алгоритмов IPsec-трансформ: валидация, хранение ключа,
сериализация и сравнение.
EN: IPsec transform algorithm descriptors.

Example:
    >>> from src.security.ipsec import AlgorithmName, IpSecAlgorithm
    >>> crypt = IpSecAlgorithm(AlgorithmName.CRYPT_AES_CBC, key)
    >>> auth = IpSecAlgorithm(AlgorithmName.AUTH_HMAC_SHA256, auth_key, 128)
"""

from src.security.ipsec.algorithms import (
    AES_CBC_KEY_LENGTHS_BITS,
    GCM_KEY_LENGTHS_BITS,
    GCM_SALT_LENGTH_BITS,
    AlgorithmCategory,
    AlgorithmName,
    TruncationRule,
    is_truncation_length_valid,
    rule_for,
    supported_algorithms,
)
from src.security.ipsec.config import (
    BuildType,
    DiagnosticsConfig,
    get_diagnostics_config,
    set_diagnostics_config,
)
from src.security.ipsec.exceptions import (
    InvalidArgumentError,
    IpSecError,
    RecordFormatError,
    TruncatedRecordError,
)
from src.security.ipsec.ipsec_algorithm import (
    IpSecAlgorithm,
    algorithms_equal,
    read_array,
    write_array,
)
from src.security.ipsec.record import RecordReader, RecordWriter

__all__ = [
    # Algorithms
    "AlgorithmCategory",
    "AlgorithmName",
    "TruncationRule",
    "AES_CBC_KEY_LENGTHS_BITS",
    "GCM_KEY_LENGTHS_BITS",
    "GCM_SALT_LENGTH_BITS",
    "is_truncation_length_valid",
    "rule_for",
    "supported_algorithms",
    # Descriptor
    "IpSecAlgorithm",
    "algorithms_equal",
    "read_array",
    "write_array",
    # Records
    "RecordReader",
    "RecordWriter",
    # Diagnostics
    "BuildType",
    "DiagnosticsConfig",
    "get_diagnostics_config",
    "set_diagnostics_config",
    # Errors
    "IpSecError",
    "InvalidArgumentError",
    "RecordFormatError",
    "TruncatedRecordError",
]
