# -*- coding: utf-8 -*-
"""
RU: Закрытый набор идентификаторов IPsec-алгоритмов и таблица правил
допустимых длин усечения (ICV).
EN: Closed set of IPsec algorithm identifiers and the truncation-length
rule table.

Identifiers follow the kernel XFRM naming ("cbc(aes)", "hmac(sha256)",
"rfc4106(gcm(aes))"). Upper bounds of HMAC rules are the digest sizes of the
underlying hash functions.

Example:
    >>> is_truncation_length_valid("hmac(sha256)", 128)
    True
    >>> is_truncation_length_valid("cbc(aes)", 100)
    False
    >>> AlgorithmName.from_str("rfc4106(gcm(aes))").category()
    <AlgorithmCategory.AUTHENTICATED_ENCRYPTION: 'authenticated_encryption'>

See also:
    RFC 4301 (Security Architecture for IP), RFC 4106 (GCM in ESP).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, FrozenSet, Optional, Tuple, Union

from cryptography.hazmat.primitives import hashes

from src.security.ipsec.exceptions import InvalidArgumentError

__all__ = [
    "AlgorithmCategory",
    "AlgorithmName",
    "TruncationRule",
    "AES_CBC_KEY_LENGTHS_BITS",
    "GCM_KEY_LENGTHS_BITS",
    "GCM_SALT_LENGTH_BITS",
    "rule_for",
    "is_truncation_length_valid",
    "supported_algorithms",
]


# ==============================================================================
# ENUM: ALGORITHM CATEGORY
# ==============================================================================


class AlgorithmCategory(str, Enum):
    """Роль алгоритма в IPsec-трансформе."""

    ENCRYPTION = "encryption"
    AUTHENTICATION = "authentication"
    AUTHENTICATED_ENCRYPTION = "authenticated_encryption"

    def label(self) -> str:
        """Человекочитаемое название категории на русском."""
        labels = {
            AlgorithmCategory.ENCRYPTION: "Шифрование",
            AlgorithmCategory.AUTHENTICATION: "Аутентификация",
            AlgorithmCategory.AUTHENTICATED_ENCRYPTION: "Аутентифицированное шифрование",
        }
        return labels[self]


# ==============================================================================
# ENUM: ALGORITHM NAME
# ==============================================================================


class AlgorithmName(str, Enum):
    """
    Поддерживаемые идентификаторы алгоритмов.

    Наследует str: член enum можно передавать везде, где ожидается
    строковый идентификатор.

    Note:
        HMAC-MD5 и HMAC-SHA1 оставлены только для совместимости
        с инфраструктурой 3GPP и не рекомендуются для новых систем.
    """

    # AES-CBC, encryption only. Key lengths {128, 192, 256}.
    CRYPT_AES_CBC = "cbc(aes)"
    AUTH_HMAC_MD5 = "hmac(md5)"
    AUTH_HMAC_SHA1 = "hmac(sha1)"
    AUTH_HMAC_SHA256 = "hmac(sha256)"
    AUTH_HMAC_SHA384 = "hmac(sha384)"
    AUTH_HMAC_SHA512 = "hmac(sha512)"
    # AES-GCM per RFC 4106: AES key followed by a 32-bit salt.
    AUTH_CRYPT_AES_GCM = "rfc4106(gcm(aes))"

    @classmethod
    def from_str(cls, value: str) -> AlgorithmName:
        """
        Парсинг идентификатора (точное совпадение).

        Raises:
            InvalidArgumentError: Неизвестный идентификатор
        """
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(
                "Unknown algorithm",
                context={"supported": ", ".join(m.value for m in cls)},
            ) from None

    def category(self) -> AlgorithmCategory:
        return _CATEGORIES[self]

    def is_legacy(self) -> bool:
        """True для алгоритмов, оставленных только ради совместимости."""
        return self in (AlgorithmName.AUTH_HMAC_MD5, AlgorithmName.AUTH_HMAC_SHA1)

    def rule(self) -> TruncationRule:
        return _RULES[self.value]

    def default_truncation_length_bits(self) -> int:
        """Наибольшая допустимая длина усечения (значение по умолчанию)."""
        return self.rule().maximum


_CATEGORIES: Final[dict[AlgorithmName, AlgorithmCategory]] = {
    AlgorithmName.CRYPT_AES_CBC: AlgorithmCategory.ENCRYPTION,
    AlgorithmName.AUTH_HMAC_MD5: AlgorithmCategory.AUTHENTICATION,
    AlgorithmName.AUTH_HMAC_SHA1: AlgorithmCategory.AUTHENTICATION,
    AlgorithmName.AUTH_HMAC_SHA256: AlgorithmCategory.AUTHENTICATION,
    AlgorithmName.AUTH_HMAC_SHA384: AlgorithmCategory.AUTHENTICATION,
    AlgorithmName.AUTH_HMAC_SHA512: AlgorithmCategory.AUTHENTICATION,
    AlgorithmName.AUTH_CRYPT_AES_GCM: AlgorithmCategory.AUTHENTICATED_ENCRYPTION,
}


# ==============================================================================
# DATACLASS: TRUNCATION RULE
# ==============================================================================


@dataclass(frozen=True)
class TruncationRule:
    """
    Допустимые длины усечения для одного алгоритма.

    Либо перечисление (allowed), либо включительный диапазон
    [minimum, maximum].

    Example:
        >>> TruncationRule.between(96, 128).allows(100)
        True
        >>> TruncationRule.one_of(64, 96, 128).allows(100)
        False
    """

    minimum: int
    maximum: int
    allowed: Optional[FrozenSet[int]] = None

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(
                f"minimum ({self.minimum}) must be <= maximum ({self.maximum})"
            )
        if self.allowed is not None:
            if not self.allowed:
                raise ValueError("allowed must not be empty")
            if min(self.allowed) != self.minimum or max(self.allowed) != self.maximum:
                raise ValueError("allowed must span exactly [minimum, maximum]")

    @classmethod
    def between(cls, minimum: int, maximum: int) -> TruncationRule:
        return cls(minimum=minimum, maximum=maximum)

    @classmethod
    def one_of(cls, *values: int) -> TruncationRule:
        allowed = frozenset(values)
        return cls(minimum=min(allowed), maximum=max(allowed), allowed=allowed)

    @property
    def is_enumerated(self) -> bool:
        return self.allowed is not None

    def allows(self, bits: int) -> bool:
        if self.allowed is not None:
            return bits in self.allowed
        return self.minimum <= bits <= self.maximum

    def lengths(self) -> Tuple[int, ...]:
        """Все допустимые длины в порядке возрастания."""
        if self.allowed is not None:
            return tuple(sorted(self.allowed))
        return tuple(range(self.minimum, self.maximum + 1))

    def describe(self) -> str:
        if self.allowed is not None:
            return "{" + ", ".join(str(v) for v in self.lengths()) + "}"
        return f"{self.minimum}-{self.maximum}"


def _hmac_rule(minimum: int, digest: hashes.HashAlgorithm) -> TruncationRule:
    return TruncationRule.between(minimum, digest.digest_size * 8)


_RULES: Final[dict[str, TruncationRule]] = {
    AlgorithmName.CRYPT_AES_CBC.value: TruncationRule.one_of(128, 192, 256),
    AlgorithmName.AUTH_HMAC_MD5.value: _hmac_rule(96, hashes.MD5()),
    AlgorithmName.AUTH_HMAC_SHA1.value: _hmac_rule(96, hashes.SHA1()),
    AlgorithmName.AUTH_HMAC_SHA256.value: _hmac_rule(96, hashes.SHA256()),
    AlgorithmName.AUTH_HMAC_SHA384.value: _hmac_rule(192, hashes.SHA384()),
    AlgorithmName.AUTH_HMAC_SHA512.value: _hmac_rule(256, hashes.SHA512()),
    AlgorithmName.AUTH_CRYPT_AES_GCM.value: TruncationRule.one_of(64, 96, 128),
}

# Informational only, never enforced on the key.
AES_CBC_KEY_LENGTHS_BITS: Final[FrozenSet[int]] = frozenset({128, 192, 256})
GCM_SALT_LENGTH_BITS: Final[int] = 32
GCM_KEY_LENGTHS_BITS: Final[FrozenSet[int]] = frozenset(
    bits + GCM_SALT_LENGTH_BITS for bits in AES_CBC_KEY_LENGTHS_BITS
)


# ==============================================================================
# LOOKUP
# ==============================================================================


def rule_for(name: Union[AlgorithmName, str]) -> Optional[TruncationRule]:
    """Правило для идентификатора или None, если алгоритм неизвестен."""
    if isinstance(name, AlgorithmName):
        return _RULES[name.value]
    if not isinstance(name, str):
        return None
    return _RULES.get(name)


def is_truncation_length_valid(name: Union[AlgorithmName, str], bits: int) -> bool:
    """
    Проверить пару (алгоритм, длина усечения) по таблице правил.

    Никогда не выбрасывает исключений: неизвестный алгоритм даёт False.
    """
    rule = rule_for(name)
    return rule is not None and rule.allows(bits)


def supported_algorithms() -> Tuple[str, ...]:
    return tuple(member.value for member in AlgorithmName)
