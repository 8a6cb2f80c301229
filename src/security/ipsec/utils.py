# -*- coding: utf-8 -*-
"""
RU: Вспомогательные функции: сравнение в константное время и кодеки
Base64/Hex для ключевого материала.
"""
from __future__ import annotations

import base64
import binascii
import hmac
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def secure_compare(a: BytesLike, b: BytesLike) -> bool:
    """
    Constant-time bytes comparison.

    Args:
        a: first bytes sequence.
        b: second bytes sequence.

    Returns:
        True if sequences are equal, False otherwise.
    """
    return hmac.compare_digest(bytes(a), bytes(b))


def b64_encode(data: BytesLike) -> str:
    """Encode bytes to base64 ASCII string (no newlines)."""
    return base64.b64encode(bytes(data)).decode("ascii")


def b64_decode(text: str) -> bytes:
    """
    Decode base64 ASCII string to bytes.

    Raises:
        ValueError: on invalid base64.
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64: {e.__class__.__name__}") from None


def hex_encode(data: BytesLike, *, upper: bool = False) -> str:
    """
    Encode bytes to hexadecimal string.

    Args:
        data: bytes to encode.
        upper: produce upper-case digits.
    """
    out = bytes(data).hex()
    return out.upper() if upper else out


__all__ = [
    "BytesLike",
    "secure_compare",
    "b64_encode",
    "b64_decode",
    "hex_encode",
]
