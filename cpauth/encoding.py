"""Big-endian codecs for integers crossing the service boundary."""

from __future__ import annotations

from .exceptions import EncodingError


def int_to_bytes(value: int) -> bytes:
    if value < 0:
        raise EncodingError("Only non-negative integers can be encoded")
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def int_to_hex(value: int) -> str:
    """Hex form of the big-endian bytes, as carried in JSON bodies."""

    return int_to_bytes(value).hex()


def hex_to_int(text: str, *, field: str = "value") -> int:
    try:
        return bytes_to_int(bytes.fromhex(text))
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"{field} must be hex encoded big-endian bytes") from exc


__all__ = ["bytes_to_int", "hex_to_int", "int_to_bytes", "int_to_hex"]
