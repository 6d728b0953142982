"""Bencoding facade and checked accessors for decoded values.

Encoding and decoding are delegated to the ``bencode.py`` distribution
(imported as ``bencodepy``). Decoded values form a tree of ``bytes``, ``int``,
``list`` and ``dict`` keyed by ``bytes``; the accessors below turn field
lookups on that tree into typed projections that raise instead of assuming a
shape.
"""

from __future__ import annotations

from typing import Any, Union

import bencodepy

from btannounce.utils.exceptions import BencodeError

Value = Union[bytes, int, list, dict]

_MISSING = object()


def decode(data: bytes) -> Value:
    """Decode bencoded bytes into a value tree.

    Raises:
        BencodeError: If ``data`` is not valid bencoding

    """
    if not isinstance(data, (bytes, bytearray)):
        msg = f"Expected bytes to decode, got {type(data).__name__}"
        raise BencodeError(msg)
    try:
        return bencodepy.decode(bytes(data))
    except Exception as e:
        msg = f"Invalid bencoded data: {e}"
        raise BencodeError(msg) from e


def encode(value: Value) -> bytes:
    """Encode a value tree into canonical bencoded bytes.

    Raises:
        BencodeError: If ``value`` contains a type bencoding cannot represent

    """
    try:
        return bencodepy.encode(value)
    except Exception as e:
        msg = f"Cannot bencode value: {e}"
        raise BencodeError(msg) from e


def _lookup(mapping: dict, key: bytes, default: Any) -> Any:
    if not isinstance(mapping, dict):
        msg = f"Expected a dictionary, got {type(mapping).__name__}"
        raise BencodeError(msg)
    value = mapping.get(key, _MISSING)
    if value is _MISSING:
        if default is _MISSING:
            msg = f"Missing key: {key.decode('utf-8', errors='replace')}"
            raise BencodeError(msg, {"key": key})
        return default
    return value


def _check(value: Any, expected: type, key: bytes) -> Any:
    # bool is an int subclass but never produced by the decoder
    if not isinstance(value, expected) or isinstance(value, bool):
        msg = (
            f"Key {key.decode('utf-8', errors='replace')} has type "
            f"{type(value).__name__}, expected {expected.__name__}"
        )
        raise BencodeError(msg, {"key": key})
    return value


def get_dict(mapping: dict, key: bytes, default: Any = _MISSING) -> dict:
    """Return ``mapping[key]`` checked to be a dictionary."""
    value = _lookup(mapping, key, default)
    if value is default:
        return value
    return _check(value, dict, key)


def get_list(mapping: dict, key: bytes, default: Any = _MISSING) -> list:
    """Return ``mapping[key]`` checked to be a list."""
    value = _lookup(mapping, key, default)
    if value is default:
        return value
    return _check(value, list, key)


def get_bytes(mapping: dict, key: bytes, default: Any = _MISSING) -> bytes:
    """Return ``mapping[key]`` checked to be a byte string."""
    value = _lookup(mapping, key, default)
    if value is default:
        return value
    return _check(value, bytes, key)


def get_int(mapping: dict, key: bytes, default: Any = _MISSING) -> int:
    """Return ``mapping[key]`` checked to be an integer."""
    value = _lookup(mapping, key, default)
    if value is default:
        return value
    return _check(value, int, key)


def get_text(
    mapping: dict,
    key: bytes,
    default: Any = _MISSING,
    encoding: str = "utf-8",
) -> str:
    """Return ``mapping[key]`` as text, decoding the byte string strictly."""
    value = get_bytes(mapping, key, default)
    if value is default:
        return value
    try:
        return value.decode(encoding)
    except UnicodeDecodeError as e:
        msg = f"Key {key.decode('utf-8', errors='replace')} is not valid {encoding}"
        raise BencodeError(msg, {"key": key}) from e


__all__ = [
    "Value",
    "decode",
    "encode",
    "get_bytes",
    "get_dict",
    "get_int",
    "get_list",
    "get_text",
]
