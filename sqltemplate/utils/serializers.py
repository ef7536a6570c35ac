"""JSON serialization utilities for sqltemplate.

Backed by ``msgspec.json``; used for JSON parameter binding, JSON column
decoding and the structured log formatter.
"""

from typing import Any, Literal, Union, overload

import msgspec

__all__ = ("from_json", "to_json")

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


@overload
def to_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def to_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def to_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to JSON string or bytes.

    Args:
        data: Data to encode.
        as_bytes: Whether to return bytes instead of string.

    Returns:
        JSON string or bytes representation based on as_bytes parameter.
    """
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def from_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON string or bytes into Python objects."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _decoder.decode(data)
