"""Helpers for building already-encoded RPC params.

The node expects integers and strings as ``0x``-prefixed hex. Topic lists may be
flat (AND between terms) or nested one level (OR inside each inner list).
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from whisperbox.utils.exceptions import ValidationError

Transform = Callable[[Any], Any]


def to_hex(value: Any) -> Any:
    """Hex-encode an int, a str, or a list of lists of str."""
    if isinstance(value, bool):
        raise ValidationError(f"Unable to convert arg of type bool to hex: {value!r}")
    if isinstance(value, int):
        return hex(value)
    if isinstance(value, str):
        return "0x" + value.encode("utf-8").hex()
    if isinstance(value, list) and all(isinstance(inner, list) for inner in value):
        return [[to_hex(item) for item in inner] for inner in value]
    raise ValidationError(f"Unable to convert arg of type {type(value).__name__} to hex: {value!r}")


def no_transform(value: Any) -> Any:
    return value


def wrap_param(param: Any) -> list[Any]:
    return [param]


def single_param(param: Any, transform: Transform) -> Any:
    """Transform a value; a flat list of strings is transformed member by member."""
    if isinstance(param, list) and all(isinstance(item, str) for item in param):
        return [transform(item) for item in param]
    return transform(param)


def map_params(params: Mapping[str, Any], transform: Transform = no_transform) -> list[Any]:
    """Encode each value of ``params`` and wrap the mapping as a single positional param."""
    return wrap_param({key: single_param(value, transform) for key, value in params.items()})


def hex_topics(topics: Iterable[str]) -> list[str]:
    return [to_hex(topic) for topic in topics]
