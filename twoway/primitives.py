"""
Leaf codecs for JSON scalars and literal constants.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .core import Codec
from .types import Err, Ok


def _identity(x: Any) -> Any:
    return x


def _of_kind(name: str, check: Callable[[Any], bool]) -> Codec:
    message = f"expected {name}"

    def decode(data: Any) -> Ok[Any] | Err[str]:
        if check(data):
            return Ok(data)
        return Err(message)

    return Codec(_identity, decode)


def _is_number(x: Any) -> bool:
    # bool is a subclass of int but is not a JSON number
    return isinstance(x, (int, float)) and not isinstance(x, bool)


text: Codec[str, str] = _of_kind("string", lambda x: isinstance(x, str))
"""A Codec for strings."""

number: Codec[float, float] = _of_kind("number", _is_number)
"""A Codec for numbers (ints and floats, never bools)."""

boolean: Codec[bool, bool] = _of_kind("boolean", lambda x: isinstance(x, bool))
"""A Codec for booleans."""


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality over tree nodes.

    Unlike `==`, True/False never equal 1/0. Ints and floats with the same
    value are equal, as they are in JSON.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return a.keys() == b.keys() and all(deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(deep_equal(x, y) for x, y in zip(a, b))
    return type(a) is type(b) and a == b


def literal(value: Any) -> Codec:
    """
    Codec for a single constant value, typically a union tag.

    Encoding ignores its input and always produces `value`; decoding accepts
    only a node deeply equal to `value`.

    Usage:
        literal("circle")
        record({"kind": literal("circle"), "radius": number})
    """
    message = f"expected literal {value!r}"

    def encode(_entity: Any) -> Any:
        return value

    def decode(data: Any) -> Ok[Any] | Err[str]:
        if deep_equal(data, value):
            return Ok(value)
        return Err(message)

    return Codec(encode, decode)
