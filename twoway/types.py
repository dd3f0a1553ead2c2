"""
Type definitions for twoway.

Provides the Ok/Err result type, the generic tree node alias and the
MISSING marker used for absent optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class DecodeError(ValueError):
    """Raised when unwrapping a failed decode."""


class EncodeError(ValueError):
    """Raised when a value falls outside what a codec can encode."""


class Missing(Enum):
    """
    Marker for a value that is not there at all.

    Distinct from None, which encodes as JSON null. Optional codecs produce
    MISSING on encode for absent values and on decode for absent entries;
    record codecs leave such keys out entirely.
    """

    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = Missing.MISSING


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error message."""

    error: E

    def __post_init__(self) -> None:
        if not self.error:
            raise ValueError("Err requires a non-empty message")

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise DecodeError(self.error)


# Type aliases
Result = Union[Ok[T], Err[str]]

# Any value the JSON layer can produce or consume
Node = Union[
    None,
    bool,
    int,
    float,
    str,
    List["Node"],
    Dict[str, "Node"],
]

EncodeFn = Callable[[Any], Any]
DecodeFn = Callable[[Any], "Ok[Any] | Err[str]"]
Predicate = Callable[[Any], bool]


def map_result(result: Ok[T] | Err[str], f: Callable[[T], U]) -> Ok[U] | Err[str]:
    """
    Apply a function to a decoded value, if decoding succeeded.

    Failures are returned as-is and `f` is never called on them.
    """
    if isinstance(result, Ok):
        return Ok(f(result.value))
    return result
