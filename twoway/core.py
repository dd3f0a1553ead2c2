"""
Core Codec class for twoway.

A Codec pairs an encode function (typed value -> tree node) with a decode
function (tree node -> Ok/Err). Everything else in the package is built by
composing Codecs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from operator import attrgetter
from typing import Any, Callable, Generic, TypeVar

from structlog import get_logger

from .lib.json_helpers import dumps, loads
from .types import MISSING, DecodeFn, EncodeError, EncodeFn, Err, Ok

logger = get_logger()

A = TypeVar("A")
B = TypeVar("B")
X = TypeVar("X")
Y = TypeVar("Y")

TOO_DEEP = "maximum nesting depth exceeded"


@dataclass(frozen=True, slots=True)
class SerDe:
    """The raw pair of functions underlying a Codec."""

    encode: EncodeFn
    decode: DecodeFn


@dataclass(frozen=True, slots=True)
class Codec(Generic[A, X]):
    """
    Immutable encode/decode pair.

    `X` is what the codec encodes from and `A` is what it decodes to. For
    freshly built codecs they are the same type; `select` and `transform`
    let them drift apart so codecs can be composed.

    `is_optional` marks record fields that may be absent and `is_nullable`
    marks codecs for which None is a real value (JSON null).

    Example:
        class Int:
            def __init__(self, num):
                self.num = num

        int_codec = number.transform(Int).select("num")
        int_codec.encode_to_text(Int(1))   # '1'
        int_codec.decode_from_text("1")    # Ok(Int(1))
    """

    encode: EncodeFn
    decode: DecodeFn
    is_optional: bool = False
    is_nullable: bool = False

    @property
    def serde(self) -> SerDe:
        return SerDe(self.encode, self.decode)

    def encode_to_tree(self, entity: X) -> Any:
        """Encode an entity as a generic tree (dicts, lists and scalars)."""
        return self.encode(entity)

    def encode_to_text(self, entity: X) -> str:
        """
        Encode an entity straight to JSON text.

        Raises:
            EncodeError: If the entity encodes to MISSING (an absent optional
                         value has no JSON text of its own).
        """
        node = self.encode(entity)
        if node is MISSING:
            raise EncodeError("Cannot write an absent value as JSON text")
        return dumps(node)

    def decode_from_tree(self, data: Any) -> Ok[A] | Err[str]:
        """
        Try to decode an already-parsed tree.

        Returns:
            Ok(value) if the tree has the expected shape
            Err(message) describing the first mismatch otherwise
        """
        try:
            return self.decode(data)
        except RecursionError:
            # the interpreter stack ran out before max_depth did
            logger.debug("decode exhausted the stack")
            return Err(TOO_DEEP)

    def decode_from_text(self, raw: str | bytes) -> Ok[A] | Err[str]:
        """Parse JSON text and decode the result; malformed JSON is an Err too."""
        parsed = loads(raw)
        if isinstance(parsed, Err):
            return parsed
        return self.decode_from_tree(parsed.value)

    def select(self, extract: Callable[[Y], X] | str) -> Codec[A, Y]:
        """
        Create a Codec that encodes from a larger entity.

        The larger entity is first narrowed with `extract` (a function, or an
        attribute name) and then encoded as before. Decoding is unchanged, so
        pair this with `transform` or `record_then` to get back to the larger
        type.

        Usage:
            text.select(lambda user: user.name)
            text.select("name")
        """
        if isinstance(extract, str):
            extract = attrgetter(extract)
        elif not callable(extract):
            raise TypeError(f"select() expects a callable or attribute name, got {type(extract).__name__}")

        encode = self.encode

        def selected(big: Any) -> Any:
            return encode(extract(big))

        return replace(self, encode=selected)

    def transform(self, f: Callable[[A], B]) -> Codec[B, X]:
        """
        Change what a Codec decodes to.

        `f` runs on successfully decoded values only; failures (and MISSING
        from optional codecs) pass through untouched.
        """
        decode = self.decode

        def transformed(data: Any) -> Ok[B] | Err[str]:
            result = decode(data)
            if isinstance(result, Err) or result.value is MISSING:
                return result
            return Ok(f(result.value))

        return replace(self, decode=transformed)

    def filter(self, message: str, predicate: Callable[[A], bool]) -> Codec[A, X]:
        """
        Keep only decoded values satisfying `predicate`.

        Usage:
            number.filter("must be positive", lambda n: n > 0)

        Raises:
            ValueError: If `message` is empty.
        """
        if not message:
            raise ValueError("filter() requires a non-empty message")
        decode = self.decode

        def filtered(data: Any) -> Ok[A] | Err[str]:
            result = decode(data)
            if isinstance(result, Err) or result.value is MISSING:
                return result
            if not predicate(result.value):
                return Err(message)
            return result

        return replace(self, decode=filtered)

    def optional(self) -> Codec[A, X]:
        """Allow this field to be absent; see `twoway.combinators.optional`."""
        from .combinators import optional

        return optional(self)
