"""
Combinators that build compound codecs out of smaller ones.

Every decoder here is fail-fast: the first failing element, field or
variant decides the result, and child failures are returned unchanged.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from structlog import get_logger

from .context import get_settings, nested
from .core import TOO_DEEP, Codec
from .types import MISSING, EncodeError, Err, Ok, Predicate

logger = get_logger()

A = TypeVar("A")
B = TypeVar("B")
X = TypeVar("X")


def sequence(codec: Codec[A, X]) -> Codec[list[A], Sequence[X]]:
    """
    Create a Codec for homogeneous lists.

    Arrays have no absent slots, so an item that encodes to MISSING (an
    optional codec given None) raises EncodeError; use `nullable` for nulls.

    Usage:
        sequence(number).decode_from_text("[1,2,3]")   # Ok([1, 2, 3])
    """
    encode_item = codec.encode
    decode_item = codec.decode

    def encode(items: Iterable[X]) -> list[Any]:
        res = []
        for index, item in enumerate(items):
            encoded = encode_item(item)
            if encoded is MISSING:
                raise EncodeError(f"Array item {index} is absent")
            res.append(encoded)
        return res

    def decode(data: Any) -> Ok[list[A]] | Err[str]:
        if not isinstance(data, (list, tuple)):
            return Err("expected array")
        with nested() as within_limit:
            if not within_limit:
                return Err(TOO_DEEP)
            value = []
            for item in data:
                decoded = decode_item(item)
                if isinstance(decoded, Err):
                    return decoded
                value.append(decoded.value)
        return Ok(value)

    return Codec(encode, decode)


def _encode_record(entity: Any, codecs: Mapping[str, Codec]) -> dict[str, Any]:
    res = {}
    for key, codec in codecs.items():
        encoded = codec.encode(entity)
        if encoded is not MISSING:
            res[key] = encoded
    return res


def _decode_record(data: Any, codecs: Mapping[str, Codec]) -> Ok[dict[str, Any]] | Err[str]:
    if not isinstance(data, Mapping):
        return Err("expected object")
    falsy_is_missing = get_settings().falsy_is_missing
    with nested() as within_limit:
        if not within_limit:
            return Err(TOO_DEEP)
        res = {}
        for key, codec in codecs.items():
            if falsy_is_missing:
                present = bool(data.get(key))
            else:
                present = key in data
            if not present and not codec.is_optional:
                return Err(f"missing field {key}")
            decoded = codec.decode(data[key] if present else MISSING)
            if isinstance(decoded, Err):
                return decoded
            if decoded.value is not MISSING:
                res[key] = decoded.value
    return Ok(res)


def _same_record(codecs: Mapping[str, Codec]) -> Codec:
    codecs = dict(codecs)

    def encode(entity: Any) -> dict[str, Any]:
        return _encode_record(entity, codecs)

    def decode(data: Any) -> Ok[dict[str, Any]] | Err[str]:
        return _decode_record(data, codecs)

    return Codec(encode, decode)


def _field_getter(key: str, optional: bool) -> Callable[[Mapping[str, Any]], Any]:
    if optional:
        return lambda r: r.get(key, MISSING)
    return lambda r: r[key]


def record(codecs: Mapping[str, Codec]) -> Codec[dict[str, Any], Mapping[str, Any]]:
    """
    Create a Codec for dicts with a fixed set of fields.

    Each field codec works on the field's own value; the record codec narrows
    it onto the whole dict. Field order is the order of keys in the encoded
    output and the order fields are checked when decoding.

    Usage:
        user = record({"name": text, "age": number})
        user.encode_to_text({"name": "John", "age": 20})   # '{"name":"John","age":20}'
        user.decode_from_text('{"name": "John"}')          # Err("missing field age")
    """
    enlarged = {key: codec.select(_field_getter(key, codec.is_optional)) for key, codec in codecs.items()}
    return _same_record(enlarged)


def record_then(codecs: Mapping[str, Codec[Any, X]], f: Callable[[dict[str, Any]], B]) -> Codec[B, X]:
    """
    Build a Codec from field codecs that already encode from the target type.

    Unlike `record`, each field codec is expected to be narrowed by the caller
    (usually with `select`), and the decoded dict of fields is handed to `f`.

    Usage:
        @dataclass
        class User:
            name: str
            age: int

        user_codec = record_then(
            {"name": text.select("name"), "age": number.select("age")},
            lambda fields: User(**fields),
        )
    """
    return _same_record(codecs).transform(f)


def optional(codec: Codec[A, X]) -> Codec[A, X]:
    """
    Allow a record field to be absent.

    Encoding MISSING produces MISSING, which record codecs leave out of the
    output; None does too unless `codec` is nullable, in which case None is
    a real value and encodes as null. Decoding an absent entry produces
    MISSING, which record codecs leave out of the decoded dict. Present
    entries go through `codec` as usual, so an explicit null is only
    accepted if `codec` accepts it.
    """
    encode_base = codec.encode
    decode_base = codec.decode
    none_is_absent = not codec.is_nullable

    def encode(entity: Any) -> Any:
        if entity is MISSING or (entity is None and none_is_absent):
            return MISSING
        return encode_base(entity)

    def decode(data: Any) -> Ok[Any] | Err[str]:
        if data is MISSING:
            return Ok(MISSING)
        return decode_base(data)

    return Codec(encode, decode, is_optional=True, is_nullable=codec.is_nullable)


def nullable(codec: Codec[A, X]) -> Codec[A | None, X | None]:
    """Accept null alongside whatever `codec` accepts; None encodes as null."""
    encode_base = codec.encode
    decode_base = codec.decode

    def encode(entity: Any) -> Any:
        if entity is None:
            return None
        return encode_base(entity)

    def decode(data: Any) -> Ok[Any] | Err[str]:
        if data is None:
            return Ok(None)
        return decode_base(data)

    return Codec(encode, decode, codec.is_optional, is_nullable=True)


def dict_of(codec: Codec[A, X]) -> Codec[dict[str, A], Mapping[str, X]]:
    """
    Create a Codec for string-keyed mappings whose values share one codec.

    As with records, values that encode to MISSING leave their key out.
    """
    encode_value = codec.encode
    decode_value = codec.decode

    def encode(entity: Mapping[str, X]) -> dict[str, Any]:
        res = {}
        for key, value in entity.items():
            encoded = encode_value(value)
            if encoded is not MISSING:
                res[key] = encoded
        return res

    def decode(data: Any) -> Ok[dict[str, A]] | Err[str]:
        if not isinstance(data, Mapping):
            return Err("expected object")
        with nested() as within_limit:
            if not within_limit:
                return Err(TOO_DEEP)
            res = {}
            for key, value in data.items():
                if not isinstance(key, str):
                    return Err("expected string key")
                decoded = decode_value(value)
                if isinstance(decoded, Err):
                    return decoded
                res[key] = decoded.value
        return Ok(res)

    return Codec(encode, decode)


def lazy(factory: Callable[[], Codec[A, X]]) -> Codec[A, X]:
    """
    Defer building a codec until it is first used.

    Needed for recursive shapes, where a codec refers to itself:

        tree = record({
            "label": text,
            "children": sequence(lazy(lambda: tree)),
        })

    `factory` runs once, even when several threads reach it together.
    """
    resolved: list[Codec[A, X]] = []
    lock = threading.Lock()

    def get() -> Codec[A, X]:
        if not resolved:
            with lock:
                if not resolved:
                    resolved.append(factory())
        return resolved[0]

    def encode(entity: X) -> Any:
        return get().encode(entity)

    def decode(data: Any) -> Ok[A] | Err[str]:
        return get().decode(data)

    return Codec(encode, decode)


@dataclass(frozen=True, slots=True)
class Variant:
    """One alternative of a union: a codec and a test for values that belong to it."""

    codec: Codec
    predicate: Predicate


def _to_variant(v: Variant | tuple[Codec, Predicate]) -> Variant:
    if isinstance(v, Variant):
        return v
    if isinstance(v, tuple) and len(v) == 2:
        return Variant(*v)
    raise TypeError(f"Cannot convert {type(v).__name__} to Variant")


def one_of(*variants: Variant | tuple[Codec, Predicate]) -> Codec:
    """
    Create a Codec for a union of shapes.

    Encoding uses the first variant whose predicate accepts the value.
    Decoding tries each variant in order and returns the first success, so
    list more specific variants before more permissive ones.

    Usage:
        shape = one_of(
            (circle, lambda s: s["kind"] == "circle"),
            (square, lambda s: s["kind"] == "square"),
        )

    Raises:
        ValueError: If no variants are given.
    """
    if not variants:
        raise ValueError("one_of() requires at least one variant")
    options = tuple(_to_variant(v) for v in variants)

    def encode(entity: Any) -> Any:
        for variant in options:
            if variant.predicate(entity):
                return variant.codec.encode(entity)
        logger.warning("no variant accepts value", value_type=type(entity).__name__)
        raise EncodeError(f"No variant accepts value of type {type(entity).__name__}")

    def decode(data: Any) -> Ok[Any] | Err[str]:
        errors = []
        for variant in options:
            decoded = variant.codec.decode(data)
            if isinstance(decoded, Ok):
                return decoded
            errors.append(decoded.error)
        logger.debug("no variant matched", tried=len(options))
        return Err(f"no variant matched: {'; '.join(errors)}")

    return Codec(encode, decode)
