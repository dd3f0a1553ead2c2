"""
twoway - bidirectional JSON codecs from small composable pieces.

Usage:
    from twoway import number, optional, record, text

    user = record({"name": text, "age": optional(number)})

    user.encode_to_text({"name": "John"})         # '{"name":"John"}'
    user.decode_from_text('{"name": "John"}')     # Ok({'name': 'John'})
"""

from .combinators import (
    Variant,
    dict_of,
    lazy,
    nullable,
    one_of,
    optional,
    record,
    record_then,
    sequence,
)
from .context import CodecSettings, codec_context, get_settings
from .core import Codec, SerDe
from .primitives import boolean, literal, number, text
from .types import (
    MISSING,
    DecodeError,
    EncodeError,
    Err,
    Node,
    Ok,
    Result,
    map_result,
)

__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    "map_result",
    "Node",
    "MISSING",
    "DecodeError",
    "EncodeError",
    # Core
    "Codec",
    "SerDe",
    # Primitives
    "text",
    "number",
    "boolean",
    "literal",
    # Combinators
    "sequence",
    "record",
    "record_then",
    "optional",
    "nullable",
    "dict_of",
    "lazy",
    "one_of",
    "Variant",
    # Configuration
    "CodecSettings",
    "codec_context",
    "get_settings",
]
