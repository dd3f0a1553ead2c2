"""
Context manager for codec configuration (nesting limit, text output, legacy presence checks).
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


class CodecSettings(BaseModel):
    """Settings that affect codec calls made while they are active."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(default=100, gt=0)
    falsy_is_missing: bool = False
    sort_keys: bool = False
    indent: Optional[int] = Field(default=None, ge=0)
    ensure_ascii: bool = False


_settings: ContextVar[CodecSettings] = ContextVar("codec_settings", default=CodecSettings())

# Current decode nesting depth
_depth: ContextVar[int] = ContextVar("decode_depth", default=0)


def get_settings() -> CodecSettings:
    """Return the settings currently in effect."""
    return _settings.get()


@contextmanager
def codec_context(**overrides: Any) -> Iterator[CodecSettings]:
    """
    Context manager for codec configuration.

    Args:
        max_depth: Deepest array/object nesting a decode may walk before
                   failing with "maximum nesting depth exceeded".
        falsy_is_missing: If True, record decoding treats present-but-falsy
                          entries (0, False, "", None) as missing fields.
        sort_keys, indent, ensure_ascii: Passed to the JSON writer used by
                          encode_to_text.

    Example:
        from twoway import codec_context, number, record

        point = record({"x": number, "y": number})

        with codec_context(indent=2, sort_keys=True):
            point.encode_to_text({"y": 2, "x": 1})

    Raises:
        pydantic.ValidationError: If an override is unknown or invalid.
    """
    merged = CodecSettings(**{**_settings.get().model_dump(), **overrides})
    token = _settings.set(merged)
    try:
        yield merged
    finally:
        _settings.reset(token)


@contextmanager
def nested() -> Iterator[bool]:
    """
    Track one level of decode nesting.

    Yields False when the active max_depth has been exceeded, in which case the
    caller must fail without descending further.
    """
    depth = _depth.get() + 1
    token = _depth.set(depth)
    try:
        yield depth <= _settings.get().max_depth
    finally:
        _depth.reset(token)
