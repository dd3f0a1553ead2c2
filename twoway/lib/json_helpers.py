"""
Helper functions for the JSON text boundary.
"""

import json

from structlog import get_logger

from ..context import get_settings
from ..types import Err, Ok

logger = get_logger()


def dumps(node: object) -> str:
    """Format a tree node as JSON, compact unless the active settings say otherwise."""
    settings = get_settings()
    separators = (",", ":") if settings.indent is None else (",", ": ")
    return json.dumps(
        node,
        separators=separators,
        indent=settings.indent,
        sort_keys=settings.sort_keys,
        ensure_ascii=settings.ensure_ascii,
    )


def loads(raw: str | bytes | bytearray) -> Ok[object] | Err[str]:
    """
    Parse JSON text (or UTF-8 bytes) into a tree node.

    Malformed input comes back as an Err instead of raising.
    """
    try:
        return Ok(json.loads(raw))
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        logger.debug("json parse failed", error=str(exc))
        return Err(f"invalid JSON: {exc}")
    except RecursionError:
        logger.debug("json parse failed", error="nesting too deep")
        return Err("invalid JSON: nesting too deep")
