"""Errors with a stable code and a trail of the places they passed through."""

from loguru import logger

from errtrail.domain.models import INIT_MARKER, Entry, TrailPayload
from errtrail.errors import (
    ERR_NO_DATA,
    Error,
    annotate,
    annotate_at,
    current_site,
    equal,
    new,
    parse,
    parse_error,
    set_call_site_provider,
)
from errtrail.infrastructure.callsite import UNKNOWN_CALLER

logger.disable("errtrail")

__all__ = [
    "ERR_NO_DATA",
    "Entry",
    "Error",
    "INIT_MARKER",
    "TrailPayload",
    "UNKNOWN_CALLER",
    "annotate",
    "annotate_at",
    "current_site",
    "equal",
    "new",
    "parse",
    "parse_error",
    "set_call_site_provider",
]
