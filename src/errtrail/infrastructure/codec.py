from __future__ import annotations

import json
from typing import Any

from loguru import logger
from pydantic import ValidationError

from errtrail.config import get_settings
from errtrail.domain.models import TrailPayload

SEQUENCE_MARKER = "["
LEGACY_MARKER = "{"


def encode(payload: TrailPayload) -> str:
    """Render *payload* as compact ``["code", [site, ...], ...]`` text."""
    try:
        return json.dumps(
            payload.as_sequence(),
            ensure_ascii=get_settings().ensure_ascii,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning("Falling back to plain dump for {!r}: {}", payload.code, exc)
        return f"{payload.code} {payload.trail!r}"


def decode(text: str) -> TrailPayload | None:
    """Decode structured *text*; ``None`` when it is not a serialized error."""
    if not text.startswith((SEQUENCE_MARKER, LEGACY_MARKER)):
        return None
    try:
        data: Any = json.loads(text)
        if isinstance(data, list):
            if not data:
                return None
            return TrailPayload.model_validate({"code": data[0], "trail": data[1:]})
        if isinstance(data, dict):
            return TrailPayload.model_validate(data)
    except (ValueError, RecursionError, ValidationError) as exc:
        logger.trace("Text is not a serialized error: {}", exc)
        return None
    return None
