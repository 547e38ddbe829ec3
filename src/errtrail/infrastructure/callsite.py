from __future__ import annotations

import inspect
import os
from types import FrameType

from errtrail.config import get_settings

UNKNOWN_CALLER = "unknown caller"


def describe_frame(frame: FrameType, lineno: int | None = None) -> str:
    """Render *frame* as ``file:line#qualname``."""
    code = frame.f_code
    path = code.co_filename
    if get_settings().path_style == "basename":
        path = os.path.basename(path) or path
    line = frame.f_lineno if lineno is None else lineno
    return f"{path}:{line}#{code.co_qualname}"


def call_site(depth: int = 0) -> str:
    """Describe the caller of the function that calls this one.

    ``depth=0`` is the frame invoking :func:`call_site`, ``depth=1`` its
    caller and so on. Never raises: a missing frame yields
    :data:`UNKNOWN_CALLER`.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return UNKNOWN_CALLER
        return describe_frame(frame)
    finally:
        del frame
