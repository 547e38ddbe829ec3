from __future__ import annotations

from .callsite import UNKNOWN_CALLER, call_site, describe_frame
from .codec import decode, encode

__all__ = ["UNKNOWN_CALLER", "call_site", "decode", "describe_frame", "encode"]
