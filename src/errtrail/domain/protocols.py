"""Capabilities the core expects from its collaborators."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class TrailCarrier(Protocol):
    """Anything exposing an error code and an annotation trail."""

    @property
    def code(self) -> str: ...  # pragma: no cover - protocol definition

    @property
    def trail(self) -> Sequence[Sequence[Any]]: ...  # pragma: no cover


class CallSiteProvider(Protocol):
    def __call__(self, depth: int = 0) -> str:
        """Describe the frame *depth* levels above the provider's caller."""
        ...  # pragma: no cover - protocol definition
