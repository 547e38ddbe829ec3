from __future__ import annotations

from typing import Any, TypeAlias

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

INIT_MARKER = "[init]"
MAX_CONTEXT_DEPTH = 32

Context: TypeAlias = "str | int | float | bool | None | tuple[Context, ...]"
Entry: TypeAlias = tuple[Any, ...]


class ConfiguredBaseModel(BaseModel):
    model_config = ConfigDict(frozen=True)


def to_context(
    value: Any, _depth: int = 0, _active: frozenset[int] = frozenset()
) -> Context:
    """Narrow *value* to a context value; unknown types become their text.

    Sequences nested deeper than :data:`MAX_CONTEXT_DEPTH`, or containing
    themselves, are kept as text too.
    """
    if value is None or type(value) in (str, int, float, bool):
        return value
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return str.__str__(value)
    if isinstance(value, (list, tuple)):
        if _depth >= MAX_CONTEXT_DEPTH or id(value) in _active:
            return _as_text(value)
        active = _active | {id(value)}
        return tuple(to_context(item, _depth + 1, active) for item in value)
    return _as_text(value)


def _as_text(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        # deep nesting or a broken __str__
        return object.__repr__(value)


def to_entry(site: Any, context: tuple[Any, ...] | list[Any]) -> Entry:
    return (str(site), *(to_context(value) for value in context))


class TrailPayload(ConfiguredBaseModel):
    """Wire shape of an error: its code and the trail of entries."""

    code: str = Field(validation_alias=AliasChoices("code", "Code"))
    trail: tuple[Entry, ...] = Field(
        min_length=1, validation_alias=AliasChoices("trail", "As")
    )

    @field_validator("trail", mode="after")
    @classmethod
    def _normalize_trail(cls, v: tuple[Entry, ...]) -> tuple[Entry, ...]:
        out: list[Entry] = []
        for entry in v:
            if not entry or not isinstance(entry[0], str):
                raise ValueError("trail entry must start with a call-site string")
            out.append(to_entry(entry[0], entry[1:]))
        return tuple(out)

    def as_sequence(self) -> list[Any]:
        return [self.code, *self.trail]
