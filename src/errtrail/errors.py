"""Errors that remember where they have been.

An :class:`Error` carries a stable ``code`` plus a ``trail`` of entries,
one per place the error passed through::

    def load(key):
        if key not in store:
            raise ERR_NO_DATA.annotate(key)
        ...

    try:
        load(key)
    except Error as err:
        if not ERR_NO_DATA.equal(err):
            raise annotate(err, key)

Annotation always returns a new record, so a shared record can be
annotated from many threads at once. ``str(err)`` is a compact JSON text
that :func:`parse` turns back into an equal record in another process.
"""

from __future__ import annotations

from typing import Any, Iterable

from loguru import logger

from errtrail.domain.models import INIT_MARKER, Entry, TrailPayload, to_entry
from errtrail.domain.protocols import CallSiteProvider, TrailCarrier
from errtrail.infrastructure import codec
from errtrail.infrastructure.callsite import UNKNOWN_CALLER, call_site, describe_frame

_call_site: CallSiteProvider = call_site


def set_call_site_provider(provider: CallSiteProvider) -> CallSiteProvider:
    """Install *provider* for new entries and return the previous one."""
    global _call_site
    previous, _call_site = _call_site, provider
    return previous


def _site(depth: int) -> str:
    # depth is counted from the caller of _site
    try:
        site = _call_site(depth + 1)
    except Exception:
        logger.opt(exception=True).warning("Call-site provider failed")
        return UNKNOWN_CALLER
    return site or UNKNOWN_CALLER


def current_site(depth: int = 0) -> str:
    """Describe a frame through the installed provider; never raises.

    ``depth=0`` is the caller of :func:`current_site`.
    """
    return _site(depth + 1)


class Error(Exception):
    """An error code with the trail of places it was annotated at."""

    __slots__ = ("_code", "_trail", "_wrapped")

    def __init__(self, code: str, trail: Iterable[Iterable[Any]]) -> None:
        entries = tuple(_as_entry(entry) for entry in trail)
        if not entries:
            raise ValueError("error trail needs at least one entry")
        super().__init__(code)
        self._code = str(code)
        self._trail = entries
        self._wrapped: BaseException | None = None

    @property
    def code(self) -> str:
        return self._code

    @property
    def trail(self) -> tuple[Entry, ...]:
        return self._trail

    def annotate(self, *context: Any) -> Error:
        """Return a copy of this error with the caller's location appended."""
        return _extend(self, _site(1), context)

    def equal(self, other: BaseException | None) -> bool:
        return equal(self, other)

    def as_payload(self) -> TrailPayload:
        return TrailPayload(code=self._code, trail=self._trail)

    def __str__(self) -> str:
        return codec.encode(self.as_payload())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self._code!r}, trail={self._trail!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._code, self._trail))


def _as_entry(entry: Iterable[Any]) -> Entry:
    if isinstance(entry, (str, bytes)):
        raise TypeError("trail entry must be a sequence, not text")
    items = tuple(entry)
    if not items:
        raise ValueError("trail entry needs a call-site")
    return to_entry(items[0], items[1:])


def _extend(err: Error, site: str, context: tuple[Any, ...]) -> Error:
    extended = Error(err.code, (*err.trail, (site, *context)))
    if err._wrapped is not None:
        extended._wrapped = err._wrapped
        extended.__cause__ = err._wrapped
    return extended


def new(code: str, *context: Any) -> Error:
    """Create an error whose first entry is the caller's location.

    Without *context* the entry is marked with :data:`INIT_MARKER`.
    """
    return _new(code, _site(1), context)


def _new(code: str, site: str, context: tuple[Any, ...]) -> Error:
    return Error(code, [(site, *(context or (INIT_MARKER,)))])


def parse(text: str) -> Error | None:
    """Rebuild an error from its text; unstructured text becomes the code."""
    if not text:
        return None
    return _parse(text, _site(1))


def _parse(text: str, site: str) -> Error:
    payload = codec.decode(text)
    if payload is None:
        logger.trace("Wrapping unstructured text as a new error code")
        return _new(text, site, ())
    return Error(payload.code, payload.trail)


def parse_error(err: BaseException | None) -> Error | None:
    """Resolve any exception to an :class:`Error`.

    An :class:`Error` is returned as is. Other exceptions are rebuilt from
    their text, with the innermost frame of their traceback as origin.
    """
    if err is None:
        return None
    return _resolve(err, _site(1))


def _resolve(err: BaseException, site: str) -> Error:
    if isinstance(err, Error):
        return err
    if isinstance(err, TrailCarrier):
        try:
            return Error(str(err.code), err.trail)
        except (TypeError, ValueError):
            logger.trace("Ignoring malformed trail on {}", type(err).__name__)
    text = str(err) or type(err).__name__
    origin = _origin(err) or site
    resolved = _parse(text, origin)
    resolved._wrapped = err
    resolved.__cause__ = err
    return resolved


def _origin(err: BaseException) -> str | None:
    tb = err.__traceback__
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return describe_frame(tb.tb_frame, tb.tb_lineno)


def annotate(err: BaseException | None, *context: Any) -> Error | None:
    """Append the caller's location and *context* to *err*.

    ``None`` passes through, so results can be wrapped unconditionally::

        return annotate(do_work(), "while loading", key)
    """
    if err is None:
        return None
    site = _site(1)
    return _extend(_resolve(err, site), site, context)


def annotate_at(err: BaseException | None, site: str, *context: Any) -> Error | None:
    """Like :func:`annotate`, with an explicit call-site descriptor."""
    if err is None:
        return None
    site = site or UNKNOWN_CALLER
    return _extend(_resolve(err, site), site, context)


def _in_chain(err: BaseException, target: BaseException) -> bool:
    # records only follow the exception they wrap; raising them rewrites
    # __cause__ and __context__ on shared instances
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if current is target:
            return True
        seen.add(id(current))
        if isinstance(current, Error):
            current = current._wrapped
        elif current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return False


def equal(err1: BaseException | None, err2: BaseException | None) -> bool:
    """Compare two errors by identity, exception chain, then code.

    Trails are ignored: ``new("x")`` equals ``new("x").annotate("why")``.
    """
    if err1 is err2:
        return True
    if err1 is None or err2 is None:
        return False
    if _in_chain(err1, err2):
        return True
    return _resolve(err1, UNKNOWN_CALLER).code == _resolve(err2, UNKNOWN_CALLER).code


ERR_NO_DATA = new("data not found")
