from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Callable
from types import TracebackType
from typing import Any, ParamSpec, TypeVar, cast

from loguru import logger

from errtrail.errors import Error, annotate_at, current_site
from errtrail.infrastructure.callsite import describe_frame

P = ParamSpec("P")
R = TypeVar("R")


def _frame_site(tb: TracebackType | None, func: Callable[..., Any]) -> str:
    # first frame below the wrapper is the decorated function itself
    if tb is not None and tb.tb_next is not None:
        return describe_frame(tb.tb_next.tb_frame, tb.tb_next.tb_lineno)
    return getattr(func, "__qualname__", repr(func))


def log_error(
    err: BaseException | None,
    *context: Any,
    log=logger,  # loguru logger-like
) -> Error | None:
    """Annotate *err* at the caller and log it instead of returning it upward."""
    if err is None:
        return None
    annotated = annotate_at(err, current_site(1), *context)
    log.opt(depth=1).error("{}", annotated)
    return annotated


def _wrap(exc: Exception, site: str, context: tuple[Any, ...]) -> Error:
    wrapped = cast(Error, annotate_at(exc, site, *context))
    logger.trace("Annotated {} at {}", wrapped.code, site)
    return wrapped


def annotate_exceptions(
    *context: Any,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator re-raising escaping exceptions as annotated :class:`Error`.

    The new entry points at the decorated function's own frame. A foreign
    exception stays reachable as ``__cause__``.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
                try:
                    return await func(*args, **kwargs)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    raise _wrap(exc, _frame_site(exc.__traceback__, func), context)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                raise _wrap(exc, _frame_site(exc.__traceback__, func), context)

        return sync_wrapper  # type: ignore[return-value]

    return decorator
