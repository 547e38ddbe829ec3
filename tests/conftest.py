import inspect
from typing import Callable, Iterator

import pytest
from loguru import logger

from errtrail import set_call_site_provider
from errtrail.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Drop cached settings so env changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def errtrail_logs(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Route errtrail's loguru records into caplog."""
    logger.enable("errtrail")
    sink_id = logger.add(caplog.handler, level="TRACE", format="{message}")
    try:
        yield caplog
    finally:
        logger.remove(sink_id)
        logger.disable("errtrail")


@pytest.fixture
def provider_swap() -> Iterator[Callable[[Callable[..., str]], None]]:
    """Install a call-site provider for one test and restore the old one."""
    previous: list[Callable[..., str]] = []

    def install(provider: Callable[..., str]) -> None:
        previous.append(set_call_site_provider(provider))

    yield install
    if previous:
        set_call_site_provider(previous[0])


@pytest.fixture
def here() -> Callable[[], int]:
    """Return the line number of the caller."""

    def line() -> int:
        frame = inspect.currentframe()
        assert frame is not None and frame.f_back is not None
        return frame.f_back.f_lineno

    return line
