import logging
import threading

import pytest

from stream_assertions.config import get_settings

_log = logging.getLogger(__name__)
log_fmt = r"%(asctime)-15s %(levelname)s %(name)s %(funcName)s:%(lineno)d %(message)s"
datefmt = "%Y-%m-%d %H:%M:%S"
logging.basicConfig(format=log_fmt, level=logging.DEBUG, datefmt=datefmt)


@pytest.fixture
def anyio_backend():
    """Exclude trio from tests"""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Run every test with default settings, regardless of the caller's environment."""
    for name in (
        "STREAM_ASSERTIONS_TIMEOUT",
        "STREAM_ASSERTIONS_DESCRIPTION",
        "STREAM_ASSERTIONS_TIMEOUT_MULTIPLIER",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def no_leaked_timers():
    """Fail if a test leaves emitting timer threads behind."""
    before = set(threading.enumerate())
    yield
    for thread in set(threading.enumerate()) - before:
        if isinstance(thread, threading.Timer):
            thread.join(timeout=1.0)
            assert not thread.is_alive(), f"Timer {thread.name} still running"
