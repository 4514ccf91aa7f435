import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


def async_after(delay: float, fn: Callable[..., Any], *args: Any) -> threading.Timer:
    """Run ``fn(*args)`` on a worker thread after ``delay`` seconds.

    Returns the started timer so callers can ``cancel()`` it.
    """
    if delay < 0:
        raise ValueError("delay must be greater than or equal to 0")

    def run() -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Error in delayed callable %r", fn)
            raise

    timer = threading.Timer(delay, run)
    timer.daemon = True
    timer.start()
    return timer
