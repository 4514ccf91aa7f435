import threading
import time

from stream_assertions import PassthroughSubject, async_after


class SampleError(Exception):
    pass


ERROR_CASE_1 = SampleError("errorCase1")
ERROR_CASE_2 = SampleError("errorCase2")


class SlowSetEvent(threading.Event):
    """Wake-up signal that lags behind the recorded completion."""

    def set(self):
        time.sleep(0.3)
        super().set()


def delayed_subject(*values, error=None, finish=True, delay=0.1):
    """Subject that emits ``values`` from a timer thread after ``delay``.

    Ends with ``error`` if given, otherwise finishes unless ``finish`` is False.
    """
    subject = PassthroughSubject()

    def emit():
        for value in values:
            subject.send(value)
        if error is not None:
            subject.fail(error)
        elif finish:
            subject.finish()

    async_after(delay, emit)
    return subject
