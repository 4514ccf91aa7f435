import logging
import threading
from typing import Any, List, Optional

from stream_assertions.outcome import Completion, Failure, Outcome, Value

logger = logging.getLogger(__name__)


class OutcomeRecorder:
    """
    Collects the outcomes of one subscription in emission order.

    ``on_value`` and ``on_completion`` are the subscription callbacks. Appends
    are serialized with a lock, so the recorder stays consistent even when a
    publisher invokes its callbacks concurrently. The recorder is finalized by
    the terminal event or by ``finalize()`` (timeout); afterwards callbacks are
    ignored and the collected outcomes never change.
    """

    def __init__(self) -> None:
        self._outcomes: List[Outcome] = []
        self._lock = threading.Lock()
        self._terminated = threading.Event()
        self._finalized = False
        self.completion: Optional[Completion] = None

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def terminated(self) -> bool:
        # Follows the completion, not the Event, so it agrees with the outcomes.
        with self._lock:
            return self.completion is not None

    @property
    def outcomes(self) -> List[Outcome]:
        with self._lock:
            return list(self._outcomes)

    def on_value(self, value: Any) -> None:
        with self._lock:
            if self._finalized:
                logger.warning("Value received after termination, ignored: %r", value)
                return
            self._outcomes.append(Value(value))

    def on_completion(self, completion: Completion) -> None:
        with self._lock:
            if self._finalized:
                logger.warning(
                    "Completion received after termination, ignored: %r", completion
                )
                return
            if isinstance(completion, Failure):
                self._outcomes.append(completion)
            self.completion = completion
            self._finalized = True
        logger.debug("Publisher terminated with %r", completion)
        self._terminated.set()

    def wait(self, timeout: float) -> bool:
        """Block until the terminal event or ``timeout`` seconds; True if terminated."""
        return self._terminated.wait(timeout)

    def finalize(self) -> None:
        with self._lock:
            self._finalized = True
