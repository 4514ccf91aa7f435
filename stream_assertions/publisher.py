import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional

from stream_assertions.outcome import FINISHED, Completion, Failure, Finished

logger = logging.getLogger(__name__)

ValueCallback = Callable[[Any], None]
CompletionCallback = Callable[[Completion], None]


def _ignore(_: Any) -> None:
    pass


class Subscription:
    """
    Handle returned by ``Publisher.subscribe``.

    Cancelling detaches the subscriber from its publisher. ``cancel`` is
    idempotent and can be used as a context manager so the subscription is
    released on every exit path.
    """

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel()


class Publisher(ABC):
    """
    A push-based stream: zero or more values followed by at most one
    completion, either ``FINISHED`` or ``Failure(error)``.
    """

    @abstractmethod
    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        """Register callbacks and return the subscription handle."""

    def sink(
        self,
        receive_value: Optional[ValueCallback] = None,
        receive_completion: Optional[CompletionCallback] = None,
    ) -> Subscription:
        return self.subscribe(receive_value or _ignore, receive_completion or _ignore)


class _Subscriber:
    __slots__ = ("on_value", "on_completion")

    def __init__(self, on_value: ValueCallback, on_completion: CompletionCallback):
        self.on_value = on_value
        self.on_completion = on_completion


class PassthroughSubject(Publisher):
    """
    Broadcasts values to its current subscribers.

    Emission is serialized with a re-entrant lock, so callbacks of one subject
    are never invoked concurrently. Once completed, further ``send`` calls are
    ignored and late subscribers receive the stored completion immediately.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: List[_Subscriber] = []
        self._completion: Optional[Completion] = None

    @property
    def completed(self) -> bool:
        return self._completion is not None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        subscriber = _Subscriber(on_value, on_completion)
        with self._lock:
            if self._completion is not None:
                on_completion(self._completion)
                return Subscription()
            self._subscribers.append(subscriber)
        logger.debug("Subscriber attached to %r", self)
        return Subscription(lambda: self._detach(subscriber))

    def _detach(self, subscriber: _Subscriber) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)
                logger.debug("Subscriber detached from %r", self)

    def send(self, value: Any) -> None:
        with self._lock:
            if self._completion is not None:
                logger.debug("Ignoring value sent after completion: %r", value)
                return
            for subscriber in list(self._subscribers):
                subscriber.on_value(value)

    def send_completion(self, completion: Completion) -> None:
        if not isinstance(completion, (Finished, Failure)):
            raise TypeError(
                f"completion must be FINISHED or Failure, got: {completion!r}"
            )
        with self._lock:
            if self._completion is not None:
                logger.debug("Ignoring completion sent after completion: %r", completion)
                return
            self._completion = completion
            subscribers, self._subscribers = self._subscribers, []
            for subscriber in subscribers:
                subscriber.on_completion(completion)

    def finish(self) -> None:
        self.send_completion(FINISHED)

    def fail(self, error: Any) -> None:
        self.send_completion(Failure(error))


class Just(Publisher):
    """Emits the given values during ``subscribe``, then finishes."""

    def __init__(self, *values: Any) -> None:
        self._values = values

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        subscription = Subscription()
        for value in self._values:
            if subscription.cancelled:
                return subscription
            on_value(value)
        on_completion(FINISHED)
        return subscription


class Fail(Publisher):
    """Fails immediately with ``error``."""

    def __init__(self, error: Any) -> None:
        self._error = error

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        on_completion(Failure(self._error))
        return Subscription()


class Empty(Publisher):
    """Finishes immediately without emitting."""

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        on_completion(FINISHED)
        return Subscription()


class Never(Publisher):
    """Never emits and never completes."""

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        return Subscription()


class ThreadPublisher(Publisher):
    """
    Iterates a blocking iterable on a worker thread and emits every item.

    An exception raised while iterating becomes a ``Failure`` completion.
    Cancelling the subscription stops the worker before the next item and
    joins it for up to ``join_timeout`` seconds. A source blocked inside
    ``next()`` cannot be interrupted; its daemon worker then outlives the
    subscription until the source yields or the process exits.
    """

    DEFAULT_JOIN_TIMEOUT = 0.1

    def __init__(
        self,
        source: Iterable[Any],
        name: Optional[str] = None,
        join_timeout: Optional[float] = None,
    ) -> None:
        self._source = source
        self._name = name or "stream-assertions-publisher"
        self.join_timeout = (
            self.DEFAULT_JOIN_TIMEOUT if join_timeout is None else join_timeout
        )

    def subscribe(
        self, on_value: ValueCallback, on_completion: CompletionCallback
    ) -> Subscription:
        stop = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(stop, on_value, on_completion),
            name=self._name,
            daemon=True,
        )
        thread.start()

        def cancel() -> None:
            stop.set()
            # A callback may cancel from the worker itself.
            if thread is not threading.current_thread():
                thread.join(self.join_timeout)
                if thread.is_alive():
                    logger.debug(
                        "%s still blocked in its source after %ss",
                        self._name,
                        self.join_timeout,
                    )

        return Subscription(cancel)

    def _run(
        self,
        stop: threading.Event,
        on_value: ValueCallback,
        on_completion: CompletionCallback,
    ) -> None:
        try:
            iterator = iter(self._source)
        except Exception as e:
            on_completion(Failure(e))
            return

        while not stop.is_set():
            try:
                item = next(iterator)
            except StopIteration:
                on_completion(FINISHED)
                return
            except Exception as e:
                logger.debug("%s source raised %r", self._name, e)
                on_completion(Failure(e))
                return
            # Callback errors are not the stream's failure; let them surface.
            on_value(item)

        logger.debug("%s cancelled, stop iterating", self._name)
