from stream_assertions.assertions import (
    Published,
    Verdict,
    VerdictKind,
    assert_eventually_publishes,
    assert_eventually_publishes_async,
    collect_published,
    collect_published_async,
    evaluate_publisher,
)
from stream_assertions.errors import (
    PublishedMismatchError,
    PublishTimeoutError,
    StreamAssertionError,
)
from stream_assertions.helper import async_after
from stream_assertions.outcome import FINISHED, Failure, Finished, Value, values
from stream_assertions.publisher import (
    Empty,
    Fail,
    Just,
    Never,
    PassthroughSubject,
    Publisher,
    Subscription,
    ThreadPublisher,
)
from stream_assertions.recorder import OutcomeRecorder

__version__ = "0.1.0"

__all__ = [
    "assert_eventually_publishes",
    "assert_eventually_publishes_async",
    "async_after",
    "collect_published",
    "collect_published_async",
    "evaluate_publisher",
    "Empty",
    "Fail",
    "Failure",
    "FINISHED",
    "Finished",
    "Just",
    "Never",
    "OutcomeRecorder",
    "PassthroughSubject",
    "Published",
    "PublishedMismatchError",
    "Publisher",
    "PublishTimeoutError",
    "StreamAssertionError",
    "Subscription",
    "ThreadPublisher",
    "Value",
    "values",
    "Verdict",
    "VerdictKind",
]
