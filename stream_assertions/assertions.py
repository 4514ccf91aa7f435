"""
Assertions over publishers: subscribe, collect, wait with a timeout, compare.

The waiting caller blocks on a ``threading.Event`` that the terminal callback
sets, so publishers may emit from any thread. Comparison and error reporting
always run on the caller's side after the wait, never inside a publisher
callback.
"""
import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

import anyio.to_thread

from stream_assertions.config import get_settings
from stream_assertions.errors import PublishedMismatchError, PublishTimeoutError
from stream_assertions.outcome import (
    Completion,
    Failure,
    Outcome,
    Value,
    format_outcomes,
)
from stream_assertions.publisher import Publisher
from stream_assertions.recorder import OutcomeRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Published:
    """What a publisher produced within the timeout."""

    outcomes: List[Outcome]
    terminated: bool
    completion: Optional[Completion] = None


class VerdictKind(Enum):
    PASSED = "passed"
    MISMATCH = "mismatch"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Verdict:
    kind: VerdictKind
    expected: List[Outcome]
    observed: List[Outcome]
    timeout: float
    description: str
    location: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.kind is VerdictKind.PASSED

    @property
    def message(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        if self.kind is VerdictKind.TIMEOUT:
            return (
                f"{prefix}{self.description}: publisher did not terminate "
                f"within {self.timeout:g}s\n"
                f"  no terminal event arrived; observed so far: "
                f"{format_outcomes(self.observed)}"
            )
        if self.kind is VerdictKind.MISMATCH:
            return (
                f"{prefix}{self.description}: published outcomes differ from expected\n"
                f"  expected: {format_outcomes(self.expected)}\n"
                f"  observed: {format_outcomes(self.observed)}\n"
                f"  {_first_difference(self.expected, self.observed)}"
            )
        return f"{prefix}{self.description}: passed"


def _first_difference(expected: List[Outcome], observed: List[Outcome]) -> str:
    for index, (want, got) in enumerate(zip(expected, observed)):
        if want != got:
            return f"first difference at index {index}: expected {want!r}, observed {got!r}"
    if len(expected) > len(observed):
        return f"missing {len(expected) - len(observed)} outcome(s) starting at index {len(observed)}"
    return f"{len(observed) - len(expected)} unexpected outcome(s) starting at index {len(expected)}"


def _caller_location(depth: int = 2) -> Optional[str]:
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return None
    return f"{os.path.relpath(frame.f_code.co_filename)}:{frame.f_lineno}"


def _expected_outcomes(expected: Iterable[Outcome]) -> List[Outcome]:
    outcomes = list(expected)
    for index, outcome in enumerate(outcomes):
        if not isinstance(outcome, (Value, Failure)):
            raise TypeError(
                f"expected[{index}] must be Value or Failure, got: {outcome!r}"
            )
    return outcomes


def _subscribe(publisher: Publisher, recorder: OutcomeRecorder):
    # Callbacks are in place before subscribe, so synchronous emission is captured.
    subscription = publisher.subscribe(recorder.on_value, recorder.on_completion)
    logger.debug("Subscribed to %r", publisher)
    return subscription


def _published(recorder: OutcomeRecorder, subscription, timeout: float) -> Published:
    recorder.finalize()
    subscription.cancel()
    if not recorder.terminated:
        logger.debug("No terminal event within %ss", timeout)
    return Published(recorder.outcomes, recorder.terminated, recorder.completion)


def _collect(publisher: Publisher, timeout: float) -> Published:
    recorder = OutcomeRecorder()
    subscription = _subscribe(publisher, recorder)
    try:
        recorder.wait(timeout)
    finally:
        published = _published(recorder, subscription, timeout)
    return published


async def _collect_async(publisher: Publisher, timeout: float) -> Published:
    recorder = OutcomeRecorder()
    subscription = _subscribe(publisher, recorder)
    try:
        await anyio.to_thread.run_sync(recorder.wait, timeout)
    finally:
        published = _published(recorder, subscription, timeout)
    return published


def collect_published(publisher: Publisher, timeout: Optional[float] = None) -> Published:
    """Subscribe, block until termination or timeout, and return what was published."""
    return _collect(publisher, get_settings().effective_timeout(timeout))


async def collect_published_async(
    publisher: Publisher, timeout: Optional[float] = None
) -> Published:
    """Like ``collect_published``, but waits in a worker thread to keep the loop running."""
    return await _collect_async(publisher, get_settings().effective_timeout(timeout))


def _verdict(
    published: Published,
    expected: List[Outcome],
    timeout: float,
    description: Optional[str],
    location: Optional[str],
) -> Verdict:
    if not published.terminated:
        kind = VerdictKind.TIMEOUT
    elif published.outcomes == expected:
        kind = VerdictKind.PASSED
    else:
        kind = VerdictKind.MISMATCH
    return Verdict(
        kind=kind,
        expected=expected,
        observed=published.outcomes,
        timeout=timeout,
        description=description or get_settings().default_description,
        location=location,
    )


def evaluate_publisher(
    publisher: Publisher,
    expected: Iterable[Outcome],
    timeout: Optional[float] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> Verdict:
    """Run the assertion without raising and return its ``Verdict``."""
    location = location or _caller_location()
    expected = _expected_outcomes(expected)
    timeout = get_settings().effective_timeout(timeout)
    published = _collect(publisher, timeout)
    return _verdict(published, expected, timeout, description, location)


def _raise_for(verdict: Verdict) -> Verdict:
    __tracebackhide__ = True
    if verdict.kind is VerdictKind.TIMEOUT:
        raise PublishTimeoutError(verdict)
    if verdict.kind is VerdictKind.MISMATCH:
        raise PublishedMismatchError(verdict)
    return verdict


def assert_eventually_publishes(
    publisher: Publisher,
    expected: Iterable[Outcome],
    timeout: Optional[float] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> Verdict:
    """
    Assert that ``publisher`` eventually publishes exactly ``expected``.

    Values are recorded as ``Value(v)``, a failure completion as ``Failure(e)``;
    successful completion only ends the wait. An empty ``expected`` means
    "finishes without values".

    Args:
        publisher: The publisher under test. It may emit from any thread.
        expected: Expected outcomes, in order. Copied on entry.
        timeout: Seconds to wait for the terminal event (default from config).
        description: Label used in failure messages.
        location: ``file:line`` reported on failure; defaults to the caller.

    Raises:
        PublishedMismatchError: terminated, but the outcomes differ.
        PublishTimeoutError: no terminal event within ``timeout``.
    """
    __tracebackhide__ = True
    verdict = evaluate_publisher(
        publisher,
        expected,
        timeout=timeout,
        description=description,
        location=location or _caller_location(),
    )
    return _raise_for(verdict)


async def assert_eventually_publishes_async(
    publisher: Publisher,
    expected: Iterable[Outcome],
    timeout: Optional[float] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> Verdict:
    """Coroutine version of ``assert_eventually_publishes`` for async tests."""
    __tracebackhide__ = True
    location = location or _caller_location()
    expected = _expected_outcomes(expected)
    effective = get_settings().effective_timeout(timeout)
    published = await _collect_async(publisher, effective)
    return _raise_for(_verdict(published, expected, effective, description, location))
