"""
Asserting on a custom publisher.

This example demonstrates:
- Implementing the Publisher interface for an existing callback-based source
- Asserting on it with assert_eventually_publishes
- Reading a Verdict instead of raising with evaluate_publisher

Usage:
    python custom_publisher.py
"""

import logging
import threading
import time

from stream_assertions import (
    FINISHED,
    Failure,
    Publisher,
    Subscription,
    Value,
    assert_eventually_publishes,
    evaluate_publisher,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SensorError(Exception):
    pass


class SensorReadings(Publisher):
    """Reads a fixed list of samples on a background thread; None means a broken sensor."""

    def __init__(self, samples, interval=0.05):
        self.samples = samples
        self.interval = interval

    def subscribe(self, on_value, on_completion):
        stopped = threading.Event()

        def run():
            for sample in self.samples:
                if stopped.wait(self.interval):
                    return
                if sample is None:
                    on_completion(Failure(SensorError("sensor offline")))
                    return
                on_value(sample)
            on_completion(FINISHED)

        threading.Thread(target=run, daemon=True).start()
        return Subscription(stopped.set)


def main():
    assert_eventually_publishes(
        SensorReadings([20.5, 21.0]),
        [Value(20.5), Value(21.0)],
        description="Healthy sensor",
    )
    logger.info("Healthy sensor published both samples")

    assert_eventually_publishes(
        SensorReadings([20.5, None, 22.0]),
        [Value(20.5), Failure(SensorError("sensor offline"))],
        description="Broken sensor",
    )
    logger.info("Broken sensor failed after the first sample")

    start = time.monotonic()
    verdict = evaluate_publisher(SensorReadings([1.0] * 100), [], timeout=0.5)
    logger.info(
        "Slow sensor: %s after %.2fs\n%s",
        verdict.kind.value,
        time.monotonic() - start,
        verdict.message,
    )


if __name__ == "__main__":
    main()
