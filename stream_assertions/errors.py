class StreamAssertionError(AssertionError):
    """Base class for failed publisher assertions. Carries the ``Verdict``."""

    def __init__(self, verdict) -> None:
        super().__init__(verdict.message)
        self.verdict = verdict


class PublishedMismatchError(StreamAssertionError):
    """The publisher terminated, but its outcomes differ from the expected ones."""


class PublishTimeoutError(StreamAssertionError):
    """The publisher did not terminate within the timeout."""
