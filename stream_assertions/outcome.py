from dataclasses import dataclass
from typing import Any, Iterable, List, Union


@dataclass(frozen=True)
class Value:
    """A value emitted by a publisher."""

    value: Any

    def __repr__(self) -> str:
        return f"Value({self.value!r})"


@dataclass(frozen=True, eq=False)
class Failure:
    """
    A terminal failure carrying the publisher's error.

    Exceptions do not compare by value, so two failures are equal when both
    errors are exceptions of the same concrete type with equal ``args``.
    Any other payload (e.g. an Enum member) is compared with ``==``.
    """

    error: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return _errors_equal(self.error, other.error)

    def __hash__(self) -> int:
        if isinstance(self.error, BaseException):
            try:
                return hash((type(self.error), self.error.args))
            except TypeError:
                # Unhashable args; equal failures still share the type.
                return hash(type(self.error))
        return hash(self.error)

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


class Finished:
    """Marker for successful completion. Use the ``FINISHED`` singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "FINISHED"


FINISHED = Finished()

Outcome = Union[Value, Failure]
Completion = Union[Finished, Failure]


def _errors_equal(left: Any, right: Any) -> bool:
    if isinstance(left, BaseException) and isinstance(right, BaseException):
        return type(left) is type(right) and left.args == right.args
    return left == right


def values(*items: Any) -> List[Value]:
    """Shorthand for building an expected sequence: ``values(1, 2, 3)``."""
    return [Value(item) for item in items]


def format_outcomes(outcomes: Iterable[Outcome]) -> str:
    return "[" + ", ".join(repr(outcome) for outcome in outcomes) + "]"
