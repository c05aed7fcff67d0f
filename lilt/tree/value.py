"""Runtime values of the lilt language: integers, booleans, lists and the "no value" marker returned by statements
that produce no data (assignments, blocks).

Values are immutable (lists hold a tuple), so the same object can sit in an environment and in an evaluation result
without one being able to change the other.

Values of different kinds are ordered by kind first: integers < booleans < lists < no value. Within a kind, integers
compare numerically, booleans as false < true, lists element by element, and the no value marker is equal to itself.
Equality never crosses kinds: 1 and true are different values.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from lilt.lang.error import ErrorCode, EvalError


class Value(ABC):
    """Superclass of all runtime values."""
    RANK = -1  # position of the value kind in the ordering described above

    @abstractmethod
    def key(self):
        """Returns a tuple whose natural ordering is the lilt ordering of values."""

    @abstractmethod
    def truthy(self):
        """Whether this value selects the then-branch of an if. Raises an EvalError if it has no truth value."""


@dataclass(frozen=True)
class IntValue(Value):
    value: int
    RANK = 0

    def key(self):
        return (self.RANK, self.value)

    def truthy(self):
        return self.value != 0

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BoolValue(Value):
    value: bool
    RANK = 1

    def key(self):
        return (self.RANK, int(self.value))

    def truthy(self):
        return self.value

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class ListValue(Value):
    values: Tuple[Value, ...] = ()
    RANK = 2

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    def key(self):
        return (self.RANK, tuple(value.key() for value in self.values))

    def truthy(self):
        raise EvalError(ErrorCode.TYPE_ERROR, "a list cannot be used as a condition: '{}'", str(self))

    def __len__(self):
        return len(self.values)

    def __str__(self):
        return "[" + ", ".join(str(value) for value in self.values) + "]"


@dataclass(frozen=True)
class NoValue(Value):
    RANK = 3

    def key(self):
        return (self.RANK,)

    def truthy(self):
        raise EvalError(ErrorCode.TYPE_ERROR, "no value cannot be used as a condition")

    def __str__(self):
        return "none"


NO_VALUE = NoValue()
