"""
Result Type Implementation.

Layout algorithms report their outcome as Ok(positions) or Err(failure)
at the engine boundary, so the fallback decision is an explicit branch
instead of an exception handler spread across callers.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Positions an algorithm produced and the engine accepted."""
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Why an algorithm's output was rejected."""
    error: E

    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]
