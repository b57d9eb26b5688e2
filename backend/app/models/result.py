"""
Result container returned by every caller-facing cellar operation.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..errors import CellarError

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Value or typed failure.

    A failed result may still carry a usable value: a degraded list
    returns an empty sequence alongside the error that caused it.
    """
    value: Optional[T] = None
    error: Optional[CellarError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CellarError, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value, error=error)
