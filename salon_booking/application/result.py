from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from salon_booking.application.exceptions import BookingError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Either a value or a booking domain error, never both."""

    value: T | None = None
    error: BookingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def success(value: T) -> "OperationResult[T]":
        return OperationResult(value=value)

    @staticmethod
    def failure(error: BookingError) -> "OperationResult[T]":
        return OperationResult(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
