"""
Marketplace Backend — Operation Result
=======================================

What:  A value-or-storage-error container for service calls.
How:   `Result.capture(awaitable)` awaits a service call and records either
       its value or the DatabaseError it raised. Client errors
       (Unauthenticated, NotFound, Forbidden, validation) are not captured;
       they keep propagating.
Who:   The GraphQL error policies, which decide per resolver whether a
       captured storage error becomes null or a GraphQL error.
"""

from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from marketplace.exceptions import DatabaseError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[DatabaseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    async def capture(cls, awaitable: Awaitable[T]) -> "Result[T]":
        try:
            return cls(value=await awaitable)
        except DatabaseError as e:
            return cls(error=e)

    def unwrap(self) -> T:
        """The value, re-raising a captured storage error."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or_none(self) -> Optional[T]:
        return self.value if self.error is None else None
