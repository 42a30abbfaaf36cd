"""Result pair returned by every service operation.

Services never raise for expected failures; callers branch on ``error``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from marketplace.domain.errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    data: T
    error: DomainError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
