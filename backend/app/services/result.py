"""
Tagged outcome of a service operation.

Services never raise past their own boundary: they return either
`ServiceResult.ok(body)` or `ServiceResult.fail(error)`, and the controller
decides the HTTP status from the tag.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    success: bool
    body: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def ok(cls, body: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, body=body)

    @classmethod
    def fail(cls, error: BaseException) -> "ServiceResult[T]":
        return cls(success=False, error=error)
