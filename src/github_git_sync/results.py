"""Value-or-failure results for GitHub API requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import auto
from typing import Generic, TypeVar

from strenum import StrEnum

T = TypeVar("T")


class ApiFailureKind(StrEnum):
    """Why a request did not produce a value."""

    not_found = auto()
    """The server answered 404."""

    http_status = auto()
    """The server answered with any other non-2xx status."""

    transport = auto()
    """No usable response arrived (connection, timeout, protocol or decompression errors)."""

    response_shape = auto()
    """The body was not valid JSON or did not match the expected model."""


@dataclass(frozen=True)
class ApiFailure:
    """Details of a failed request, as logged by the client."""

    kind: ApiFailureKind
    method: str
    url: str
    message: str
    status_code: int | None = None


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Either the value a request produced or the reason it did not produce one."""

    value: T | None = None
    failure: ApiFailure | None = None

    @property
    def ok(self) -> bool:
        """Return True if the request succeeded."""
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> ApiResult[T]:
        """Return a successful result holding `value`."""
        return cls(value=value)

    @classmethod
    def fail(cls, failure: ApiFailure) -> ApiResult[T]:
        """Return a failed result carrying `failure`."""
        return cls(failure=failure)
