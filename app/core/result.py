"""
Outcome values returned by the core services.

Every core operation returns either ``Ok(value)`` or ``Err(ServiceError)``;
callers branch on ``ServiceError.kind`` instead of catching exceptions.
Only the web boundary (``app.core.errors.unwrap``) turns an ``Err`` into an
HTTP response.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTH = "auth"
    AUTHORIZATION = "authorization"
    INTERNAL = "internal"


class AuthFailure(str, enum.Enum):
    MISSING = "missing"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    REVOKED = "revoked"
    USER_NOT_FOUND = "user_not_found"
    BAD_CREDENTIALS = "bad_credentials"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str
    reason: Optional[AuthFailure] = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ServiceError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


Result = Union[Ok[T], Err]


def validation_error(message: str) -> Err:
    return Err(ServiceError(ErrorKind.VALIDATION, message))


def not_found(message: str) -> Err:
    return Err(ServiceError(ErrorKind.NOT_FOUND, message))


def conflict(message: str) -> Err:
    return Err(ServiceError(ErrorKind.CONFLICT, message))


def auth_error(reason: AuthFailure, message: str = "Unauthorized request") -> Err:
    return Err(ServiceError(ErrorKind.AUTH, message, reason))


def forbidden(message: str) -> Err:
    return Err(ServiceError(ErrorKind.AUTHORIZATION, message))
