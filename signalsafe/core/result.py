"""Tagged result type returned by every service operation.

Services return ``Ok(value)`` or ``Err(kind, message)``; the API layer maps the
kind to an HTTP status in one place (see signalsafe.api.responses).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor."


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal_error"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def validation_error(message: str) -> Err:
    return Err(ErrorKind.VALIDATION, message)


def unauthenticated(message: str) -> Err:
    return Err(ErrorKind.UNAUTHENTICATED, message)


def forbidden(message: str) -> Err:
    return Err(ErrorKind.FORBIDDEN, message)


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> Err:
    return Err(ErrorKind.CONFLICT, message)


def internal_error(message: str = INTERNAL_ERROR_MESSAGE) -> Err:
    return Err(ErrorKind.INTERNAL, message)


class GuardRejected(Exception):
    """Raised by route guards to stop a request before its handler runs."""

    def __init__(self, error: Err) -> None:
        self.error = error
        super().__init__(error.message)
