"""Result type and application error taxonomy.

Expected failures (validation, business rules, absence, persistence faults)
travel as values: every repository and service returns either ``Success`` or
``Failure``. Exceptions are reserved for the unexpected and are converted back
into a ``Failure`` at each service boundary by ``service_boundary``.
"""

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Literal, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorType(str, Enum):
    """Error kinds. Each kind has a conventional HTTP status code."""

    NOT_FOUND = "NotFound"
    BAD_REQUEST = "BadRequest"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    BUSINESS_LOGIC_ERROR = "BusinessLogicError"
    DATABASE_ERROR = "DatabaseError"
    VALIDATION_ERROR = "ValidationError"
    CONFLICT = "Conflict"


STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.BAD_REQUEST: 400,
    ErrorType.INTERNAL_SERVER_ERROR: 500,
    ErrorType.BUSINESS_LOGIC_ERROR: 403,
    ErrorType.DATABASE_ERROR: 500,
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.CONFLICT: 409,
}


class AppError(Exception):
    """Structured error carrying a kind, a human message and a status code.

    The message is surfaced to API callers verbatim.
    """

    def __init__(self, kind: ErrorType, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code if status_code is not None else STATUS_CODES[kind]

    def __repr__(self) -> str:
        return f"AppError({self.kind.value}, {self.message!r}, {self.status_code})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppError):
            return NotImplemented
        return (self.kind, self.message, self.status_code) == (other.kind, other.message, other.status_code)

    def __hash__(self) -> int:
        return hash((self.kind, self.message, self.status_code))

    @classmethod
    def not_found(cls, message: str) -> "AppError":
        return cls(ErrorType.NOT_FOUND, message)

    @classmethod
    def bad_request(cls, message: str) -> "AppError":
        return cls(ErrorType.BAD_REQUEST, message)

    @classmethod
    def internal(cls, message: str) -> "AppError":
        return cls(ErrorType.INTERNAL_SERVER_ERROR, message)

    @classmethod
    def business(cls, message: str) -> "AppError":
        return cls(ErrorType.BUSINESS_LOGIC_ERROR, message)

    @classmethod
    def database(cls, message: str) -> "AppError":
        return cls(ErrorType.DATABASE_ERROR, message)

    @classmethod
    def validation(cls, message: str) -> "AppError":
        return cls(ErrorType.VALIDATION_ERROR, message)

    @classmethod
    def conflict(cls, message: str) -> "AppError":
        return cls(ErrorType.CONFLICT, message)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome holding a value."""

    value: T

    @property
    def is_success(self) -> Literal[True]:
        return True

    @property
    def is_failure(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome holding an AppError."""

    error: AppError

    @property
    def is_success(self) -> Literal[False]:
        return False

    @property
    def is_failure(self) -> Literal[True]:
        return True

    def unwrap(self):
        """Raise the carried error. Routes rely on the app-level AppError handler."""
        raise self.error

    def is_kind(self, kind: ErrorType) -> bool:
        return self.error.kind == kind


Result = Union[Success[T], Failure]


def success(value: T) -> Success[T]:
    return Success(value)


def failure(error: AppError) -> Failure:
    return Failure(error)


def service_boundary(func: Callable[..., Result[Any]]) -> Callable[..., Result[Any]]:
    """Convert any exception escaping a service method into a DatabaseError failure."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result[Any]:
        try:
            return func(*args, **kwargs)
        except AppError as e:
            return failure(e)
        except Exception as e:
            logger.exception("Unexpected error in %s", func.__qualname__)
            return failure(AppError.database(str(e)))

    return wrapper
