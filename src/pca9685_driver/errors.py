"""
Error codes and the per-call result type returned by every driver operation.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


class ErrorCode(IntEnum):
    """Status codes kept in the sticky last-error slot."""

    OK = 0x00
    ERROR = 0xFF  # invalid argument other than channel/mode register
    CHANNEL = 0xFE
    MODE = 0xFD
    I2C = 0xFC


class PCA9685Error(Exception):
    """Raised by :meth:`Result.unwrap` when an operation failed."""

    def __init__(self, error: ErrorCode, message: str = ''):
        self.error = error
        super().__init__(message or f'PCA9685 operation failed: {error.name}')


class ConfigurationError(Exception):
    """Raised when the JSON configuration can not be used."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one driver call: an error code and, on success, a value."""

    error: ErrorCode = ErrorCode.OK
    value: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.error == ErrorCode.OK

    def value_or(self, default: Any) -> Any:
        """Return the value on success, ``default`` otherwise."""
        return self.value if self.ok else default

    def unwrap(self) -> T:
        """Return the value or raise :class:`PCA9685Error`."""
        if not self.ok:
            raise PCA9685Error(self.error)
        return self.value


OK = Result()


def failure(error: ErrorCode) -> Result:
    return Result(error=error)
