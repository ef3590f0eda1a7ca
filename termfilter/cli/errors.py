from __future__ import annotations

from typing import Any

from termfilter.exceptions import FilterError, FilterSyntaxError, ItemError

from .results import ErrorInfo


class CLIError(Exception):
    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def normalize_exception(exc: Exception) -> Exception:
    """Map library errors onto CLIError; anything else passes through."""
    if isinstance(exc, FilterSyntaxError):
        details = {"position": exc.position} if exc.position is not None else None
        return CLIError(exc.message, exit_code=2, error_type="usage_error", details=details)
    if isinstance(exc, ItemError):
        return CLIError(exc.message, exit_code=2, error_type="validation_error")
    if isinstance(exc, OSError):
        return CLIError(str(exc), exit_code=2, error_type="io_error")
    return exc


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, FilterError):
        return 2
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(type=exc.error_type, message=exc.message, details=exc.details)
    return ErrorInfo(type=exc.__class__.__name__, message=str(exc), details=None)
