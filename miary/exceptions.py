"""Custom exceptions for miary.

The analysis stages themselves never raise on well-formed input; these are
raised while loading and validating raw input before analysis starts.
"""


class MiaryError(Exception):
    """Base exception for all miary errors."""

    pass


class InputDataError(MiaryError, ValueError):
    """Raised when input data is empty or lacks required fields."""

    def __init__(self, message: str, missing: set[str] | None = None):
        super().__init__(message)
        self.missing = set(missing) if missing else set()
