"""Tests for custom exception classes."""

import pytest

from miary.exceptions import InputDataError, MiaryError


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_input_error_inherits_from_base(self):
        assert issubclass(InputDataError, MiaryError)

    def test_input_error_is_value_error(self):
        """Loader callers that catch ValueError keep working."""
        assert issubclass(InputDataError, ValueError)

    def test_base_inherits_from_exception(self):
        assert issubclass(MiaryError, Exception)


class TestInputDataError:
    """Tests for InputDataError."""

    def test_basic_message(self):
        err = InputDataError("Input data cannot be empty")
        assert str(err) == "Input data cannot be empty"
        assert err.missing == set()

    def test_with_missing_fields(self):
        err = InputDataError("Missing required keys", missing={"days", "range"})
        assert err.missing == {"days", "range"}

    def test_can_be_raised_and_caught(self):
        with pytest.raises(MiaryError) as exc_info:
            raise InputDataError("Test error", missing={"headache"})
        assert exc_info.value.missing == {"headache"}
