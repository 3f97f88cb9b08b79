"""Test the Result type for explicit error handling."""

from datetime import date

import pytest

from core.domain.models import NotFound, TrackerError
from core.services.result import Result


class TestResult:
    def test_result_ok_creates_successful_result(self) -> None:
        result: Result[str, Exception] = Result.ok("success")
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "success"

    def test_result_error_creates_failed_result(self) -> None:
        error = NotFound(date(2024, 1, 1))
        result: Result[str, TrackerError] = Result.err(error)
        assert not result.is_ok()
        assert result.is_err()
        assert result.unwrap_or("default") == "default"
        assert result.unwrap_err() is error

    def test_unwrap_raises_on_error_result(self) -> None:
        result: Result[str, TrackerError] = Result.err(NotFound(date(2024, 1, 1)))

        with pytest.raises(NotFound, match="2024-01-01"):
            result.unwrap()

    def test_unwrap_err_on_ok_raises(self) -> None:
        with pytest.raises(ValueError):
            Result.ok(1).unwrap_err()

    def test_result_requires_exactly_one_side(self) -> None:
        with pytest.raises(ValueError):
            Result()
        with pytest.raises(ValueError):
            Result(value=1, error=ValueError("x"))

    def test_map_transforms_only_ok(self) -> None:
        assert Result.ok(2).map(lambda v: v * 10).unwrap() == 20
        error = ValueError("boom")
        assert Result.err(error).map(lambda v: v * 10).unwrap_err() is error
