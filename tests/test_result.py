"""Tests for error kinds and the Result type."""

import pytest

from core.errors import AppError, AuthError, ConfigError, GatewayError, StorageError
from core.result import Result


class TestErrors:
    def test_hierarchy(self) -> None:
        for cls in (ConfigError, StorageError, AuthError, GatewayError):
            assert issubclass(cls, AppError)

    def test_str_includes_detail(self) -> None:
        err = GatewayError("The calendar service rejected the event", "HTTP 403")
        assert err.message == "The calendar service rejected the event"
        assert str(err) == "The calendar service rejected the event (HTTP 403)"

    def test_str_without_detail(self) -> None:
        assert str(AuthError("No authorization code was supplied")) == "No authorization code was supplied"


class TestResult:
    def test_success(self) -> None:
        result = Result.success({"id": "evt"})
        assert result.ok is True
        assert result.unwrap() == {"id": "evt"}

    def test_failure(self) -> None:
        err = StorageError("Could not save the access token")
        result = Result.failure(err)
        assert result.ok is False
        assert result.error is err
        with pytest.raises(StorageError):
            result.unwrap()
