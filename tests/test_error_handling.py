"""Property-based tests for error handling across the HTTP client and error service."""

import json
from unittest.mock import patch

import httpx
import pytest
from hypothesis import given, settings, strategies as st

from foundry.services import HttpClientService
from foundry.services.errors import (
    AppError,
    CatalogError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    NetworkError,
    ValidationError,
    format_details,
    get_error_service,
    handle_error,
    to_app_error,
)


def make_status_error(status_code: int, url: str = "https://example.com/catalog.json") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestErrorHandlingProperties:
    """Property-based tests for user-friendly error handling."""

    @given(
        path=st.text(min_size=1, max_size=30, alphabet="abcdefghijklmnopqrstuvwxyz0123456789-"),
        error_type=st.sampled_from(["network_error", "timeout_error", "http_4xx_error", "http_5xx_error"]),
    )
    @pytest.mark.asyncio
    @settings(deadline=None)
    async def test_http_client_logs_technical_details(self, path: str, error_type: str) -> None:
        url = f"https://example.com/{path}"

        def handler(request: httpx.Request) -> httpx.Response:
            if error_type == "network_error":
                raise httpx.ConnectError("connection refused", request=request)
            if error_type == "timeout_error":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(404 if error_type == "http_4xx_error" else 500)

        client = HttpClientService(max_retries=1, base_delay=0, transport=httpx.MockTransport(handler))
        with patch("foundry.services.http_client.log") as mock_logger:
            with pytest.raises(httpx.HTTPError):
                await client.get(url)

            log_calls = mock_logger.warning.call_args_list + mock_logger.error.call_args_list
            assert log_calls
            assert any("error" in call.kwargs or "url" in call.kwargs for call in log_calls)
        await client.close()

    @given(
        error=st.sampled_from([
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            PermissionError("denied"),
            FileNotFoundError("missing"),
            IsADirectoryError("is a directory"),
            json.JSONDecodeError("Expecting value", "{", 1),
            ValueError("bad value"),
            TypeError("bad type"),
            RuntimeError("boom"),
        ]),
        operation=st.text(min_size=1, max_size=30),
    )
    def test_every_error_gets_a_message(self, error: Exception, operation: str) -> None:
        service = ErrorHandlingService()
        user_error = service.handle_error(error, operation=operation, component="test")

        assert user_error.message
        assert isinstance(user_error.category, ErrorCategory)
        assert service.get_recent_errors(1)[0].message == user_error.message


class TestErrorConversion:

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (make_status_error(404), ErrorCategory.NETWORK),
            (httpx.ConnectError("refused"), ErrorCategory.NETWORK),
            (httpx.ConnectTimeout("slow"), ErrorCategory.NETWORK),
            (PermissionError("denied"), ErrorCategory.FILE_SYSTEM),
            (FileNotFoundError("missing"), ErrorCategory.FILE_SYSTEM),
            (OSError("disk"), ErrorCategory.FILE_SYSTEM),
            (json.JSONDecodeError("Expecting value", "", 0), ErrorCategory.VALIDATION),
            (ValueError("bad"), ErrorCategory.VALIDATION),
            (TypeError("bad"), ErrorCategory.VALIDATION),
            (RuntimeError("boom"), ErrorCategory.UNEXPECTED),
        ],
    )
    def test_categories(self, error: Exception, category: ErrorCategory) -> None:
        user_error = ErrorHandlingService().handle_error(error, "op", "test")
        assert user_error.category is category

    def test_http_status_message(self) -> None:
        user_error = ErrorHandlingService().handle_error(make_status_error(404), "fetch catalog", "loader")
        assert user_error.message == "The catalog was not found at this URL."
        assert "404" in (user_error.technical_details or "")

    def test_unknown_status_message(self) -> None:
        user_error = ErrorHandlingService().handle_error(make_status_error(418), "fetch catalog", "loader")
        assert user_error.message == "HTTP error 418 occurred."

    def test_app_errors_pass_through(self) -> None:
        error = CatalogError("Duplicate device id 'a'", source="bundled", device_id="a")
        user_error = ErrorHandlingService().handle_error(error, "load catalog", "main")
        assert user_error.message == "Duplicate device id 'a'"
        assert user_error.category is ErrorCategory.CATALOG
        assert not user_error.recoverable
        assert "Device: a" in (user_error.technical_details or "")

    def test_error_subclasses(self) -> None:
        assert NetworkError("x").category is ErrorCategory.NETWORK
        assert FileSystemError("x", path="/tmp/c.json").category is ErrorCategory.FILE_SYSTEM
        assert ValidationError("x", field="price").category is ErrorCategory.VALIDATION
        assert isinstance(CatalogError("x"), AppError)
        assert ConfigurationError("x", errors=["bad"]).category is ErrorCategory.CONFIGURATION
        assert isinstance(ConfigurationError("x"), ValueError)

    def test_format_details_skips_empty_fields(self) -> None:
        details = format_details(ValueError("boom"), source="bundled", device=None, field="")
        assert details == "Source: bundled\nError: ValueError: boom"
        assert format_details() is None

    def test_status_specific_suggestions(self) -> None:
        assert NetworkError("x", status_code=404).suggested_actions[0] == "The catalog may have moved"
        assert NetworkError("x", status_code=503).suggested_actions == ["The server is experiencing issues", "Try again later"]
        assert to_app_error(PermissionError("denied"), {"path": "/tmp/c.json"}).technical_details.startswith("Path: /tmp/c.json")


class TestErrorService:

    def test_history_is_bounded(self) -> None:
        service = ErrorHandlingService(max_history_size=3)
        for i in range(5):
            service.handle_error(ValueError(f"error {i}"), "op", "test")
        assert [e.message for e in service.get_recent_errors(10)] == ["error 2", "error 3", "error 4"]

    def test_counts_by_category(self) -> None:
        service = ErrorHandlingService()
        service.handle_error(ValueError("a"), "op", "test")
        service.handle_error(TypeError("b"), "op", "test")
        service.handle_error(httpx.ConnectError("c"), "op", "test")
        assert service.get_error_count_by_category() == {
            ErrorCategory.VALIDATION: 2,
            ErrorCategory.NETWORK: 1,
        }

    def test_user_message_suggestions(self) -> None:
        service = ErrorHandlingService()
        user_error = service.handle_error(CatalogError("Bad catalog"), "load", "test")
        with_suggestions = service.create_user_message(user_error)
        assert with_suggestions.startswith("Bad catalog")
        assert "Suggested actions:" in with_suggestions
        assert service.create_user_message(user_error, include_suggestions=False) == "Bad catalog"

    def test_service_remains_functional_after_errors(self) -> None:
        service = ErrorHandlingService()
        service.handle_error(RuntimeError("boom"), "op", "test")
        user_error = service.handle_error(ValueError("next"), "op", "test")
        assert user_error.message == "next"
        assert user_error.severity in ErrorSeverity

    def test_module_helpers_share_one_service(self) -> None:
        service = get_error_service()
        assert get_error_service() is service
        handle_error(ValueError("shared"), "op", "test")
        assert service.get_recent_errors(1)[0].message == "shared"
