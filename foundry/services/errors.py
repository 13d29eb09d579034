"""Error taxonomy for everything outside the pure catalog engines.

The aggregation, filtering and comparison engines never raise on a
well-formed catalog. Failures come from loading a catalog (bad JSON,
unreachable URL, unreadable file), from configuration, and from the UI.
Each is turned into a ``UserFriendlyError`` carrying a message, a few
suggested actions and the technical details that go to the log.
"""

import json
import time
from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import httpx
import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    CATALOG = "catalog"
    NETWORK = "network"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """What the UI shows for a failure."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


def format_details(original_error: Exception | None = None, **fields: Any) -> str | None:
    """Join the non-empty fields as ``Label: value`` lines, then the cause."""
    lines = [
        f"{name.replace('_', ' ').capitalize()}: {value}"
        for name, value in fields.items()
        if value is not None and value != ""
    ]
    if original_error is not None:
        lines.append(f"Error: {type(original_error).__name__}: {original_error}")
    return "\n".join(lines) or None


class AppError(Exception):
    """Base class; subclasses fix the category, severity and default advice."""

    category: ErrorCategory = ErrorCategory.UNEXPECTED
    severity: ErrorSeverity = ErrorSeverity.ERROR
    recoverable: bool = True
    default_actions: ClassVar[tuple[str, ...]] = ("Try again", "Check the log file for details")

    def __init__(
        self,
        message: str,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.suggested_actions = suggested_actions if suggested_actions is not None else list(self.default_actions)
        self.technical_details = technical_details
        self.original_error = original_error

    def to_user_friendly(self) -> UserFriendlyError:
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class CatalogError(AppError):
    """The device catalog is malformed: bad JSON, wrong shape, duplicate ids."""

    category = ErrorCategory.CATALOG
    recoverable = False
    default_actions = (
        "Check the catalog file against the expected device format",
        "Make sure every device id is unique",
        "Remove the catalog setting to use the bundled dataset",
    )

    def __init__(
        self,
        message: str,
        source: str | None = None,
        device_id: str | None = None,
        field: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            technical_details=format_details(original_error, source=source, device=device_id, field=field),
            original_error=original_error,
        )
        self.source = source
        self.device_id = device_id
        self.field = field


class NetworkError(AppError):
    """A remote catalog could not be fetched."""

    category = ErrorCategory.NETWORK
    default_actions = (
        "Check your internet connection",
        "Verify the catalog URL is correct",
        "Try again in a few moments",
    )

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        actions = None
        if status_code == 404:
            actions = ["The catalog may have moved", "Check if the URL is correct"]
        elif status_code is not None and status_code >= 500:
            actions = ["The server is experiencing issues", "Try again later"]
        super().__init__(
            message,
            suggested_actions=actions,
            technical_details=format_details(original_error, status=status_code, url=url),
            original_error=original_error,
        )
        self.url = url
        self.status_code = status_code


class FileSystemError(AppError):
    """A catalog or configuration file could not be read or written."""

    category = ErrorCategory.FILE_SYSTEM
    default_actions = ("Check the file path and permissions", "Try a different location")

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
    ) -> None:
        actions = None
        if isinstance(original_error, PermissionError):
            actions = ["Check file permissions", "Choose a different location"]
        elif isinstance(original_error, FileNotFoundError):
            actions = ["Verify the file path is correct", "Check if the file was moved or deleted"]
        super().__init__(
            message,
            suggested_actions=actions,
            technical_details=format_details(original_error, path=path),
            original_error=original_error,
        )
        self.path = path


class ValidationError(AppError):
    """Invalid input, from the user or from data that is not a catalog."""

    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        constraints: list[str] | None = None,
    ) -> None:
        self.constraints = constraints or []
        super().__init__(
            message,
            suggested_actions=["Review the input requirements", *(f"Ensure: {c}" for c in self.constraints)],
            technical_details=format_details(field=field, value=None if value is None else str(value)[:100]),
        )
        self.field = field
        self.value = value


class ConfigurationError(AppError, ValueError):
    """A configuration that fails validation."""

    category = ErrorCategory.CONFIGURATION
    default_actions = ("Check the configuration settings", "Reset to default values if needed")

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(
            message,
            technical_details=format_details(problems="; ".join(self.errors)),
        )


HTTP_STATUS_MESSAGES: dict[int, str] = {
    401: "Authentication required to fetch the catalog.",
    403: "Access to the catalog was denied.",
    404: "The catalog was not found at this URL.",
    429: "Too many requests. Please wait before trying again.",
    500: "The server encountered an error. Please try again later.",
    502: "The server is temporarily unavailable. Please try again later.",
    503: "The service is temporarily unavailable. Please try again later.",
}


def to_app_error(error: Exception, context: dict[str, Any] | None = None) -> AppError:
    """Map any exception onto the taxonomy.

    Order matters: HTTPStatusError is not a RequestError, and
    JSONDecodeError is a ValueError.
    """
    if isinstance(error, AppError):
        return error

    context = context or {}
    url = context.get("url")
    path = context.get("path")

    match error:
        case httpx.HTTPStatusError():
            status = error.response.status_code
            return NetworkError(
                HTTP_STATUS_MESSAGES.get(status, f"HTTP error {status} occurred."),
                original_error=error,
                url=str(error.request.url),
                status_code=status,
            )
        case httpx.TimeoutException():
            return NetworkError(
                "The request timed out. The server may be slow or unavailable.", original_error=error, url=url
            )
        case httpx.RequestError():
            return NetworkError("A network error occurred. Please check your connection.", original_error=error, url=url)
        case PermissionError():
            return FileSystemError("Permission denied. You don't have access to this file.", error, path)
        case FileNotFoundError():
            return FileSystemError("The file was not found.", error, path)
        case OSError():
            return FileSystemError(f"A file system error occurred: {error}", error, path)
        case json.JSONDecodeError():
            return ValidationError("Invalid JSON format. The data could not be parsed.", field="json_content")
        case ValueError():
            return ValidationError(str(error), field=context.get("field"), value=context.get("value"))
        case TypeError():
            return ValidationError(f"Invalid data type: {error}", field=context.get("field"))

    return AppError(
        "An unexpected error occurred. Please try again.",
        technical_details=format_details(error),
        original_error=error,
    )


class ErrorHandlingService:
    """Logs failures and keeps a bounded history of them for the UI."""

    def __init__(self, max_history_size: int = 100) -> None:
        self._history: deque[tuple[float, AppError]] = deque(maxlen=max_history_size)

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Record an error and return what the user should see.

        Args:
            error: The exception that occurred
            operation: What was being done, e.g. "load catalog"
            component: Screen or module name
            context: Extra key/values; ``url``, ``path``, ``field`` and
                ``value`` refine the conversion
        """
        app_error = to_app_error(error, context)
        emit = log.warning if app_error.severity is ErrorSeverity.WARNING else log.error
        emit(
            "Error occurred",
            error_message=app_error.message,
            category=app_error.category.value,
            severity=app_error.severity.value,
            operation=operation,
            component=component,
            technical_details=app_error.technical_details,
            recoverable=app_error.recoverable,
            context=context,
        )
        self._history.append((time.time(), app_error))
        return app_error.to_user_friendly()

    def get_recent_errors(self, count: int = 10) -> list[AppError]:
        """Most recent errors, oldest first."""
        return [error for _, error in list(self._history)[-count:]]

    def get_error_count_by_category(self) -> dict[ErrorCategory, int]:
        return dict(Counter(error.category for _, error in self._history))

    def create_user_message(self, error: UserFriendlyError, include_suggestions: bool = True) -> str:
        """The message, followed by up to three suggested actions."""
        if not include_suggestions or not error.suggested_actions:
            return error.message
        bullets = "\n".join(f"  • {action}" for action in error.suggested_actions[:3])
        return f"{error.message}\n\nSuggested actions:\n{bullets}"


_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Process-wide error service, created on first use."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service


def handle_error(
    error: Exception,
    operation: str,
    component: str,
    context: dict[str, Any] | None = None,
) -> UserFriendlyError:
    return get_error_service().handle_error(error, operation, component, context)
