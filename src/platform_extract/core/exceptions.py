"""
Custom exceptions for the platform extraction engine.

Provides a hierarchy of exceptions for precise error handling across
all subsystems. All exceptions inherit from PlatformExtractError.

Exception Hierarchy:
    PlatformExtractError (base)
    ├── ConfigurationError
    ├── BrowserError
    │   ├── NavigationError
    │   └── PageLoadError
    └── ExtractionError
        ├── ItemExtractionError
        ├── UnsupportedPlatformError
        └── FullContentFetchError

Most extraction failures never surface as exceptions: per-item failures
are swallowed at the item boundary and batch failures are converted into
failed ExtractionResult objects. These types exist for the seams where
an explicit error is the right contract (strict lookups, page loading).
"""

from typing import Any


class PlatformExtractError(Exception):
    """
    Base exception for all platform extraction errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PlatformExtractError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - Setting values fail validation
    """

    pass


# =============================================================================
# Browser Errors
# =============================================================================


class BrowserError(PlatformExtractError):
    """Base error for browser/Playwright operations."""

    pass


class NavigationError(BrowserError):
    """
    Error during page navigation.

    Raised when:
    - URL is unreachable
    - Navigation times out
    - The server answers with an HTTP error status
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class PageLoadError(BrowserError):
    """Error capturing the rendered page after navigation."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(PlatformExtractError):
    """Base error for content extraction operations."""

    pass


class ItemExtractionError(ExtractionError):
    """
    Error extracting a single item from its element.

    Raised by single-item extraction code; the platform extractor catches
    it at the item boundary, logs it, and skips the item.
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        selector: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if index is not None:
            details["index"] = index
        if selector:
            details["selector"] = selector
        super().__init__(message, details)
        self.index = index
        self.selector = selector


class UnsupportedPlatformError(ExtractionError):
    """Raised by strict registry lookups for an unknown platform name."""

    def __init__(
        self,
        message: str,
        platform: str,
        supported: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {"platform": platform}
        if supported is not None:
            details["supported"] = supported
        super().__init__(message, details)
        self.platform = platform


class FullContentFetchError(ExtractionError):
    """Error loading a detail page for full-content resolution."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url
