"""Unified exception hierarchy for PyFly CSRF.

All package exceptions inherit from CsrfFrameworkException, enabling unified
error handling. HTTP-facing errors carry the status code the middleware
reports to the client.

Categories:
- HttpError: any failure that maps to an HTTP status
- CsrfError: validation rejections (always 403)
"""

from __future__ import annotations

from http import HTTPStatus

# =============================================================================
# Base Exception
# =============================================================================


class CsrfFrameworkException(Exception):
    """Base exception for all PyFly CSRF errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_SIGNATURE_INVALID").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# HTTP Exceptions
# =============================================================================


class HttpError(CsrfFrameworkException):
    """An error that is reported to the client with an HTTP status.

    Args:
        status: HTTP status code (default: 403).
        message: Error message written to the response body.
    """

    def __init__(
        self,
        status: int = HTTPStatus.FORBIDDEN,
        message: str = "",
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)
        self.status = int(status)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


# =============================================================================
# CSRF Validation Exceptions
# =============================================================================


class CsrfError(HttpError):
    """Base for validation rejections. Always 403 Forbidden."""

    error_code: str = "CSRF_REJECTED"

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(HTTPStatus.FORBIDDEN, message, code=self.error_code, context=context)


class MethodUnreadableError(CsrfError):
    """The request method is missing or is not a string."""

    error_code = "CSRF_METHOD_UNREADABLE"


class CookieHeaderMissingError(CsrfError):
    """The request carries no cookie header at all."""

    error_code = "CSRF_COOKIE_HEADER_MISSING"


class TokenCookieMissingError(CsrfError):
    """The token cookie is absent or empty."""

    error_code = "CSRF_TOKEN_COOKIE_MISSING"


class SecretCookieMissingError(CsrfError):
    """The ``csrfSecret`` cookie is absent or empty."""

    error_code = "CSRF_SECRET_COOKIE_MISSING"


class SignatureInvalidError(CsrfError):
    """The signed token cookie failed signature verification."""

    error_code = "CSRF_SIGNATURE_INVALID"


class TokenSecretMismatchError(CsrfError):
    """The token was not derived from the client's secret."""

    error_code = "CSRF_TOKEN_SECRET_MISMATCH"
