"""
Supauth Error Classes

Exceptions raised by the request/response pipeline. A non-2xx response with a
well-formed error body is not an exception: it comes back as an
``AuthResponse`` whose data is an ``ErrorResponse``.
"""

from typing import Any, Dict, Optional


class SupauthError(Exception):
    """Base error class for the Supauth SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(SupauthError):
    """Configuration error (missing base URL, project id or api key)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class SerializationError(SupauthError):
    """Request payload cannot be represented as JSON."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_ERROR", message, details)


class InvalidURLError(SupauthError):
    """Composed request URL is not a valid absolute http(s) URL."""

    def __init__(self, url: str, message: str):
        super().__init__("INVALID_URL", message, {"url": url})
        self.url = url


class TransportError(SupauthError):
    """Network error (DNS, connection, TLS, timeout)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class DecodeError(SupauthError):
    """Response body is not valid JSON for the expected shape."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(
            "DECODE_ERROR",
            message,
            {"status_code": status_code, "body": body},
        )
        self.status_code = status_code
        self.body = body


def is_supauth_error(error: Any) -> bool:
    """Check if error is a SupauthError."""
    return isinstance(error, SupauthError)
