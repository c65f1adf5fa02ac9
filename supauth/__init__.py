"""
Supauth Python SDK

A Python client for the Supabase authentication API: sign-up, sign-in,
sign-out, token refresh and password recovery over HTTPS/JSON, with a
pluggable HTTP transport.
"""

from .auth import Auth, create_auth
from .client import HttpClient, new_client
from .types import (
    SupauthConfig,
    HttpTransport,
    UserCredentials,
    SignUp,
    User,
    Authenticated,
    ErrorResponse,
    AuthResponse,
    build_base_url,
)
from .errors import (
    SupauthError,
    ConfigurationError,
    SerializationError,
    InvalidURLError,
    TransportError,
    DecodeError,
    is_supauth_error,
)

__version__ = "0.1.0"
__all__ = [
    # Clients
    "Auth",
    "create_auth",
    "HttpClient",
    "new_client",
    # Types
    "SupauthConfig",
    "HttpTransport",
    "UserCredentials",
    "SignUp",
    "User",
    "Authenticated",
    "ErrorResponse",
    "AuthResponse",
    "build_base_url",
    # Errors
    "SupauthError",
    "ConfigurationError",
    "SerializationError",
    "InvalidURLError",
    "TransportError",
    "DecodeError",
    "is_supauth_error",
]
