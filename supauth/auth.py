"""
Supauth Auth Operations

Sign-up, sign-in, sign-out, token refresh and password recovery against the
Supabase auth API. Each operation is one request through ``HttpClient``.
"""

from typing import Any, Optional

from .client import HttpClient
from .errors import ConfigurationError
from .types import (
    AuthResponse,
    Authenticated,
    HttpTransport,
    SignUp,
    SupauthConfig,
    UserCredentials,
)


class Auth:
    """
    Supauth Client - SDK entry point.

    Every method returns an ``AuthResponse``. A rejection by the API (bad
    credentials, duplicate email, expired token) is returned, not raised:
    check ``response.ok`` or ``response.error``.
    """

    def __init__(self, config: SupauthConfig) -> None:
        """Initialize the auth client."""
        self._validate_config(config)

        self._client = HttpClient(
            config.resolve_base_url(),
            config.api_key,
            transport=config.transport,
            timeout=config.timeout,
            headers=config.headers,
            debug=config.debug,
        )

        self._client._log(f"Auth initialized (base_url={self._client.base_url})")

    def _validate_config(self, config: SupauthConfig) -> None:
        """Validate configuration."""
        if config.base_url is None and not config.project_id:
            raise ConfigurationError("project_id is required")
        if not config.api_key:
            raise ConfigurationError("api_key is required")

    @property
    def client(self) -> HttpClient:
        """The underlying request/response pipeline."""
        return self._client

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    def sign_up(self, credentials: UserCredentials) -> AuthResponse:
        """
        Register a new user with email and password.

        Returns:
            AuthResponse with a SignUp profile, or an ErrorResponse
        """
        self._client._log(f"Sign up for: {credentials.email}")
        return self._client.create_and_send_request("POST", "signup", credentials, SignUp)

    def sign_in(self, credentials: UserCredentials) -> AuthResponse:
        """
        Sign in with email and password.

        Returns:
            AuthResponse with an Authenticated session, or an ErrorResponse
        """
        self._client._log(f"Sign in for: {credentials.email}")
        return self._client.create_and_send_request(
            "POST", "token?grant_type=password", credentials, Authenticated
        )

    def sign_out(self, token: str) -> AuthResponse:
        """Revoke the session identified by the access token."""
        request = self._client.create_request("POST", "logout", None)
        request.headers["Authorization"] = f"Bearer {token}"
        return self._client.send_request(request, None)

    def refresh_token(self, refresh_token: str) -> AuthResponse:
        """Exchange a refresh token for a new Authenticated session."""
        return self._client.create_and_send_request(
            "POST",
            "token?grant_type=refresh_token",
            {"refresh_token": refresh_token},
            Authenticated,
        )

    def forgotten_password(self, email: str) -> AuthResponse:
        """Send a password recovery email."""
        self._client._log(f"Password recovery for: {email}")
        return self._client.create_and_send_request("POST", "recover", {"email": email}, None)

    def reset_password(self, token: str, password: str) -> AuthResponse:
        """Set a new password using the access token from the recovery link."""
        request = self._client.create_request("PUT", "user?type=recovery", {"password": password})
        request.headers["Authorization"] = f"Bearer {token}"
        return self._client.send_request(request, None)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "Auth":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# Factory Functions
# =============================================================================

def create_auth(
    project_id: str,
    api_key: str,
    transport: Optional[HttpTransport] = None,
    **options: Any,
) -> Auth:
    """Create an auth client for https://{project_id}.supabase.co/auth/v1."""
    return Auth(SupauthConfig(project_id=project_id, api_key=api_key, transport=transport, **options))
