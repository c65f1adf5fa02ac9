"""
Tests for Supauth auth operations

Each operation is exercised against a mocked Supabase auth API.
"""

import json
import logging
from typing import Any, Dict, Iterator

import httpx
import pytest
import respx

from supauth import (
    Auth,
    Authenticated,
    ErrorResponse,
    SignUp,
    SupauthConfig,
    UserCredentials,
    create_auth,
)
from supauth.errors import ConfigurationError, TransportError


BASE_URL = "https://test.supabase.co/auth/v1"
API_KEY = "abc123"


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def auth() -> Iterator[Auth]:
    """Create auth client for testing."""
    client = create_auth("test", API_KEY)
    yield client
    client.close()


@pytest.fixture
def credentials() -> UserCredentials:
    return UserCredentials(email="test@example.com", password="password123")


@pytest.fixture
def mock_session_response() -> Dict[str, Any]:
    """Mock session response from API."""
    return {
        "access_token": "access_token_123",
        "token_type": "bearer",
        "expires_in": 3600,
        "refresh_token": "refresh_token_123",
        "user": {
            "id": "user_123",
            "aud": "authenticated",
            "role": "authenticated",
            "email": "test@example.com",
            "confirmed_at": "2026-01-01T00:00:00Z",
            "app_metadata": {"provider": "email", "providers": ["email"]},
            "user_metadata": {},
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-01T00:00:00Z",
        },
    }


# =============================================================================
# Configuration Tests
# =============================================================================

class TestConfiguration:
    """Tests for SDK configuration."""

    def test_default_base_url(self):
        """Base URL is derived from the project id."""
        config = SupauthConfig(project_id="test", api_key=API_KEY)
        assert config.resolve_base_url() == BASE_URL

    def test_custom_host(self):
        """Host and auth path can be changed."""
        config = SupauthConfig(project_id="test", api_key=API_KEY, host="example.dev", auth_path="gotrue")
        assert config.resolve_base_url() == "https://test.example.dev/gotrue"

    def test_base_url_override(self):
        """An explicit base URL wins and needs no project id."""
        auth = Auth(SupauthConfig(api_key=API_KEY, base_url="http://localhost:9999/"))
        assert auth.client.base_url == "http://localhost:9999"
        auth.close()

    def test_missing_project_id(self):
        """Test missing project id raises error."""
        with pytest.raises(ConfigurationError) as exc_info:
            Auth(SupauthConfig(api_key=API_KEY))
        assert "project_id is required" in str(exc_info.value)

    def test_missing_api_key(self):
        """Test missing api key raises error."""
        with pytest.raises(ConfigurationError) as exc_info:
            create_auth("test", "")
        assert "api_key is required" in str(exc_info.value)

    def test_default_timeout(self):
        """Default timeout is 10 seconds."""
        assert SupauthConfig().timeout == 10.0

    def test_credentials_repr_hides_password(self, credentials: UserCredentials):
        assert "password123" not in repr(credentials)


# =============================================================================
# Auth Operation Tests
# =============================================================================

class TestAuthOperations:
    """Tests for the six auth operations."""

    @respx.mock
    def test_sign_up_success(self, auth: Auth, credentials: UserCredentials):
        """Test successful sign up."""
        route = respx.post(f"{BASE_URL}/signup").mock(
            return_value=httpx.Response(200, json={
                "id": "user_123",
                "email": "test@example.com",
                "confirmation_sent_at": "2026-01-01T00:00:00Z",
                "created_at": "2026-01-01T00:00:00Z",
                "updated_at": "2026-01-01T00:00:00Z",
            })
        )

        response = auth.sign_up(credentials)

        assert response.status == 200
        assert isinstance(response.data, SignUp)
        assert response.data.id == "user_123"
        assert response.data.confirmed_at is None

        sent = route.calls.last.request
        assert json.loads(sent.content) == {"email": "test@example.com", "password": "password123"}
        assert sent.headers["apikey"] == API_KEY
        assert sent.headers["Content-Type"] == "application/json"

    @respx.mock
    def test_sign_up_rejected(self, auth: Auth, credentials: UserCredentials):
        """A rejected sign up is returned, not raised."""
        respx.post(f"{BASE_URL}/signup").mock(
            return_value=httpx.Response(422, json={
                "code": 422,
                "error_code": "user_already_exists",
                "msg": "User already registered",
            })
        )

        response = auth.sign_up(credentials)

        assert response.status == 422
        assert response.error == ErrorResponse(422, "user_already_exists", "User already registered")

    @respx.mock
    def test_sign_in_success(
        self, auth: Auth, credentials: UserCredentials, mock_session_response: Dict
    ):
        """Test successful sign in."""
        route = respx.post(f"{BASE_URL}/token", params={"grant_type": "password"}).mock(
            return_value=httpx.Response(200, json=mock_session_response)
        )

        response = auth.sign_in(credentials)

        assert isinstance(response.data, Authenticated)
        assert response.data.access_token == "access_token_123"
        assert response.data.expires_in == 3600
        assert response.data.user.email == "test@example.com"
        assert response.data.user.app_metadata["provider"] == "email"
        assert route.called

    @respx.mock
    def test_sign_in_invalid_credentials(self, auth: Auth, credentials: UserCredentials):
        """Test sign in with invalid credentials."""
        respx.post(f"{BASE_URL}/token", params={"grant_type": "password"}).mock(
            return_value=httpx.Response(400, json={
                "code": 400,
                "error_code": "invalid_credentials",
                "msg": "Invalid login credentials",
            })
        )

        response = auth.sign_in(credentials)

        assert not response.ok
        assert response.error.error_code == "invalid_credentials"
        assert response.error.message == "Invalid login credentials"

    @respx.mock
    def test_sign_out(self, auth: Auth):
        """Sign out sends the bearer token and expects no body."""
        route = respx.post(f"{BASE_URL}/logout").mock(return_value=httpx.Response(204))

        response = auth.sign_out("access_token_123")

        assert response.status == 204
        assert response.data is None

        sent = route.calls.last.request
        assert sent.headers["Authorization"] == "Bearer access_token_123"
        assert sent.headers["apikey"] == API_KEY
        assert sent.content == b"null"

    @respx.mock
    def test_refresh_token(self, auth: Auth, mock_session_response: Dict):
        """Test token refresh."""
        route = respx.post(f"{BASE_URL}/token", params={"grant_type": "refresh_token"}).mock(
            return_value=httpx.Response(200, json=mock_session_response)
        )

        response = auth.refresh_token("refresh_token_123")

        assert response.data.refresh_token == "refresh_token_123"
        assert json.loads(route.calls.last.request.content) == {"refresh_token": "refresh_token_123"}

    @respx.mock
    def test_forgotten_password(self, auth: Auth):
        """The recovery endpoint body is ignored."""
        route = respx.post(f"{BASE_URL}/recover").mock(
            return_value=httpx.Response(200, json={})
        )

        response = auth.forgotten_password("test@example.com")

        assert response.status == 200
        assert response.data is None
        assert json.loads(route.calls.last.request.content) == {"email": "test@example.com"}

    @respx.mock
    def test_reset_password(self, auth: Auth):
        """Reset password is a PUT with the recovery token."""
        route = respx.put(f"{BASE_URL}/user", params={"type": "recovery"}).mock(
            return_value=httpx.Response(200, json={"id": "user_123"})
        )

        response = auth.reset_password("recovery_token", "NewPassword123!")

        assert response.status == 200
        assert response.data is None

        sent = route.calls.last.request
        assert sent.method == "PUT"
        assert sent.headers["Authorization"] == "Bearer recovery_token"
        assert json.loads(sent.content) == {"password": "NewPassword123!"}

    @respx.mock
    def test_reset_password_expired_token(self, auth: Auth):
        """Test reset password with an expired token."""
        respx.put(f"{BASE_URL}/user", params={"type": "recovery"}).mock(
            return_value=httpx.Response(401, json={
                "code": 401,
                "error_code": "bad_jwt",
                "msg": "invalid JWT: token is expired",
            })
        )

        response = auth.reset_password("expired", "NewPassword123!")

        assert response.status == 401
        assert response.error.error_code == "bad_jwt"

    @respx.mock
    def test_network_error(self, auth: Auth, credentials: UserCredentials):
        """Network failures are raised."""
        respx.post(f"{BASE_URL}/token", params={"grant_type": "password"}).mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(TransportError, match="connection refused"):
            auth.sign_in(credentials)


# =============================================================================
# Transport Injection Tests
# =============================================================================

class TestTransportInjection:
    """Tests for a custom transport."""

    def test_custom_transport(self, credentials: UserCredentials):
        """A configured transport replaces httpx."""
        seen = []

        class StubTransport:
            def send(self, request: httpx.Request) -> httpx.Response:
                seen.append(request)
                return httpx.Response(200, json={"id": "user_123", "email": "test@example.com"})

        auth = create_auth("test", API_KEY, transport=StubTransport())

        response = auth.sign_up(credentials)

        assert response.data.email == "test@example.com"
        assert str(seen[0].url) == f"{BASE_URL}/signup"

    def test_httpx_mock_transport(self):
        """An httpx client with a MockTransport can be injected."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        transport = httpx.Client(transport=httpx.MockTransport(handler))

        with create_auth("test", API_KEY, transport=transport) as auth:
            response = auth.sign_out("token")

        assert response.status == 204
        assert not transport.is_closed
        transport.close()


# =============================================================================
# Logging Tests
# =============================================================================

class TestLogging:
    """Tests for debug logging."""

    @respx.mock
    def test_debug_logging(self, caplog, credentials: UserCredentials):
        """Requests are traced when debug is enabled, without secrets."""
        respx.post(f"{BASE_URL}/signup").mock(
            return_value=httpx.Response(200, json={"id": "user_123", "email": "test@example.com"})
        )
        caplog.set_level(logging.DEBUG, logger="supauth")

        with create_auth("test", API_KEY, debug=True) as auth:
            auth.sign_up(credentials)

        assert f"POST {BASE_URL}/signup -> 200" in caplog.text
        assert API_KEY not in caplog.text
        assert "password123" not in caplog.text

    @respx.mock
    def test_no_logging_by_default(self, caplog, auth: Auth):
        respx.post(f"{BASE_URL}/logout").mock(return_value=httpx.Response(204))
        caplog.set_level(logging.DEBUG, logger="supauth")

        auth.sign_out("token")

        assert caplog.text == ""
