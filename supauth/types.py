"""
Supauth Type Definitions

Configuration, transport interface, request payloads and the response shapes
returned by the Supabase auth (GoTrue) API.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx


DEFAULT_HOST = "supabase.co"
DEFAULT_AUTH_PATH = "auth/v1"
DEFAULT_TIMEOUT = 10.0


def build_base_url(
    project_id: str,
    host: str = DEFAULT_HOST,
    auth_path: str = DEFAULT_AUTH_PATH,
) -> str:
    """Build the auth API base URL for a project."""
    return f"https://{project_id}.{host}/{auth_path}"


def get_typed(data: Dict[str, Any], key: str, expected: type, default: Any = None) -> Any:
    """
    Read ``data[key]`` checking its JSON type.

    A missing key or JSON null yields ``default``. Raises TypeError when the
    value has another type (booleans are not accepted as integers).
    """
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise TypeError(
            f"field {key!r}: expected {expected.__name__}, got {type(value).__name__}"
        )
    return value


@runtime_checkable
class HttpTransport(Protocol):
    """Transport interface; ``httpx.Client`` satisfies it."""

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send the request and return the response, or raise on network failure."""
        ...


@dataclass
class SupauthConfig:
    """SDK Configuration options."""

    # Supabase project reference (the subdomain of <project>.supabase.co)
    project_id: str = ""
    # Project API key, sent as the `apikey` header on every request
    api_key: str = ""
    # API host (default: supabase.co)
    host: str = DEFAULT_HOST
    # Path of the auth service below the host (default: auth/v1)
    auth_path: str = DEFAULT_AUTH_PATH
    # Explicit base URL, overrides project_id/host/auth_path (self-hosted GoTrue)
    base_url: Optional[str] = None
    # Request timeout in seconds for the default transport (default: 10)
    timeout: float = DEFAULT_TIMEOUT
    # Enable debug logging (default: False)
    debug: bool = False
    # Extra headers to include in every request
    headers: Optional[Dict[str, str]] = None
    # Custom transport (default: None, uses httpx.Client)
    transport: Optional[HttpTransport] = None

    def resolve_base_url(self) -> str:
        """Return the explicit base URL or derive it from the project id."""
        if self.base_url is not None:
            return self.base_url.rstrip("/")
        return build_base_url(self.project_id, self.host, self.auth_path)


@dataclass
class UserCredentials:
    """Email/password credentials for sign-up and sign-in."""

    email: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API requests."""
        return {
            "email": self.email,
            "password": self.password,
        }

    def __repr__(self) -> str:
        return f"UserCredentials(email={self.email!r}, password='***')"


@dataclass
class SignUp:
    """User profile returned by sign-up."""

    id: str
    email: str
    confirmed_at: Optional[str] = None
    confirmation_sent_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignUp":
        """Create from dictionary; raises TypeError on mistyped fields."""
        return cls(
            id=get_typed(data, "id", str, ""),
            email=get_typed(data, "email", str, ""),
            confirmed_at=get_typed(data, "confirmed_at", str),
            confirmation_sent_at=get_typed(data, "confirmation_sent_at", str),
            created_at=get_typed(data, "created_at", str),
            updated_at=get_typed(data, "updated_at", str),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class User:
    """User data returned from API."""

    id: str
    aud: str = ""
    role: str = ""
    email: str = ""
    invited_at: Optional[str] = None
    confirmed_at: Optional[str] = None
    confirmation_sent_at: Optional[str] = None
    app_metadata: Dict[str, Any] = field(default_factory=dict)
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary."""
        return cls(
            id=get_typed(data, "id", str, ""),
            aud=get_typed(data, "aud", str, ""),
            role=get_typed(data, "role", str, ""),
            email=get_typed(data, "email", str, ""),
            invited_at=get_typed(data, "invited_at", str),
            confirmed_at=get_typed(data, "confirmed_at", str),
            confirmation_sent_at=get_typed(data, "confirmation_sent_at", str),
            app_metadata=get_typed(data, "app_metadata", dict, {}),
            user_metadata=get_typed(data, "user_metadata", dict, {}),
            created_at=get_typed(data, "created_at", str),
            updated_at=get_typed(data, "updated_at", str),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Authenticated:
    """Session returned by sign-in and token refresh."""

    access_token: str
    refresh_token: str
    expires_in: int = 0
    token_type: str = "bearer"
    user: Optional[User] = None
    provider_token: Optional[str] = None
    provider_refresh_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Authenticated":
        """Create from dictionary."""
        user_data = get_typed(data, "user", dict)
        return cls(
            access_token=get_typed(data, "access_token", str, ""),
            refresh_token=get_typed(data, "refresh_token", str, ""),
            expires_in=get_typed(data, "expires_in", int, 0),
            token_type=get_typed(data, "token_type", str, "bearer"),
            user=User.from_dict(user_data) if user_data is not None else None,
            provider_token=get_typed(data, "provider_token", str),
            provider_refresh_token=get_typed(data, "provider_refresh_token", str),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ErrorResponse:
    """
    Error body returned for non-2xx responses.

    The canonical shape is ``{"code", "error_code", "msg"}``. Older GoTrue
    releases answer with ``{"error", "error_description"}``; those keys fill
    ``error_code`` and ``message`` when the canonical ones are absent.
    """

    status: int = 0
    error_code: str = ""
    message: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorResponse":
        """Create from dictionary; raises TypeError on mistyped fields."""
        legacy_error = data.get("error")
        if not isinstance(legacy_error, str):
            legacy_error = ""
        return cls(
            status=get_typed(data, "code", int, 0),
            error_code=get_typed(data, "error_code", str, legacy_error),
            message=get_typed(
                data, "msg", str, get_typed(data, "error_description", str, "")
            ),
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "error_code": self.error_code,
            "message": self.message,
        }


@dataclass
class AuthResponse:
    """Envelope returned by every pipeline call."""

    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        """True when the status is in the 2xx range."""
        return 200 <= self.status < 300

    @property
    def error(self) -> Optional[ErrorResponse]:
        """The decoded error body, or None for successful responses."""
        if isinstance(self.data, ErrorResponse):
            return self.data
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        return {"status": self.status, "data": data}
