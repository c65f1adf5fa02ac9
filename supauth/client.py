"""
Supauth HTTP Client

Request/response pipeline shared by every auth operation: builds JSON
requests against the auth base URL, dispatches them through a pluggable
transport and decodes the body into the expected success shape or the
standard error shape.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Type

import httpx

from .types import (
    DEFAULT_TIMEOUT,
    AuthResponse,
    ErrorResponse,
    HttpTransport,
    build_base_url,
)
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidURLError,
    SerializationError,
    TransportError,
)


logger = logging.getLogger("supauth")

# Registered names, IPv4 and IPv6 literals (httpx strips the brackets)
HOST_REGEX = re.compile(r"^(?:[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.?|[0-9A-Fa-f:.]+)$")

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class HttpClient:
    """
    Request/response pipeline for the auth API.

    Holds the endpoint configuration (base URL and api key), which is never
    modified after construction, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        transport: Optional[HttpTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        debug: bool = False,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._custom_headers = dict(headers or {})
        self._debug = debug

        # Only a transport created here is closed by close()
        self._owns_transport = transport is None
        self._transport: HttpTransport = (
            transport if transport is not None else httpx.Client(timeout=timeout)
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[supauth] {message}", *args)

    # =========================================================================
    # Pipeline
    # =========================================================================

    def create_and_send_request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        success_shape: Optional[Type[Any]] = None,
    ) -> AuthResponse:
        """Build a request and send it in one step."""
        request = self.create_request(method, endpoint, data)
        return self.send_request(request, success_shape)

    def post(self, endpoint: str, data: Any = None) -> httpx.Request:
        """Build a POST request."""
        return self.create_request("POST", endpoint, data)

    def put(self, endpoint: str, data: Any = None) -> httpx.Request:
        """Build a PUT request."""
        return self.create_request("PUT", endpoint, data)

    def create_request(self, method: str, endpoint: str, data: Any = None) -> httpx.Request:
        """
        Build a JSON request for ``endpoint`` below the base URL.

        Args:
            method: HTTP method
            endpoint: Path (and query) appended to the base URL, may be empty
            data: JSON-serializable payload, or an object with ``to_dict()``

        Raises:
            ConfigurationError: If the base URL is empty
            SerializationError: If data cannot be encoded as JSON
            InvalidURLError: If the composed URL is not a valid http(s) URL
        """
        if not self._base_url:
            raise ConfigurationError("supabase api url is empty")

        url = self._base_url
        if endpoint:
            url = f"{url}/{endpoint}"

        body = self._encode(data)
        validated_url = self._parse_url(url)

        headers = httpx.Headers(self._custom_headers)
        headers.update(JSON_HEADERS)

        return httpx.Request(
            method,
            validated_url,
            headers=headers,
            content=body,
            extensions={"timeout": httpx.Timeout(self._timeout).as_dict()},
        )

    def send_request(
        self,
        request: httpx.Request,
        success_shape: Optional[Type[Any]] = None,
    ) -> AuthResponse:
        """
        Send a request built by ``create_request`` and decode the response.

        Non-2xx responses are not raised: the envelope carries the decoded
        ``ErrorResponse`` as its data.

        Args:
            request: Request to dispatch
            success_shape: ``dict`` or a class with ``from_dict`` used to decode
                a 2xx body; None when no body is expected

        Raises:
            TransportError: If the transport fails to deliver the request
            DecodeError: If the body is not valid JSON for the expected shape
            TypeError: If success_shape is neither dict nor a class with from_dict
        """
        self._check_shape(success_shape)

        request.headers["apikey"] = self._api_key

        self._log(f"{request.method} {request.url}")

        try:
            response = self._transport.send(request)
        except httpx.TransportError as e:
            raise TransportError(
                str(e),
                {"method": request.method, "url": str(request.url)},
            ) from e

        try:
            self._log(f"{request.method} {request.url} -> {response.status_code}")
            return self._handle_response(response, success_shape)
        finally:
            response.close()

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _encode(self, data: Any) -> bytes:
        """Serialize the payload; None becomes the JSON literal null."""
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        try:
            return json.dumps(data, allow_nan=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

    def _parse_url(self, url: str) -> httpx.URL:
        """Parse and validate the composed request URL."""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise InvalidURLError(url, str(e)) from e

        if parsed.scheme not in ("http", "https") or not parsed.raw_host:
            raise InvalidURLError(url, f"invalid url {url!r}: expected an absolute http(s) url")

        host = parsed.raw_host.decode("ascii", errors="replace")
        if not HOST_REGEX.match(host):
            raise InvalidURLError(url, f"invalid url {url!r}: invalid character in host name {host!r}")

        return parsed

    def _handle_response(
        self,
        response: httpx.Response,
        success_shape: Optional[Type[Any]],
    ) -> AuthResponse:
        """Classify the response by status code and decode its body."""
        status = response.status_code
        result = AuthResponse(status=status)

        if not 200 <= status < 300:
            payload = self._decode_json(response)
            result.data = self._to_shape(payload, ErrorResponse, response)
            return result

        if status == httpx.codes.NO_CONTENT or success_shape is None:
            return result

        payload = self._decode_json(response)
        result.data = self._to_shape(payload, success_shape, response)
        return result

    def _decode_json(self, response: httpx.Response) -> Any:
        """Parse the response body as JSON."""
        raw = response.read()
        try:
            return json.loads(raw)
        except ValueError as e:
            raise DecodeError(
                str(e),
                response.status_code,
                raw.decode("utf-8", errors="replace"),
            ) from e

    @staticmethod
    def _check_shape(success_shape: Optional[Type[Any]]) -> None:
        """Reject shapes that a JSON object cannot be decoded into."""
        if success_shape is None or hasattr(success_shape, "from_dict"):
            return
        if isinstance(success_shape, type) and issubclass(success_shape, dict):
            return
        raise TypeError(f"unsupported success shape: {success_shape!r}")

    def _to_shape(self, payload: Any, shape: Type[Any], response: httpx.Response) -> Any:
        """Convert decoded JSON into ``shape``; mismatches raise DecodeError."""
        if not isinstance(payload, dict):
            raise DecodeError(
                f"expected a JSON object for {shape.__name__}, got {type(payload).__name__}",
                response.status_code,
                response.text,
            )

        from_dict = getattr(shape, "from_dict", None)
        if from_dict is None:
            return shape(payload)
        try:
            return from_dict(payload)
        except (TypeError, ValueError, AttributeError, KeyError) as e:
            raise DecodeError(str(e), response.status_code, response.text) from e

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, httpx.Client):
            self._transport.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# Factory Functions
# =============================================================================

def new_client(
    project_id: str,
    api_key: str,
    transport: Optional[HttpTransport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> HttpClient:
    """Create a pipeline for https://{project_id}.supabase.co/auth/v1."""
    return HttpClient(
        build_base_url(project_id),
        api_key,
        transport=transport,
        timeout=timeout,
    )
