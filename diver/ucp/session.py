"""
Authenticated Session.

Synchronous HTTP session for the UCP control plane (and, with a different
auth scheme, Docker Hub). Every request carries the bearer token.
Failures at the network/TLS/timeout level surface as TransportError
immediately; nothing is retried here.
"""

from typing import Any

import httpx

from diver.core.config import get_app_config
from diver.core.exceptions import TransportError
from diver.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


def _get_session_config() -> tuple[float, bool]:
    """Load timeout and TLS verification from ucp.yaml."""
    ucp = get_app_config().ucp
    return ucp.timeout, ucp.verify_tls


class UCPSession:
    """
    Token-authenticated HTTP session.

    Usage:
        session = UCPSession("https://ucp.example.com", token, identity="admin")
        response = session.get("/services")
        session.close()
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        identity: str | None = None,
        *,
        auth_scheme: str = "Bearer",
        timeout: float | None = None,
        verify_tls: bool | None = None,
        transport: httpx.BaseTransport | None = None,
        source: str = "ucp",
    ) -> None:
        """
        Initialize the session.

        Args:
            base_url: Control plane URL, e.g. https://ucp.example.com
            token: Auth token sent with every request
            identity: User the token belongs to (informational)
            auth_scheme: Authorization scheme ("Bearer" for UCP, "JWT" for Docker Hub)
            timeout: Request timeout in seconds. If None, reads ucp.yaml.
            verify_tls: Verify server certificates. If None, reads ucp.yaml.
            transport: Optional httpx transport (used by tests)
            source: Log source recorded on request logs
        """
        if timeout is None or verify_tls is None:
            config_timeout, config_verify = _get_session_config()
            timeout = config_timeout if timeout is None else timeout
            verify_tls = config_verify if verify_tls is None else verify_tls

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.identity = identity
        self.auth_scheme = auth_scheme
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.source = source
        self._transport = transport
        self._client: httpx.Client | None = None

    def _auth_headers(self) -> dict[str, str]:
        # Login requests go out before there is a token to send.
        if not self.token:
            return {}
        return {"Authorization": f"{self.auth_scheme} {self.token}"}

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.verify_tls,
                headers=self._auth_headers(),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> "UCPSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send a signed request.

        Args:
            method: HTTP method (GET, POST)
            path: API path relative to base_url (e.g., /services)
            body: Optional JSON body
            params: Optional query parameters

        Returns:
            httpx.Response, whatever its status code

        Raises:
            TransportError: On network, TLS or timeout failure
        """
        client = self._get_client()

        log_with_source(logger, self.source, "debug", "API request", method=method, path=path)

        try:
            response = client.request(method, path, json=body, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log_with_source(
                logger,
                self.source,
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise TransportError(f"{method} {self.base_url}{path} failed: {e}") from e

        log_with_source(
            logger,
            self.source,
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request."""
        return self.send("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request."""
        return self.send("POST", path, **kwargs)
