"""
Docker Store Client.

Subscriptions live outside the cluster, behind the Docker Store billing
API. Access needs a Docker Hub JWT, obtained by store_login() and kept in
~/.dockerstore (see store.yaml) together with the Docker ID it belongs to.
"""

from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field

from diver.core.config import expand_path, get_app_config
from diver.core.exceptions import ApplicationError, AuthenticationError, NotFoundError
from diver.core.logging import get_logger
from diver.store.models import Subscription
from diver.ucp.credentials import read_json_file, write_json_file
from diver.ucp.errors import decode_body, raise_for_response
from diver.ucp.session import UCPSession

logger = get_logger(__name__)

HUB_AUTH_SCHEME = "JWT"


class StoreCredentials(BaseModel):
    """Persisted Docker Hub login."""

    token: str = Field(..., min_length=1)
    docker_id: str = Field(..., min_length=1)
    user: str | None = None


class _HubLoginResponse(BaseModel):
    token: str = Field(..., min_length=1)


class _HubUser(BaseModel):
    id: str = Field(..., min_length=1)
    username: str | None = None


def default_store_token_path() -> Path:
    return expand_path(get_app_config().store.token_path)


def _hub_session(token: str, transport: httpx.BaseTransport | None) -> UCPSession:
    store = get_app_config().store
    return UCPSession(
        store.hub_url,
        token,
        auth_scheme=HUB_AUTH_SCHEME,
        timeout=store.timeout,
        verify_tls=True,
        transport=transport,
        source="store",
    )


def store_login(
    username: str,
    password: str,
    transport: httpx.BaseTransport | None = None,
) -> StoreCredentials:
    """
    Log in to Docker Hub and look up the caller's Docker ID.

    Raises:
        AuthenticationError: If Docker Hub rejects the credentials
    """
    logger.debug("Logging in to Docker Hub", user=username)

    with _hub_session("", transport) as session:
        response = session.post("/v2/users/login/", body={"username": username, "password": password})
        try:
            raise_for_response(response, resource="login endpoint")
        except ApplicationError as e:
            if e.status_code in (401, 403):
                raise AuthenticationError(e.message) from e
            raise
        token = decode_body(response.content, _HubLoginResponse).token

    with _hub_session(token, transport) as session:
        response = session.get("/v2/user/")
        raise_for_response(response, resource="Docker Hub user")
        user = decode_body(response.content, _HubUser)

    return StoreCredentials(token=token, docker_id=user.id, user=username)


def write_store_token(credentials: StoreCredentials, path: Path | None = None) -> Path:
    return write_json_file(path or default_store_token_path(), credentials)


def read_store_token(path: Path | None = None) -> StoreCredentials:
    return read_json_file(path or default_store_token_path(), StoreCredentials, "diver store login")


class StoreClient:
    """Read-only subscription queries."""

    def __init__(self, credentials: StoreCredentials, transport: httpx.BaseTransport | None = None) -> None:
        store = get_app_config().store
        self.credentials = credentials
        self.session = UCPSession(
            store.billing_url,
            credentials.token,
            identity=credentials.user,
            auth_scheme=HUB_AUTH_SCHEME,
            timeout=store.timeout,
            verify_tls=True,
            transport=transport,
            source="store",
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "StoreClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_subscriptions(self, docker_id: str | None = None) -> list[Subscription]:
        """Retrieve all subscriptions of docker_id (default: the logged-in ID)."""
        if not docker_id:
            logger.debug("Using Docker ID from stored credentials")
            docker_id = self.credentials.docker_id

        logger.debug("Retrieving all subscriptions", docker_id=docker_id)
        response = self.session.get("/", params={"docker_id": docker_id})
        raise_for_response(response, resource="subscriptions")
        return decode_body(response.content, list[Subscription])

    def get_first_active_subscription(self, docker_id: str | None = None) -> Subscription:
        """
        Return the first subscription in the active state.

        Raises:
            NotFoundError: If no subscription is active
        """
        for subscription in self.get_subscriptions(docker_id):
            if subscription.is_active:
                return subscription
        raise NotFoundError("No Active Subscriptions found")
