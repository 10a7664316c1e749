"""
UCP Credential Store.

Logs in to the control plane and persists the resulting token to disk
(~/.ucptoken by default, see ucp.yaml). Every other command starts from
read_token(); a missing or unreadable token file is fatal to the
invocation, there is no anonymous fallback.
"""

import os
from pathlib import Path
from typing import TypeVar

import httpx
from pydantic import BaseModel, Field, ValidationError

from diver.core.config import expand_path, get_app_config
from diver.core.exceptions import ApplicationError, AuthenticationError
from diver.core.logging import get_logger
from diver.ucp.errors import decode_body, raise_for_response
from diver.ucp.session import UCPSession

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class Credentials(BaseModel):
    """Persisted UCP login."""

    url: str = Field(..., description="Control plane base URL")
    token: str = Field(..., min_length=1, description="Bearer token")
    user: str | None = Field(default=None, description="User the token was issued to")
    verify_tls: bool = Field(default=True, description="Verify the server certificate")


class LoginResponse(BaseModel):
    auth_token: str = Field(..., min_length=1)


def default_token_path() -> Path:
    return expand_path(get_app_config().ucp.token_path)


def write_json_file(path: Path, model: BaseModel) -> Path:
    """Write a model as JSON, readable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(model.model_dump_json(), encoding="utf-8")
    os.chmod(path, 0o600)
    return path


def read_json_file(path: Path, model: type[M], login_hint: str) -> M:
    """Read a persisted model, turning every failure into AuthenticationError."""
    if not path.exists():
        raise AuthenticationError(f"No credentials found at {path}, run '{login_hint}' first")
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise AuthenticationError(f"Unable to read credentials from {path}: {e}") from e


def login(
    url: str,
    username: str,
    password: str,
    *,
    verify_tls: bool | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Credentials:
    """
    Exchange a user name and password for a bearer token.

    Raises:
        AuthenticationError: If the control plane rejects the credentials
        TransportError: If the control plane cannot be reached
        DecodeError: If the login response has an unexpected shape
    """
    if verify_tls is None:
        verify_tls = get_app_config().ucp.verify_tls

    logger.debug("Logging in to control plane", url=url, user=username)

    with UCPSession(url, token="", identity=username, verify_tls=verify_tls, transport=transport) as session:
        response = session.post("/auth/login", body={"username": username, "password": password})
        try:
            raise_for_response(response, resource="login endpoint")
        except ApplicationError as e:
            if e.status_code in (401, 403):
                raise AuthenticationError(e.message) from e
            raise
        payload = decode_body(response.content, LoginResponse)

    return Credentials(url=url.rstrip("/"), token=payload.auth_token, user=username, verify_tls=verify_tls)


def write_token(credentials: Credentials, path: Path | None = None) -> Path:
    """Persist credentials; returns the file written."""
    path = path or default_token_path()
    logger.debug("Writing token", path=str(path))
    return write_json_file(path, credentials)


def read_credentials(path: Path | None = None) -> Credentials:
    return read_json_file(path or default_token_path(), Credentials, "diver ucp login")


def read_token(
    path: Path | None = None,
    transport: httpx.BaseTransport | None = None,
) -> UCPSession:
    """
    Build an authenticated session from the persisted token.

    Raises:
        AuthenticationError: If the token file is missing or unreadable
    """
    credentials = read_credentials(path)
    return UCPSession(
        credentials.url,
        credentials.token,
        identity=credentials.user,
        verify_tls=credentials.verify_tls,
        transport=transport,
    )
