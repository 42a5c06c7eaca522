"""Collaborators the authorization code grant depends on."""

from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol

from authlib.oauth2.rfc6749 import OAuth2Request

from authorize.oauth.context import GrantClient, GrantContext


class GrantModel(Protocol):
    """Storage for clients and issued codes."""

    async def get_client(
        self, client_id: str, client_secret: str | None = None
    ) -> GrantClient | None: ...

    async def save_auth_code(
        self, code: str, client_id: str, expires_at: datetime, user: Any
    ) -> None: ...


class TokenGenerator(Protocol):
    """Produces opaque code values."""

    async def generate(self, grant_type: str, context: GrantContext) -> str: ...


class ResponseChannel(Protocol):
    """Where the grant emits its redirect."""

    redirect_errors: bool

    def redirect(self, url: str) -> None: ...


# Returns (allowed, user); raising signals a failed check.
ApprovalCheck = Callable[[OAuth2Request], Awaitable[tuple[bool, Any]]]
