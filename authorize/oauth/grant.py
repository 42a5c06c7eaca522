"""Authorization code grant: validate, verify, approve, issue, redirect."""

from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence
from urllib.parse import urlsplit, urlunsplit

from authlib.common.urls import add_params_to_uri
from authlib.oauth2.rfc6749 import OAuth2Request
from authlib.oauth2.rfc6749.errors import (
    InvalidClientError,
    InvalidRequestError,
    OAuth2Error,
)

from core.consts import OAuth2GrantType, OAuth2ResponseType
from core.errors import ServerError, UserDeniedError
from core.security.utils import compute_expiry
from core.utils.logging import get_logger
from authorize.oauth.context import GrantClient, GrantContext, GrantStage
from authorize.oauth.interfaces import (
    ApprovalCheck,
    GrantModel,
    ResponseChannel,
    TokenGenerator,
)
from authorize.oauth.pipeline import Step, run_steps

logger = get_logger(__name__)

Continuation = Callable[[OAuth2Error | None], Awaitable[None]]


@dataclass(frozen=True)
class GrantConfig:
    """Knobs of the authorization code grant."""

    auth_code_lifetime: int = 30
    continue_after_response: bool = False

    def __post_init__(self) -> None:
        if self.auth_code_lifetime <= 0:
            raise ValueError("auth_code_lifetime must be a positive number of seconds")

    @classmethod
    def from_settings(cls, settings) -> "GrantConfig":
        """Build from application settings."""
        return cls(
            auth_code_lifetime=settings.AUTH_CODE_LIFETIME,
            continue_after_response=settings.CONTINUE_AFTER_RESPONSE,
        )


def strip_query(uri: str) -> str:
    """Drop query and fragment from ``uri``."""
    parts = urlsplit(uri)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _normalize(uri: str) -> str:
    parts = urlsplit(uri)
    path = parts.path or ("/" if parts.netloc else "")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, "", ""))


def authorize_redirect_uri(client: GrantClient, redirect_uri: str) -> str | None:
    """Return the client's authoritative redirect URI, or None if not allowed.

    A list of registered URIs needs an exact match and the requested string
    wins. A single registered URI matches on scheme, host and path only.
    """
    registered = client.redirect_uri
    try:
        requested = _normalize(redirect_uri)
        if isinstance(registered, (list, tuple)):
            return redirect_uri if redirect_uri in registered else None
        if _normalize(registered) != requested:
            return None
    except ValueError:
        # unparseable URIs never match
        return None
    return registered


def error_redirect_uri(error: OAuth2Error) -> str:
    """Location reporting ``error`` to its (verified) redirect URI."""
    return add_params_to_uri(
        strip_query(error.redirect_uri),
        [
            ("error", error.error),
            ("error_description", error.get_error_description()),
            ("code", str(error.status_code)),
        ],
    )


class AuthorizationCodeGrant:
    """Runs the authorization code grant for one request at a time.

    Instances hold only collaborators and config, so a single grant can
    serve concurrent requests; per-request state lives in ``GrantContext``.
    """

    RESPONSE_TYPES = {OAuth2ResponseType.CODE}
    GRANT_TYPE = OAuth2GrantType.AUTHORIZATION_CODE

    def __init__(
        self,
        *,
        model: GrantModel,
        approval_check: ApprovalCheck,
        token_generator: TokenGenerator,
        config: GrantConfig | None = None,
    ) -> None:
        """Constructor."""
        self.model = model
        self.approval_check = approval_check
        self.token_generator = token_generator
        self.config = config or GrantConfig()

    def steps(self, channel: ResponseChannel) -> Sequence[Step[GrantContext]]:
        """Steps in the order they must run."""

        async def redirect(ctx: GrantContext) -> None:
            await self.redirect(ctx, channel)

        return (
            self.validate_params,
            self.verify_client,
            self.check_user_approved,
            self.generate_code,
            self.save_auth_code,
            redirect,
        )

    async def authorize(
        self,
        request: OAuth2Request,
        channel: ResponseChannel,
        next_: Continuation | None = None,
    ) -> GrantContext:
        """Run the grant for ``request``, emitting redirects on ``channel``.

        Errors that cannot be redirected go to ``next_``; without a
        continuation they are raised.
        """
        ctx = GrantContext(request=request)

        async def finish(error: OAuth2Error | None) -> None:
            await self._finish(ctx, channel, next_, error)

        await run_steps(self.steps(channel), ctx, finish)
        return ctx

    async def _finish(
        self,
        ctx: GrantContext,
        channel: ResponseChannel,
        next_: Continuation | None,
        error: OAuth2Error | None,
    ) -> None:
        responded = ctx.stage is GrantStage.REDIRECTED
        if error is not None and ctx.is_request_authenticated:
            error.redirect_uri = ctx.client_redirect_uri
            if getattr(channel, "redirect_errors", False):
                logger.info(
                    "authorize.error_redirected",
                    client_id=ctx.client_id,
                    error=error.error,
                )
                channel.redirect(error_redirect_uri(error))
                responded = True
                error = None

        if error is not None:
            logger.info(
                "authorize.error_returned", client_id=ctx.client_id, error=error.error
            )
            if next_ is None:
                raise error
            await next_(error)
            return

        if responded and not self.config.continue_after_response:
            return
        if next_ is not None:
            await next_(None)

    async def validate_params(self, ctx: GrantContext) -> None:
        """Pull response_type, client_id, redirect_uri and state off the request."""
        payload = ctx.request.payload
        if payload is None or not payload.has_params:
            raise InvalidRequestError(description="Missing request parameters")

        ctx.response_type = payload.data.get("response_type")
        if ctx.response_type not in self.RESPONSE_TYPES:
            raise InvalidRequestError(
                description="Invalid response_type parameter (must be 'code')"
            )

        ctx.client_id = payload.client_id
        if not ctx.client_id:
            raise InvalidRequestError(
                description="Invalid or missing client_id parameter"
            )

        ctx.redirect_uri = payload.redirect_uri
        if not ctx.redirect_uri:
            raise InvalidRequestError(
                description="Invalid or missing redirect_uri parameter"
            )

        ctx.state = payload.state
        ctx.advance(GrantStage.PARAMS_VALID)

    async def verify_client(self, ctx: GrantContext) -> None:
        """Resolve the client and authorize the requested redirect URI."""
        try:
            client = await self.model.get_client(ctx.client_id, None)
        except Exception as exc:
            logger.exception("authorize.client_lookup_failed", client_id=ctx.client_id)
            raise ServerError() from exc

        if client is None:
            raise InvalidClientError(description="Invalid client credentials")

        client_redirect_uri = authorize_redirect_uri(client, ctx.redirect_uri)
        if client_redirect_uri is None:
            raise InvalidRequestError(description="redirect_uri does not match")

        # Any error from here on is reported by redirecting to the client.
        ctx.client = client
        ctx.client_redirect_uri = client_redirect_uri
        ctx.advance(GrantStage.CLIENT_VERIFIED)
        logger.debug("authorize.client_verified", client_id=client.client_id)

    async def check_user_approved(self, ctx: GrantContext) -> None:
        """Ask the approval check whether the resource owner allowed access."""
        try:
            allowed, user = await self.approval_check(ctx.request)
        except Exception as exc:
            logger.exception("authorize.approval_check_failed", client_id=ctx.client_id)
            raise ServerError() from exc

        if not allowed:
            raise UserDeniedError()

        ctx.user = user
        ctx.advance(GrantStage.USER_APPROVED)

    async def generate_code(self, ctx: GrantContext) -> None:
        """Issue a fresh code value."""
        try:
            code = await self.token_generator.generate(self.GRANT_TYPE, ctx)
        except OAuth2Error:
            raise
        except Exception as exc:
            logger.exception("authorize.code_generation_failed", client_id=ctx.client_id)
            raise ServerError() from exc

        if not code:
            raise ServerError(description="Token generator returned no code")

        ctx.auth_code = code
        ctx.advance(GrantStage.CODE_GENERATED)

    async def save_auth_code(self, ctx: GrantContext) -> None:
        """Persist the code with its expiry, client and user."""
        expires_at = compute_expiry(self.config.auth_code_lifetime)
        try:
            await self.model.save_auth_code(
                ctx.auth_code, ctx.client.client_id, expires_at, ctx.user
            )
        except Exception as exc:
            logger.exception("authorize.code_persist_failed", client_id=ctx.client_id)
            raise ServerError() from exc

        ctx.advance(GrantStage.PERSISTED)

    async def redirect(self, ctx: GrantContext, channel: ResponseChannel) -> None:
        """Send the user agent back to the client with the code."""
        params = [("code", ctx.auth_code)]
        if ctx.state:
            params.append(("state", ctx.state))

        channel.redirect(add_params_to_uri(strip_query(ctx.redirect_uri), params))
        ctx.advance(GrantStage.REDIRECTED)
        logger.info("authorize.code_issued", client_id=ctx.client_id)
