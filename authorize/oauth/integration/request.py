"""Build OAuth2Request from FastAPI Request for the authorization grant."""

from typing import Mapping

from authlib.oauth2.rfc6749.requests import OAuth2Payload, OAuth2Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from authorize.oauth.integration.context import set_context


class AuthorizationPayload(OAuth2Payload):
    """Authorization request parameters from the body and the query string.

    A body value takes precedence over a query value for the same key.
    Either source is ``None`` when the request did not carry it.
    """

    def __init__(
        self,
        body: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
    ):
        self.body = dict(body) if body is not None else None
        self.query = dict(query) if query is not None else None
        self._data = {}
        for source in (self.query, self.body):
            if source:
                self._data.update({k: v for k, v in source.items() if v})

    @property
    def has_params(self) -> bool:
        """False when neither a body nor a query string was supplied."""
        return self.body is not None or self.query is not None

    @property
    def data(self) -> dict[str, str]:
        return self._data

    @property
    def datalist(self) -> dict[str, list]:
        return {key: [value] for key, value in self._data.items()}


def authenticated_subject(request: Request) -> str | None:
    """Identity of the user the app authenticated, if any.

    Set by Starlette's ``AuthenticationMiddleware``; request parameters are
    never consulted.
    """
    user = request.scope.get("user")
    if user is None or not user.is_authenticated:
        return None
    return user.identity


async def to_oauth2_request(
    request: Request,
    *,
    db: AsyncSession | None = None,
    form_data: Mapping[str, str] | None = None,
) -> OAuth2Request:
    """Convert FastAPI Request to OAuth2Request and attach context."""

    oauth2_req = OAuth2Request(
        method=request.method,
        uri=str(request.url),
        headers=dict(request.headers),
    )
    query = dict(request.query_params) or None
    oauth2_req.payload = AuthorizationPayload(body=form_data or None, query=query)

    set_context(oauth2_req, db=db, subject=authenticated_subject(request))

    return oauth2_req
