"""Authorization endpoint backed by the authorization code grant."""

from authlib.oauth2.rfc6749.errors import OAuth2Error
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from authorize.config import settings
from authorize.deps import get_db_session, get_grant
from authorize.oauth.grant import AuthorizationCodeGrant
from authorize.oauth.integration.request import to_oauth2_request
from authorize.oauth.integration.response import RedirectChannel

router = APIRouter()


def error_response(error: OAuth2Error) -> ORJSONResponse:
    """Render ``error`` as an RFC 6749 JSON error body."""
    return ORJSONResponse(
        dict(error.get_body()),
        status_code=error.status_code,
        headers=dict(error.get_headers()),
    )


async def run_grant(
    request: Request,
    grant: AuthorizationCodeGrant,
    db: AsyncSession,
    form_data: dict[str, str] | None = None,
):
    """Run the grant and turn its outcome into a response."""
    try:
        oauth2_req = await to_oauth2_request(request, db=db, form_data=form_data)
    except OAuth2Error as error:
        return error_response(error)

    request.state.client_id = oauth2_req.payload.client_id
    channel = RedirectChannel(redirect_errors=settings.REDIRECT_ERRORS)
    try:
        await grant.authorize(oauth2_req, channel)
    except OAuth2Error as error:
        return error_response(error)
    return channel.to_response()


@router.get("/authorize", tags=["public"])
async def authorize_get(
    request: Request,
    grant: AuthorizationCodeGrant = Depends(get_grant),
    db: AsyncSession = Depends(get_db_session),
):
    """Authorization request carried in the query string."""
    return await run_grant(request, grant, db)


@router.post("/authorize", tags=["public"])
async def authorize_post(
    request: Request,
    grant: AuthorizationCodeGrant = Depends(get_grant),
    db: AsyncSession = Depends(get_db_session),
):
    """Authorization request (or consent form) posted as a form body."""
    form = await request.form()
    form_data = {k: v for k, v in form.items() if isinstance(v, str)}
    return await run_grant(request, grant, db, form_data=form_data)
