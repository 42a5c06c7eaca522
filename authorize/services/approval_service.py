"""Consent-form approval for the authorization endpoint."""

from typing import Any

from authlib.oauth2.rfc6749 import OAuth2Request

from core.consts import APPROVAL_VALUES
from core.utils.logging import get_logger
from authorize.oauth.integration.context import get_context
from authorize.repositories.subject_repository import SubjectRepository

logger = get_logger(__name__)


async def form_approval_check(request: OAuth2Request) -> tuple[bool, Any]:
    """Approve when an authenticated user posted ``allow`` on the consent form.

    Only the POST body counts as consent, so a crafted query string cannot
    approve. The resource owner is the identity the app authenticated,
    never a request parameter; without one the request is denied. The
    subject row is created on first approval and its primary key becomes
    the grant's user.
    """
    body = request.payload.body if request.method == "POST" else None
    if str((body or {}).get("allow", "")).lower() not in APPROVAL_VALUES:
        return False, None

    ctx = get_context(request)
    if not ctx.subject:
        logger.info("approval.unauthenticated")
        return False, None
    if ctx.db is None:
        raise RuntimeError("no database session attached to request")

    return True, await SubjectRepository(ctx.db).get_or_create_id(ctx.subject)
