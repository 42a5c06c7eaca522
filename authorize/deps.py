"""Dependencies: DB session, approval check and the grant itself."""

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.db.session import DatabaseSessionManager
from authorize.config import settings
from authorize.oauth.grant import AuthorizationCodeGrant, GrantConfig
from authorize.oauth.interfaces import ApprovalCheck
from authorize.services.approval_service import form_approval_check
from authorize.services.grant_model import SqlAlchemyGrantModel
from authorize.services.token_service import CodeGenerator

session_manager = DatabaseSessionManager(search_path=settings.DB_SCHEMA)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency to inject an AsyncSession per request."""
    async with session_manager.session() as session:
        yield session


def get_approval_check() -> ApprovalCheck:
    """Approval check for the authorization endpoint.

    Override this dependency to plug in a real consent flow.
    """
    return form_approval_check


def get_grant(
    db: AsyncSession = Depends(get_db_session),
    approval_check: ApprovalCheck = Depends(get_approval_check),
) -> AuthorizationCodeGrant:
    """Build the grant over the request's session."""
    model = SqlAlchemyGrantModel(db)
    return AuthorizationCodeGrant(
        model=model,
        approval_check=approval_check,
        token_generator=CodeGenerator(model=model),
        config=GrantConfig.from_settings(settings),
    )
