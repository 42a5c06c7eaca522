"""SQLAlchemy-backed model provider for the authorization code grant."""

from datetime import datetime
from typing import Any

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security.utils import utcnow
from core.utils.logging import get_logger
from core.utils.retry import with_retries
from authorize.config import settings
from authorize.oauth.context import GrantClient
from authorize.repositories.auth_code_repository import AuthCodeRepository
from authorize.repositories.client_repository import ClientRepository

logger = get_logger(__name__)


class SqlAlchemyGrantModel:
    """Looks up clients and stores issued codes in the request's session."""

    def __init__(self, db: AsyncSession) -> None:
        """Constructor."""
        self.db = db

    @with_retries(
        max_attempts=settings.DB_RETRY_ATTEMPTS,
        retry_on=(OperationalError,),
    )
    async def get_client(
        self, client_id: str, client_secret: str | None = None
    ) -> GrantClient | None:
        """Return the registered client for ``client_id``; the secret is unused."""
        return await ClientRepository(self.db).get_grant_client(client_id)

    async def save_auth_code(
        self, code: str, client_id: str, expires_at: datetime, user: Any
    ) -> None:
        """Store ``code`` for ``client_id`` and the approving subject."""
        subject_id = getattr(user, "id", user)
        await AuthCodeRepository(self.db).create(
            code=code,
            client_id=client_id,
            subject_id=subject_id,
            issued_at=utcnow(),
            expires_at=expires_at,
        )
        await self.db.commit()
        logger.debug("auth_code.saved", client_id=client_id, subject_id=subject_id)
