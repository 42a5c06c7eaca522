"""Authorization code repository."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from authorize.models import AuthCode


class AuthCodeRepository:
    """Repository for issued authorization codes."""

    def __init__(self, db: AsyncSession):
        """Constructor."""
        self.db = db

    async def create(
        self,
        *,
        code: str,
        client_id: str,
        subject_id: int | None,
        issued_at: datetime,
        expires_at: datetime,
    ) -> AuthCode:
        """Stage a new, unused authorization code."""
        auth_code = AuthCode(
            code=code,
            client_id=client_id,
            subject_id=subject_id,
            issued_at=issued_at,
            expires_at=expires_at,
            used=False,
        )
        self.db.add(auth_code)
        await self.db.flush()
        return auth_code
