"""Resource owners that approved a grant."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authorize.models import Subject


class SubjectRepository:
    """Maps authenticated user identities to subject rows."""

    def __init__(self, db: AsyncSession):
        """Constructor."""
        self.db = db

    async def find_id(self, uid: str) -> int | None:
        """Primary key of the subject with ``uid``, if any."""
        stmt = select(Subject.id).where(Subject.uid == uid)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_or_create_id(self, uid: str) -> int:
        """Primary key of the subject for ``uid``, inserted on first approval.

        A concurrent insert of the same uid loses the unique constraint; the
        winner's row is returned instead.
        """
        subject_id = await self.find_id(uid)
        if subject_id is not None:
            return subject_id

        subject = Subject(uid=uid, subject_metadata={})
        self.db.add(subject)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            subject_id = await self.find_id(uid)
            if subject_id is None:
                raise
            return subject_id
        return subject.id
