"""Models for resource owners and issued authorization codes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.models import Base, JSONType


class Subject(Base):
    """Resource owner that approves authorization requests."""

    __tablename__ = "subject"
    __table_args__ = (UniqueConstraint("uid", name="uq_subject_uid"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uid: Mapped[str] = mapped_column(Text, nullable=False)
    subject_metadata: Mapped[dict | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True, onupdate=func.now()
    )
    auth_codes: Mapped[list["AuthCode"]] = relationship(
        back_populates="subject", cascade="all, delete-orphan", lazy="selectin"
    )


class AuthCode(Base):
    """Authorization code issued to a client on behalf of a subject."""

    __tablename__ = "auth_code"
    __table_args__ = (UniqueConstraint("code", name="uq_auth_code_code"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    client_id: Mapped[str] = mapped_column(Text, nullable=False)
    subject_id: Mapped[int | None] = mapped_column(
        ForeignKey("subject.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=True
    )
    issued_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subject: Mapped[Optional["Subject"]] = relationship(
        back_populates="auth_codes", lazy="joined"
    )
