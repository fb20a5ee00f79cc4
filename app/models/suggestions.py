from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.security import AdminUser, Department


class SuggestionStatus(str, enum.Enum):
    PENDING_REVIEW = "pending-review"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REJECTED = "rejected"


# Never shown on the public board.
HIDDEN_FROM_PUBLIC = (SuggestionStatus.PENDING_REVIEW, SuggestionStatus.REJECTED)


class Suggestion(Base):
    __tablename__ = "suggestions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tracking_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # NULL means the suggestion is addressed to all departments.
    department_id: Mapped[int | None] = mapped_column(ForeignKey("departments.id"), nullable=True, index=True)

    submitter_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    submitter_class: Mapped[str | None] = mapped_column(String(100), nullable=True)

    status: Mapped[SuggestionStatus] = mapped_column(
        Enum(SuggestionStatus, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        default=SuggestionStatus.PENDING_REVIEW,
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    department: Mapped[Department | None] = relationship()
    replies: Mapped[list["Reply"]] = relationship(
        back_populates="suggestion",
        cascade="all, delete-orphan",
        order_by="Reply.id",
    )


class Reply(Base):
    __tablename__ = "replies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    suggestion_id: Mapped[int] = mapped_column(ForeignKey("suggestions.id"), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # NULL once the replying admin account has been deleted.
    replier_id: Mapped[int | None] = mapped_column(ForeignKey("admin_users.id"), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    suggestion: Mapped[Suggestion] = relationship(back_populates="replies")
    replier: Mapped[AdminUser | None] = relationship()
