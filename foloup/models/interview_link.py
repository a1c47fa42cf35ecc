"""Candidate interview link model."""

from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from foloup.core.database import Base


class CandidateInterviewLink(Base):
    """Single-use invitation for one candidate to take one interview."""

    __tablename__ = "candidate_interview_links"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    candidate_id: Mapped[int] = mapped_column(
        ForeignKey("candidates.id"), nullable=False, index=True)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id"), nullable=False, index=True)
    organization_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    unique_link_id: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False)
    link_url: Mapped[str] = mapped_column(String(512), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="active", nullable=False
    )  # active, expired, completed

    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True)
    response_id: Mapped[int | None] = mapped_column(
        ForeignKey("responses.id", ondelete="SET NULL"), nullable=True)
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    candidate: Mapped["Candidate"] = relationship("Candidate", back_populates="links")
    interview: Mapped["Interview"] = relationship("Interview", back_populates="links")

    def __repr__(self) -> str:
        return f"<CandidateInterviewLink(id={self.id}, unique_link_id={self.unique_link_id}, status={self.status})>"
