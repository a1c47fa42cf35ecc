"""Interview model."""

from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from foloup.core.database import Base


class Interview(Base):
    """An interview template that candidates are invited to take."""

    __tablename__ = "interviews"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    organization_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    objective: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    questions: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)
    question_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    difficulty: Mapped[str] = mapped_column(
        String(20), default="medium", nullable=False
    )  # easy, medium, hard
    insights: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    candidates: Mapped[list["Candidate"]] = relationship(
        "Candidate", back_populates="interview", cascade="all, delete-orphan"
    )
    responses: Mapped[list["Response"]] = relationship(
        "Response", back_populates="interview", cascade="all, delete-orphan"
    )
    links: Mapped[list["CandidateInterviewLink"]] = relationship(
        "CandidateInterviewLink", back_populates="interview", cascade="all, delete-orphan"
    )

    @property
    def requirements_text(self) -> str | None:
        """Text the ATS matches resumes against."""
        return self.job_description or self.description or self.objective

    def __repr__(self) -> str:
        return f"<Interview(id={self.id}, name={self.name}, active={self.is_active})>"
