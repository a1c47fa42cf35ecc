"""Candidate model."""

from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from foloup.core.database import Base


class Candidate(Base):
    """A candidate screened for an interview, with their ATS results."""

    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    organization_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    resume_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    resume_file_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    ats_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ats_missing_skills: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)
    ats_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    interview: Mapped["Interview"] = relationship("Interview", back_populates="candidates")
    links: Mapped[list["CandidateInterviewLink"]] = relationship(
        "CandidateInterviewLink", back_populates="candidate", cascade="all, delete-orphan"
    )
    resumes: Mapped[list["Resume"]] = relationship(
        "Resume", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, email={self.email}, ats_score={self.ats_score})>"
