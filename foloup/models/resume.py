"""Resume and resume analysis models."""

from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from foloup.core.database import Base


class Resume(Base):
    """Resume model for storing uploaded resumes and their extracted text."""

    __tablename__ = "resumes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    organization_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    candidate_id: Mapped[int] = mapped_column(
        ForeignKey("candidates.id"), nullable=False, index=True)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id"), nullable=False, index=True)

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(512), nullable=False)
    file_size: Mapped[int] = mapped_column(nullable=False)
    parsed_content: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50), default="pending", nullable=False
    )  # pending, processed, failed
    processing_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    analyses: Mapped[list["ResumeAnalysis"]] = relationship(
        "ResumeAnalysis", back_populates="resume", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Resume(id={self.id}, candidate_id={self.candidate_id}, filename={self.filename})>"


class ResumeAnalysis(Base):
    """ATS analysis of a resume against an interview's requirements."""

    __tablename__ = "resume_analyses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    resume_id: Mapped[int] = mapped_column(
        ForeignKey("resumes.id"), nullable=False, index=True)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id"), nullable=False, index=True)
    ai_provider: Mapped[str] = mapped_column(String(20), nullable=False)

    overall_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    skills_match: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    experience_match: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    education_match: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    technical_skills: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)
    soft_skills: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)
    experience_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    education_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendations: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    resume: Mapped["Resume"] = relationship("Resume", back_populates="analyses")

    def __repr__(self) -> str:
        return f"<ResumeAnalysis(id={self.id}, resume_id={self.resume_id}, overall={self.overall_score})>"
