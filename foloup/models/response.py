"""Interview response model."""

from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, JSON, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from foloup.core.database import Base


class Response(Base):
    """A candidate's interview call, its transcript and generated analytics."""

    __tablename__ = "responses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id"), nullable=False, index=True)
    call_id: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    candidate_link_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # transcript, call_analysis
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    analytics: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_analysed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_ended: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    interview: Mapped["Interview"] = relationship("Interview", back_populates="responses")

    def __repr__(self) -> str:
        return f"<Response(id={self.id}, call_id={self.call_id}, interview_id={self.interview_id})>"
