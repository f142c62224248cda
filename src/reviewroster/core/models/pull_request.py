"""Pull request model and its status lifecycle."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class PullRequestStatus(str, Enum):
    """Status of a pull request. OPEN -> MERGED, and MERGED is terminal."""
    OPEN = "OPEN"
    MERGED = "MERGED"

    @classmethod
    def from_storage(cls, value: Optional[str]) -> "PullRequestStatus":
        """Read a stored status for pull request responses.

        Anything unrecognized (including NULL) is reported as OPEN.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.OPEN


UNKNOWN_STATUS = "UNKNOWN"


def status_label(value: Optional[str]) -> str:
    """Read a stored status for aggregate statistics.

    Unlike ``PullRequestStatus.from_storage``, unrecognized values are
    reported as UNKNOWN here.
    """
    try:
        return PullRequestStatus(value).value
    except ValueError:
        return UNKNOWN_STATUS


class PullRequest(Base):
    """The unit under review."""

    __tablename__ = "pull_requests"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    status: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True, default=PullRequestStatus.OPEN.value, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    merged_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    author: Mapped["User"] = relationship("User", foreign_keys=[author_id])
    assignments: Mapped[list["ReviewAssignment"]] = relationship(
        "ReviewAssignment", back_populates="pull_request", order_by="ReviewAssignment.id"
    )

    @property
    def is_merged(self) -> bool:
        return PullRequestStatus.from_storage(self.status) is PullRequestStatus.MERGED

    def __repr__(self) -> str:
        return f"<PullRequest(id='{self.id}', author_id='{self.author_id}', status='{self.status}')>"
