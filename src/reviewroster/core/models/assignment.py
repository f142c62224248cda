"""ReviewAssignment model - one reviewer on one pull request."""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class AssignmentState(str, Enum):
    """Whether an assignment edge is a current reviewer or history."""
    ACTIVE = "active"
    REPLACED = "replaced"


class ReviewAssignment(Base):
    """Assignment edge between a reviewer and a pull request.

    An edge with ``replaced_by`` set is historical and records who took
    over. Only edges with ``replaced_by IS NULL`` are current reviewers.
    """

    __tablename__ = "review_assignments"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        # A reviewer can be current on a pull request at most once
        Index(
            "uq_review_assignments_current",
            "pull_request_id",
            "reviewer_id",
            unique=True,
            sqlite_where=text("replaced_by IS NULL"),
            postgresql_where=text("replaced_by IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pull_request_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("pull_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewer_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    replaced_by: Mapped[Optional[str]] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    replaced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    pull_request: Mapped["PullRequest"] = relationship(
        "PullRequest", back_populates="assignments"
    )

    @property
    def state(self) -> AssignmentState:
        if self.replaced_by is None:
            return AssignmentState.ACTIVE
        return AssignmentState.REPLACED

    @property
    def is_current(self) -> bool:
        return self.state is AssignmentState.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<ReviewAssignment(id={self.id}, pull_request_id='{self.pull_request_id}', "
            f"reviewer_id='{self.reviewer_id}', replaced_by={self.replaced_by!r})>"
        )
