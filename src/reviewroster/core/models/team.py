"""Roster models: teams and their users."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Team(Base):
    """A named group of users who review each other's pull requests."""

    __tablename__ = "teams"
    __mapper_args__ = {"eager_defaults": True}

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    members: Mapped[list["User"]] = relationship(
        "User", back_populates="team", order_by="User.id"
    )

    def __repr__(self) -> str:
        return f"<Team(name='{self.name}')>"


class User(Base):
    """A team member who can author and review pull requests."""

    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    team_name: Mapped[str] = mapped_column(
        String(255), ForeignKey("teams.name", ondelete="RESTRICT"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    team: Mapped["Team"] = relationship("Team", back_populates="members")

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', team_name='{self.team_name}', is_active={self.is_active})>"
