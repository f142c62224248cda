"""Team roster management."""
from .service import RosterService, TeamResult

__all__ = ["RosterService", "TeamResult"]
