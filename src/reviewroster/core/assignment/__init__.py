"""Reviewer assignment: candidate selection and the assignment engine."""
from .engine import (
    DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    AssignmentEngine,
    AssignmentResult,
    ReassignmentResult,
)
from .selector import CandidateSelector

__all__ = [
    "AssignmentEngine",
    "AssignmentResult",
    "ReassignmentResult",
    "CandidateSelector",
    "DEFAULT_REVIEWERS_PER_PULL_REQUEST",
]
