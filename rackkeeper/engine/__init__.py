"""Scorekeeping engine."""

from .engine import Engine, MatchStatus, Outcome

__all__ = ["Engine", "MatchStatus", "Outcome"]
