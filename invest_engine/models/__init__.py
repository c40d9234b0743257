"""Domain models for the investment economics engine."""

from invest_engine.models.base import Event

__all__ = ["Event"]
