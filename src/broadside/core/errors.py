"""Exceptions for broken engine invariants (never for player mistakes)."""

from __future__ import annotations


class EngineError(RuntimeError):
    """Base class for states the engine should never reach."""


class NoCandidateCellsError(EngineError):
    """The automated opponent was asked to fire at a fully attacked board."""


class FleetPlacementError(EngineError):
    """A fleet could not be fitted onto the board."""
