"""
Models package for the Formation Board.

This package contains the core data models used throughout the application.
"""
from .team import Sport, Team, User
from .formation import FieldPosition, FormationAssignment, FormationCatalog, SlotTable
from .player import Player
from .interaction import (
    AwaitingConflictResolution, DragSession, Dragging, DropBox, DropOutcome,
    DropResult, DuplicateConflict, Idle, InteractionState
)

__all__ = [
    "Sport", "Team", "User", "FieldPosition", "FormationAssignment",
    "FormationCatalog", "SlotTable", "Player", "AwaitingConflictResolution",
    "DragSession", "Dragging", "DropBox", "DropOutcome", "DropResult",
    "DuplicateConflict", "Idle", "InteractionState"
]
