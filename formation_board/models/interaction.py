"""
Drag interaction state models for the Formation Board.

The controller holds exactly one of Idle, Dragging or AwaitingConflictResolution
at a time. All of them are immutable; transitions build new values.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .formation import FieldPosition
from .player import Player


@dataclass(frozen=True)
class DragSession:
    """The player currently being relocated."""
    player_id: str
    name: str
    number: int
    is_substitute: bool

    @classmethod
    def for_player(cls, player: Player) -> DragSession:
        """Capture the attributes of a player at drag start."""
        return cls(
            player_id=player.id,
            name=player.name,
            number=player.number,
            is_substitute=player.is_substitute,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "number": self.number,
            "is_substitute": self.is_substitute,
        }


@dataclass(frozen=True)
class DuplicateConflict:
    """
    Two players sharing a jersey number, pending operator resolution.

    Attributes:
        incumbent: Starter already on the field with the number
        incoming: Substitute that tried to join the field
        number: The shared jersey number
    """
    incumbent: Player
    incoming: Player
    number: int

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "incumbent": self.incumbent.to_dict(),
            "incoming": self.incoming.to_dict(),
            "number": self.number,
        }


@dataclass(frozen=True)
class DropBox:
    """Bounding box of the drop target, in pointer coordinates."""
    left: float
    top: float
    width: float
    height: float

    def to_field_position(self, pointer_x: float, pointer_y: float) -> FieldPosition:
        """
        Convert a pointer location to a field percentage, clamped to the field.

        Raises:
            ValueError: If the box has no area or any value is not finite
        """
        values = (pointer_x, pointer_y, self.left, self.top, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Drop coordinates must be finite numbers: {values}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Drop target has no area: {self.width}x{self.height}")
        x = (pointer_x - self.left) / self.width * 100
        y = (pointer_y - self.top) / self.height * 100
        return FieldPosition(x, y).clamped()

    @classmethod
    def from_dict(cls, data: Dict) -> DropBox:
        """Create from dictionary."""
        return cls(
            left=float(data.get("left", 0)),
            top=float(data.get("top", 0)),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class Idle:
    """No drag in progress and no open conflict."""
    name = "idle"


@dataclass(frozen=True)
class Dragging:
    """A drag is in flight."""
    session: DragSession
    name = "dragging"


@dataclass(frozen=True)
class AwaitingConflictResolution:
    """A duplicate jersey number is waiting for the operator."""
    conflict: DuplicateConflict
    name = "awaiting_conflict_resolution"


InteractionState = Union[Idle, Dragging, AwaitingConflictResolution]


class DropOutcome(Enum):
    """What a drop did to the roster."""
    PLACED = "placed"              # substitute moved onto the field
    MOVED = "moved"                # starter moved within the field
    BENCHED = "benched"            # starter moved to the bench
    REJECTED = "rejected"          # field full, nothing changed
    CONFLICT = "conflict"          # duplicate number, awaiting resolution
    NO_CHANGE = "no_change"        # bench to bench, or cancelled


@dataclass(frozen=True)
class DropResult:
    """Result of a drop gesture reported back to the UI layer."""
    outcome: DropOutcome
    position: Optional[FieldPosition] = None
    error: Optional[Exception] = None
    conflict: Optional[DuplicateConflict] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "outcome": self.outcome.value,
            "position": self.position.to_dict() if self.position else None,
            "error": str(self.error) if self.error else None,
            "conflict": self.conflict.to_dict() if self.conflict else None,
        }
