"""
Player model for the Formation Board application.

This module contains the Player dataclass which represents an individual
roster entry, either on the field (a starter) or on the substitute bench.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .formation import FieldPosition


@dataclass
class Player:
    """
    Represents a player on a team roster.

    Attributes:
        id: Unique player identifier
        team_id: Identifier of the owning team
        name: Display name
        position: Position label, one of the team sport's labels
        number: Jersey number (1-99)
        is_substitute: True while the player sits on the bench
        formation_position: Field coordinate, meaningful only for starters
        avatar_ref: Reference to the player's avatar blob (optional)
    """
    id: str
    team_id: str
    name: str
    position: str
    number: int
    is_substitute: bool = False
    formation_position: Optional[FieldPosition] = None
    avatar_ref: Optional[str] = None

    @property
    def is_starter(self) -> bool:
        """True when the player occupies the field."""
        return not self.is_substitute

    def copy(self) -> "Player":
        """Return a detached copy of this record."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "name": self.name,
            "position": self.position,
            "number": self.number,
            "is_substitute": self.is_substitute,
            "formation_position": (
                self.formation_position.to_dict() if self.formation_position else None
            ),
            "avatar_ref": self.avatar_ref,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Create from dictionary for JSON deserialization."""
        formation_position = None
        if data.get("formation_position"):
            formation_position = FieldPosition.from_dict(data["formation_position"])

        return cls(
            id=data["id"],
            team_id=data["team_id"],
            name=data["name"],
            position=data["position"],
            number=int(data["number"]),
            is_substitute=bool(data.get("is_substitute", False)),
            formation_position=formation_position,
            avatar_ref=data.get("avatar_ref"),
        )
