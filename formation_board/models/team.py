"""
Team and user models for the Formation Board application.

A team belongs to a single owner and plays a single sport; both are fixed when
the team is created.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import ConfigurationError
from ..utils import now_ts


class Sport(Enum):
    """Sports supported by the formation board."""
    FOOTBALL = "football"
    VOLLEYBALL = "volleyball"
    BADMINTON = "badminton"

    @classmethod
    def parse(cls, value: str) -> "Sport":
        """
        Parse a sport name.

        Raises:
            ConfigurationError: If the sport is not supported
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown sport: {value}") from None


@dataclass(frozen=True)
class User:
    """The operator currently signed in."""
    id: str
    email: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"id": self.id, "email": self.email, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary for JSON deserialization."""
        return cls(id=data["id"], email=data.get("email", ""), name=data.get("name", ""))


@dataclass
class Team:
    """
    Represents a team and the formation currently applied to it.

    Attributes:
        id: Unique team identifier
        name: Display name
        sport: Sport played, immutable after creation
        owner_id: Identifier of the owning user, immutable after creation
        formation: Name of the formation last applied (optional)
        created_at: Creation time in epoch seconds
    """
    id: str
    name: str
    sport: Sport
    owner_id: str
    formation: Optional[str] = None
    created_at: float = field(default_factory=now_ts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "sport": self.sport.value,
            "owner_id": self.owner_id,
            "formation": self.formation,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Create from dictionary for JSON deserialization."""
        return cls(
            id=data["id"],
            name=data["name"],
            sport=Sport.parse(data["sport"]),
            owner_id=data["owner_id"],
            formation=data.get("formation"),
            created_at=data.get("created_at") or now_ts(),
        )
