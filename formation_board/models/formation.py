"""Formation and field coordinate models for the Formation Board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..errors import ConfigurationError, InvalidFormationError
from ..utils.constants import (
    FORMATION_SLOTS, MAX_COORDINATE, MAX_PLAYERS_ON_FIELD, MIN_COORDINATE,
    SPORT_FORMATIONS, SPORT_POSITIONS
)
from .team import Sport


@dataclass(frozen=True)
class FieldPosition:
    """A point on the field, as percentages of the field bounds."""
    x: float  # 0-100, left to right
    y: float  # 0-100, top to bottom

    def clamped(self) -> FieldPosition:
        """Return this point with both axes limited to the field bounds."""
        return FieldPosition(
            x=min(max(self.x, MIN_COORDINATE), MAX_COORDINATE),
            y=min(max(self.y, MIN_COORDINATE), MAX_COORDINATE),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict) -> FieldPosition:
        """Create from dictionary."""
        return cls(x=float(data["x"]), y=float(data["y"]))


SlotTable = Dict[str, List[FieldPosition]]


@dataclass
class FormationAssignment:
    """
    One batch produced by arranging a formation.

    Attributes:
        team_id: Team whose formation field is updated
        formation_name: Formation being applied
        placements: Ordered (player id, coordinate) pairs
        unassigned: Starters that received no coordinate this pass
    """
    team_id: str
    formation_name: str
    placements: List[Tuple[str, FieldPosition]] = field(default_factory=list)
    unassigned: List[str] = field(default_factory=list)

    def coordinate_for(self, player_id: str) -> Optional[FieldPosition]:
        """Get the coordinate assigned to a player, if any."""
        for placed_id, position in self.placements:
            if placed_id == player_id:
                return position
        return None

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "team_id": self.team_id,
            "formation": self.formation_name,
            "placements": [
                {"player_id": player_id, "position": position.to_dict()}
                for player_id, position in self.placements
            ],
            "unassigned": list(self.unassigned),
        }


class FormationCatalog:
    """Read-only reference data for sports and their formations."""

    @staticmethod
    def positions_for(sport: Sport) -> List[str]:
        """Get the ordered position labels recognised for a sport."""
        return list(SPORT_POSITIONS[FormationCatalog._sport_key(sport)])

    @staticmethod
    def formations_for(sport: Sport) -> List[str]:
        """Get the formation names available for a sport."""
        return list(SPORT_FORMATIONS[FormationCatalog._sport_key(sport)])

    @staticmethod
    def capacity_for(sport: Sport) -> int:
        """Get the maximum number of starters on the field for a sport."""
        return MAX_PLAYERS_ON_FIELD[FormationCatalog._sport_key(sport)]

    @staticmethod
    def slot_table_for(formation_name: str) -> SlotTable:
        """
        Get the slot coordinates for a formation.

        Raises:
            InvalidFormationError: If the formation has no slot table
        """
        slots = FORMATION_SLOTS.get(formation_name)
        if slots is None:
            raise InvalidFormationError(formation_name)
        return {
            label: [FieldPosition(float(x), float(y)) for x, y in coordinates]
            for label, coordinates in slots.items()
        }

    @staticmethod
    def is_valid_formation(sport: Sport, formation_name: str) -> bool:
        """Check whether a formation belongs to a sport."""
        return formation_name in FormationCatalog.formations_for(sport)

    @staticmethod
    def sport_for_formation(formation_name: str) -> Sport:
        """Find the sport that lists a formation."""
        for sport_key, names in SPORT_FORMATIONS.items():
            if formation_name in names:
                return Sport(sport_key)
        raise InvalidFormationError(formation_name)

    @staticmethod
    def _sport_key(sport: Sport) -> str:
        key = sport.value if isinstance(sport, Sport) else sport
        if key not in SPORT_POSITIONS:
            raise ConfigurationError(f"Unknown sport: {key}")
        return key
