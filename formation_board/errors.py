"""
Exception hierarchy for the Formation Board.

ConfigurationError signals a catalog or data bug and must propagate. The
remaining errors are recoverable and surface to the operator, who retries
with a fresh action.
"""
from typing import Optional


class FormationBoardError(Exception):
    """Base class for all Formation Board errors."""
    pass


class ConfigurationError(FormationBoardError):
    """Unknown sport or formation key in the catalog."""
    pass


class InvalidFormationError(ConfigurationError):
    """Formation name is not valid for the team's sport."""

    def __init__(self, formation_name: str, sport: Optional[str] = None):
        self.formation_name = formation_name
        self.sport = sport
        if sport:
            message = f"Formation '{formation_name}' is not valid for {sport}"
        else:
            message = f"Unknown formation '{formation_name}'"
        super().__init__(message)


class CapacityExceededError(FormationBoardError):
    """The field already holds the sport's maximum number of starters."""

    def __init__(self, max_players: int):
        self.max_players = max_players
        super().__init__(
            f"The field is full! Maximum {max_players} players allowed on the field."
        )


class RecordNotFoundError(FormationBoardError):
    """A referenced team or player no longer exists in the roster store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} not found: {record_id}")


class PlayerValidationError(FormationBoardError):
    """Player or team data failed validation."""
    pass


class ResolutionRejectedError(FormationBoardError):
    """A conflict resolution was submitted with an unusable jersey number."""
    pass


class InvalidTransitionError(FormationBoardError):
    """A drag interaction event arrived in a state that does not accept it."""
    pass
