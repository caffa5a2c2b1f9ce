"""
Validation rules for roster edits and field moves.

Each rule checks one concern and reports a ValidationResult. The drag
controller runs the capacity rule before the duplicate-number rule; that
ordering decides which error a full field with a colliding number reports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models import FormationCatalog, Player, Sport
from ..utils.constants import (
    MAX_JERSEY_NUMBER, MAX_NAME_LENGTH, MIN_JERSEY_NUMBER, MIN_NAME_LENGTH
)


class ValidationResult:
    """Result of a validation operation with success status and error messages."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str) -> None:
        """Add an error message and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def combine(self, other: ValidationResult) -> ValidationResult:
        """Combine with another validation result."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors
        )

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


class ValidationRule(ABC):
    """Abstract base class for validation rules."""

    @abstractmethod
    def validate(self, *args, **kwargs) -> ValidationResult:
        """Perform validation and return result."""
        pass


class PlayerDataValidator(ValidationRule):
    """Validates the editable attributes of a player against its team's sport."""

    def validate(self, sport: Sport, name: str, position: str, number: int) -> ValidationResult:
        result = ValidationResult()

        cleaned = (name or "").strip()
        if not cleaned:
            result.add_error("Player name is required")
        elif len(cleaned) < MIN_NAME_LENGTH:
            result.add_error(f"Player name must be at least {MIN_NAME_LENGTH} characters long")
        elif len(cleaned) > MAX_NAME_LENGTH:
            result.add_error(f"Player name must be at most {MAX_NAME_LENGTH} characters long")

        result = result.combine(JerseyNumberValidator().validate(number))

        valid_positions = FormationCatalog.positions_for(sport)
        if position not in valid_positions:
            result.add_error(
                f"Invalid position '{position}' for {sport.value}; "
                f"expected one of: {', '.join(valid_positions)}"
            )

        return result


class JerseyNumberValidator(ValidationRule):
    """Validates a jersey number is an integer in the allowed range."""

    def validate(self, number: int) -> ValidationResult:
        result = ValidationResult()
        if isinstance(number, bool) or not isinstance(number, int):
            result.add_error("Player number must be numeric")
        elif not MIN_JERSEY_NUMBER <= number <= MAX_JERSEY_NUMBER:
            result.add_error(
                f"Player number must be between {MIN_JERSEY_NUMBER} and {MAX_JERSEY_NUMBER}"
            )
        return result


class FieldCapacityValidator(ValidationRule):
    """Validates there is room on the field for one more starter."""

    def __init__(self, sport: Sport):
        self.sport = sport
        self.max_players = FormationCatalog.capacity_for(sport)

    def validate(self, starters: Sequence[Player]) -> ValidationResult:
        result = ValidationResult()
        if len(starters) >= self.max_players:
            result.add_error(
                f"The field is full! Maximum {self.max_players} players allowed on the field."
            )
        return result


class DuplicateNumberValidator:
    """
    Finds the starter already wearing a jersey number.

    A collision is not a validation failure: the drag controller turns the
    holder into an open conflict for the operator to resolve.
    """

    def find_holder(self, starters: Sequence[Player], player_id: str,
                    number: int) -> Optional[Player]:
        """Get the first other starter wearing the number, in roster order."""
        for starter in starters:
            if starter.number == number and starter.id != player_id:
                return starter
        return None
