"""
Duplicate jersey number resolution.

A conflict offers two independent ways out: renumber the starter already on
the field, or renumber the substitute that tried to join. Either one is a
plain number update. Neither places the incoming player on the field; the
operator repeats the drag afterwards.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from ..errors import ResolutionRejectedError
from ..models import DuplicateConflict, Player
from .formation_validator import JerseyNumberValidator
from .roster_commands import RenumberPlayerCommand


class ResolutionChoice(Enum):
    """Which of the two colliding players gets a new number."""
    RENUMBER_INCUMBENT = "renumber_incumbent"
    RENUMBER_INCOMING = "renumber_incoming"

    @classmethod
    def parse(cls, value: str) -> "ResolutionChoice":
        try:
            return cls(value)
        except ValueError:
            raise ResolutionRejectedError(f"Unknown resolution choice: {value}") from None


@dataclass(frozen=True)
class ResolutionProposal:
    """One action offered by the resolution dialog, with its pre-filled number."""
    choice: ResolutionChoice
    player: Player
    default_number: int

    def to_dict(self) -> Dict:
        return {
            "choice": self.choice.value,
            "player": self.player.to_dict(),
            "default_number": self.default_number,
        }


class ConflictResolutionFlow:
    """Builds the dialog's proposals and validates submissions."""

    def __init__(self):
        self.number_validator = JerseyNumberValidator()

    def target_of(self, conflict: DuplicateConflict, choice: ResolutionChoice) -> Player:
        if choice is ResolutionChoice.RENUMBER_INCUMBENT:
            return conflict.incumbent
        return conflict.incoming

    def proposals(self, conflict: DuplicateConflict) -> List[ResolutionProposal]:
        """Get both actions, each pre-filled with its player's current number."""
        return [
            ResolutionProposal(choice, self.target_of(conflict, choice),
                               self.target_of(conflict, choice).number)
            for choice in ResolutionChoice
        ]

    def can_submit(self, conflict: DuplicateConflict, new_number: int) -> bool:
        """A submission is allowed only once the number differs from the shared one."""
        return new_number != conflict.number and self.number_validator.validate(new_number).is_valid

    def plan(self, conflict: DuplicateConflict, choice: ResolutionChoice,
             new_number: int) -> RenumberPlayerCommand:
        """
        Turn a submission into the single number update it stands for.

        Raises:
            ResolutionRejectedError: If the number still collides or is out of range
        """
        if new_number == conflict.number:
            raise ResolutionRejectedError(
                f"Choose a number other than #{conflict.number}"
            )
        result = self.number_validator.validate(new_number)
        if not result.is_valid:
            raise ResolutionRejectedError(result.message)
        return RenumberPlayerCommand(self.target_of(conflict, choice).id, new_number)
