"""
Command pattern implementation for roster mutations.

Transitions of the drag controller and the conflict flow are pure; they
describe the mutation they want as a command, and the controller executes it
against the roster store. Each command is one store call.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..models import FieldPosition, FormationAssignment
from .roster_store import RosterStore

logger = logging.getLogger(__name__)


class RosterCommand(ABC):
    """Abstract base class for all roster mutations - Command pattern."""

    @abstractmethod
    def execute(self, store: RosterStore) -> None:
        """
        Execute the command against a roster store.

        Raises:
            RecordNotFoundError: If the target record vanished
        """
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Get human-readable description of the command."""
        pass


@dataclass(frozen=True)
class MovePlayerCommand(RosterCommand):
    """Move a starter to a new field coordinate."""
    player_id: str
    position: FieldPosition

    def execute(self, store: RosterStore) -> None:
        store.update_player_position(self.player_id, self.position)

    @property
    def description(self) -> str:
        return f"Move {self.player_id} to ({self.position.x:.1f}, {self.position.y:.1f})"


@dataclass(frozen=True)
class SetSubstituteCommand(RosterCommand):
    """Move a player between the bench and the field."""
    player_id: str
    is_substitute: bool
    position: Optional[FieldPosition] = None

    def execute(self, store: RosterStore) -> None:
        store.set_substitute_status(self.player_id, self.is_substitute, self.position)

    @property
    def description(self) -> str:
        if self.is_substitute:
            return f"Bench {self.player_id}"
        return f"Send {self.player_id} onto the field"


@dataclass(frozen=True)
class RenumberPlayerCommand(RosterCommand):
    """Give a player a new jersey number."""
    player_id: str
    number: int

    def execute(self, store: RosterStore) -> None:
        store.update_player_number(self.player_id, self.number)

    @property
    def description(self) -> str:
        return f"Renumber {self.player_id} to #{self.number}"


@dataclass(frozen=True)
class ApplyFormationCommand(RosterCommand):
    """Apply a planned formation batch in a single store call."""
    assignment: FormationAssignment

    def execute(self, store: RosterStore) -> None:
        skipped = store.apply_formation(
            self.assignment.team_id,
            self.assignment.formation_name,
            self.assignment.placements,
        )
        if skipped:
            logger.warning("Formation %s skipped %d missing player(s)",
                           self.assignment.formation_name, len(skipped))

    @property
    def description(self) -> str:
        return (f"Apply {self.assignment.formation_name} "
                f"({len(self.assignment.placements)} placements)")


class RosterCommandLog:
    """
    Executes roster commands and keeps a bounded history of what committed.
    """

    def __init__(self, store: RosterStore, max_history: int = 50):
        """
        Initialize command log.

        Args:
            store: Roster store the commands run against
            max_history: Maximum number of commands to keep in history
        """
        self.store = store
        self.max_history = max_history
        self._history: List[RosterCommand] = []

    def execute(self, command: RosterCommand) -> None:
        """Execute a command; only commands that commit enter the history."""
        command.execute(self.store)
        logger.info("Committed: %s", command.description)
        self._history.append(command)
        if len(self._history) > self.max_history:
            self._history.pop(0)

    def get_command_history(self) -> List[str]:
        """Get history of command descriptions, oldest first."""
        return [cmd.description for cmd in self._history]

    def clear_history(self) -> None:
        self._history.clear()
