"""
Drag-interaction controller for the formation board.

The controller owns a single state value (Idle, Dragging or
AwaitingConflictResolution). The module-level functions are the pure
transitions: given the current state and a roster snapshot they return the
next state, the roster command to commit (if any) and the result reported to
the UI. DragController feeds them fresh snapshots from the roster store and
commits their commands.

Validation order on a bench-to-field drop is fixed: field capacity first,
then duplicate jersey number.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..errors import CapacityExceededError, InvalidTransitionError
from ..models import (
    AwaitingConflictResolution, DragSession, Dragging, DropBox, DropOutcome,
    DropResult, DuplicateConflict, FieldPosition, Idle,
    InteractionState, Player
)
from .conflict_resolution import (
    ConflictResolutionFlow, ResolutionChoice, ResolutionProposal
)
from .formation_validator import DuplicateNumberValidator, FieldCapacityValidator
from .roster_commands import (
    MovePlayerCommand, RosterCommand, RosterCommandLog, SetSubstituteCommand
)
from .roster_store import RosterStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """Outcome of a pure transition."""
    state: InteractionState
    result: DropResult
    command: Optional[RosterCommand] = None


def start_drag(state: InteractionState, player: Player) -> Dragging:
    """
    Idle -> Dragging.

    Raises:
        InvalidTransitionError: If a drag or a conflict is already open
    """
    if isinstance(state, AwaitingConflictResolution):
        raise InvalidTransitionError("Resolve the jersey number conflict before dragging")
    if isinstance(state, Dragging):
        raise InvalidTransitionError(
            f"Already dragging {state.session.name}; drop or cancel first"
        )
    return Dragging(DragSession.for_player(player))


def plan_field_drop(session: DragSession, dragged: Player, roster: Sequence[Player],
                    capacity: FieldCapacityValidator, point: FieldPosition) -> Transition:
    """
    Dragging -> Idle or AwaitingConflictResolution, for a drop on the field.

    Args:
        session: The drag being dropped
        dragged: Current record of the dragged player
        roster: Current roster of the dragged player's team
        capacity: Field capacity rule for the team's sport
        point: Drop coordinate, already converted to field percentages
    """
    if not session.is_substitute:
        return Transition(
            state=Idle(),
            result=DropResult(DropOutcome.MOVED, position=point),
            command=MovePlayerCommand(session.player_id, point),
        )

    starters = [p for p in roster if p.is_starter]
    if not capacity.validate(starters).is_valid:
        return Transition(
            state=Idle(),
            result=DropResult(DropOutcome.REJECTED,
                              error=CapacityExceededError(capacity.max_players)),
        )

    holder = DuplicateNumberValidator().find_holder(starters, session.player_id, session.number)
    if holder is not None:
        conflict = DuplicateConflict(incumbent=holder, incoming=dragged, number=session.number)
        return Transition(
            state=AwaitingConflictResolution(conflict),
            result=DropResult(DropOutcome.CONFLICT, conflict=conflict),
        )

    return Transition(
        state=Idle(),
        result=DropResult(DropOutcome.PLACED, position=point),
        command=SetSubstituteCommand(session.player_id, is_substitute=False, position=point),
    )


def plan_bench_drop(session: DragSession) -> Transition:
    """Dragging -> Idle, for a drop on the bench. The field coordinate is kept."""
    if session.is_substitute:
        return Transition(state=Idle(), result=DropResult(DropOutcome.NO_CHANGE))
    return Transition(
        state=Idle(),
        result=DropResult(DropOutcome.BENCHED),
        command=SetSubstituteCommand(session.player_id, is_substitute=True),
    )


class DragController:
    """
    Single-session controller for dragging players between bench and field.

    Exposes read-only accessors for the current drag session, the open
    conflict and the last validation error, for the presentation layer.
    """

    def __init__(self, store: RosterStore, command_log: Optional[RosterCommandLog] = None,
                 resolution_flow: Optional[ConflictResolutionFlow] = None):
        self.store = store
        self.command_log = command_log or RosterCommandLog(store)
        self.resolution_flow = resolution_flow or ConflictResolutionFlow()
        self._state: InteractionState = Idle()
        self._validation_error: Optional[CapacityExceededError] = None

    # ==================== Accessors ==================== #

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._state.session if isinstance(self._state, Dragging) else None

    @property
    def conflict(self) -> Optional[DuplicateConflict]:
        if isinstance(self._state, AwaitingConflictResolution):
            return self._state.conflict
        return None

    @property
    def validation_error(self) -> Optional[CapacityExceededError]:
        return self._validation_error

    def conflict_proposals(self) -> List[ResolutionProposal]:
        """Get the two resolution actions for the open conflict, if any."""
        if self.conflict is None:
            return []
        return self.resolution_flow.proposals(self.conflict)

    # ==================== Drag events ==================== #

    def start_drag(self, player_id: str) -> DragSession:
        """
        Begin dragging a player card. No roster change.

        Raises:
            InvalidTransitionError: If a drag or conflict is already open
            RecordNotFoundError: If the player no longer exists
        """
        player = self.store.get_player(player_id)
        self._state = start_drag(self._state, player)
        logger.debug("Drag started for %s (#%d)", player.name, player.number)
        return self._state.session

    def drop_on_field(self, pointer_x: float, pointer_y: float, box: DropBox) -> DropResult:
        """
        Drop the dragged player onto the field.

        The drag ends whatever happens. A capacity rejection is also kept as
        the current validation error until dismissed or superseded.

        Raises:
            ValueError: If the drop box has no area
            RecordNotFoundError: If the dragged player vanished
        """
        if not isinstance(self._state, Dragging):
            return DropResult(DropOutcome.NO_CHANGE)

        session = self._state.session
        self._state = Idle()

        point = box.to_field_position(pointer_x, pointer_y)
        dragged = self.store.get_player(session.player_id)
        team = self.store.get_team(dragged.team_id)
        transition = plan_field_drop(
            session,
            dragged,
            self.store.get_players(team.id),
            FieldCapacityValidator(team.sport),
            point,
        )
        return self._commit(transition)

    def drop_on_bench(self) -> DropResult:
        """Drop the dragged player onto the substitute bench."""
        if not isinstance(self._state, Dragging):
            return DropResult(DropOutcome.NO_CHANGE)

        session = self._state.session
        self._state = Idle()
        return self._commit(plan_bench_drop(session))

    def cancel_drag(self) -> None:
        """Drop outside any target: the drag ends with no roster change."""
        if isinstance(self._state, Dragging):
            self._state = Idle()

    # ==================== Conflict resolution ==================== #

    def resolve_conflict(self, choice: ResolutionChoice, new_number: int) -> Player:
        """
        Renumber one of the two colliding players and close the conflict.

        Returns:
            The renumbered player

        Raises:
            InvalidTransitionError: If no conflict is open
            ResolutionRejectedError: If the number is unchanged or out of range;
                the conflict stays open
            RecordNotFoundError: If the player vanished; the conflict is closed
        """
        conflict = self.conflict
        if conflict is None:
            raise InvalidTransitionError("There is no jersey number conflict to resolve")

        command = self.resolution_flow.plan(conflict, choice, new_number)
        self._state = Idle()
        self.command_log.execute(command)
        self._validation_error = None
        return self.store.get_player(command.player_id)

    def dismiss_conflict(self) -> None:
        """Close the resolution dialog without changing anything."""
        if isinstance(self._state, AwaitingConflictResolution):
            self._state = Idle()

    def dismiss_error(self) -> None:
        self._validation_error = None

    def reset(self) -> None:
        """Return to Idle, dropping any drag, conflict and error."""
        self._state = Idle()
        self._validation_error = None

    def to_dict(self) -> Dict:
        """Snapshot of the controller for the presentation layer."""
        return {
            "state": self._state.name,
            "drag_session": self.drag_session.to_dict() if self.drag_session else None,
            "conflict": self.conflict.to_dict() if self.conflict else None,
            "proposals": [p.to_dict() for p in self.conflict_proposals()],
            "validation_error": str(self._validation_error) if self._validation_error else None,
        }

    def _commit(self, transition: Transition) -> DropResult:
        self._state = transition.state
        result = transition.result
        if result.outcome is DropOutcome.REJECTED:
            logger.warning("Drop rejected: %s", result.error)
            self._validation_error = result.error
        elif transition.command is not None:
            self.command_log.execute(transition.command)
            self._validation_error = None
        return result
