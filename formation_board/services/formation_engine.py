"""
Formation arrangement engine.

Places a team's starters onto the slots of a formation. Planning is a pure
function of the team, the roster snapshot and the formation name; applying the
plan is a single batch call to the roster store.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from ..errors import InvalidFormationError
from ..models import FormationAssignment, FormationCatalog, Player, Team
from .roster_commands import ApplyFormationCommand, RosterCommandLog
from .roster_store import RosterStore

logger = logging.getLogger(__name__)


def group_by_position(players: Sequence[Player]) -> Dict[str, List[Player]]:
    """Group players by position label, keeping roster order inside each group."""
    groups: Dict[str, List[Player]] = OrderedDict()
    for player in players:
        groups.setdefault(player.position, []).append(player)
    return groups


def arrange_formation(team: Team, roster: Sequence[Player],
                      formation_name: str) -> FormationAssignment:
    """
    Plan the slot assignment for a formation.

    The i-th starter of a position group takes the i-th slot of that label.
    Starters beyond the label's slot count, and starters whose label has no
    slots in this formation, are reported as unassigned and keep their
    current coordinate. Substitutes are ignored.

    Args:
        team: Team the formation is applied to
        roster: Full roster snapshot, starters and substitutes
        formation_name: Formation to apply

    Returns:
        The batch of placements for the team

    Raises:
        InvalidFormationError: If the formation is not valid for the team's sport
    """
    if not FormationCatalog.is_valid_formation(team.sport, formation_name):
        raise InvalidFormationError(formation_name, team.sport.value)

    slot_table = FormationCatalog.slot_table_for(formation_name)
    starters = [p for p in roster if p.is_starter]
    groups = group_by_position(starters)

    assignment = FormationAssignment(team_id=team.id, formation_name=formation_name)
    for label, slots in slot_table.items():
        for index, player in enumerate(groups.get(label, [])):
            if index < len(slots):
                assignment.placements.append((player.id, slots[index]))

    placed = {player_id for player_id, _ in assignment.placements}
    assignment.unassigned = [p.id for p in starters if p.id not in placed]
    return assignment


class FormationEngine:
    """Applies formations to teams held in a roster store."""

    def __init__(self, store: RosterStore, command_log: Optional[RosterCommandLog] = None):
        self.store = store
        self.command_log = command_log or RosterCommandLog(store)

    def plan(self, team_id: str, formation_name: str) -> FormationAssignment:
        """Plan a formation against the current roster without applying it."""
        team = self.store.get_team(team_id)
        return arrange_formation(team, self.store.get_players(team_id), formation_name)

    def apply(self, team_id: str, formation_name: str) -> FormationAssignment:
        """
        Plan and apply a formation as one batch update.

        Raises:
            InvalidFormationError: If the formation is not valid for the sport
            RecordNotFoundError: If the team does not exist
        """
        assignment = self.plan(team_id, formation_name)
        self.command_log.execute(ApplyFormationCommand(assignment))
        if assignment.unassigned:
            logger.info("Formation %s left %d starter(s) without a slot",
                        formation_name, len(assignment.unassigned))
        return assignment
