"""
Unit tests for the formation arrangement engine.

Tests slot assignment by position group, overflow and missing labels,
idempotence, invalid formations and the single-batch store update.
"""
import unittest

from formation_board.errors import InvalidFormationError, RecordNotFoundError
from formation_board.models import FieldPosition, FormationCatalog, Sport
from formation_board.services import FormationEngine, InMemoryRosterStore, arrange_formation
from formation_board.services.formation_engine import group_by_position


FULL_4_4_2 = (
    [("Keeper", "Goalkeeper", 1)]
    + [(f"Defender {i}", "Defender", 1 + i) for i in range(1, 5)]
    + [(f"Midfielder {i}", "Midfielder", 5 + i) for i in range(1, 5)]
    + [(f"Forward {i}", "Forward", 9 + i) for i in range(1, 3)]
)


class TestArrangeFormation(unittest.TestCase):
    """Test the pure planning function."""

    def setUp(self) -> None:
        """Set up a football team with a full 4-4-2 roster."""
        self.store = InMemoryRosterStore()
        self.team_id = self.store.create_team("Rovers", Sport.FOOTBALL, "coach-1")
        self.ids = {}
        for name, position, number in FULL_4_4_2:
            self.ids[name] = self.store.add_player(self.team_id, name, position, number, False)
        self.bench_id = self.store.add_player(self.team_id, "Bench Defender", "Defender", 30, True)

    def _plan(self, formation: str):
        team = self.store.get_team(self.team_id)
        return arrange_formation(team, self.store.get_players(self.team_id), formation)

    def test_full_roster_fills_every_slot(self) -> None:
        """Every starter receives a distinct coordinate from the 4-4-2 table."""
        assignment = self._plan("4-4-2")

        self.assertEqual(len(assignment.placements), 11)
        self.assertEqual(assignment.unassigned, [])

        coordinates = [position for _, position in assignment.placements]
        self.assertEqual(len(set(coordinates)), 11)

        table = FormationCatalog.slot_table_for("4-4-2")
        all_slots = {p for points in table.values() for p in points}
        self.assertEqual(set(coordinates), all_slots)

    def test_group_order_is_stable(self) -> None:
        """The i-th defender in roster order takes the i-th defender slot."""
        assignment = self._plan("4-4-2")
        defender_slots = FormationCatalog.slot_table_for("4-4-2")["Defender"]

        for i in range(1, 5):
            self.assertEqual(
                assignment.coordinate_for(self.ids[f"Defender {i}"]),
                defender_slots[i - 1]
            )

    def test_substitutes_are_ignored(self) -> None:
        """Bench players receive nothing and are not reported unassigned."""
        assignment = self._plan("4-4-2")

        self.assertIsNone(assignment.coordinate_for(self.bench_id))
        self.assertNotIn(self.bench_id, assignment.unassigned)

    def test_overflow_players_are_unassigned(self) -> None:
        """4-3-3 has three midfield slots, so the fourth midfielder is left out."""
        assignment = self._plan("4-3-3")
        midfield_slots = FormationCatalog.slot_table_for("4-3-3")["Midfielder"]

        for i in range(1, 4):
            self.assertEqual(assignment.coordinate_for(self.ids[f"Midfielder {i}"]),
                             midfield_slots[i - 1])
        self.assertIsNone(assignment.coordinate_for(self.ids["Midfielder 4"]))
        self.assertEqual(assignment.unassigned, [self.ids["Midfielder 4"]])

    def test_empty_position_groups_are_skipped(self) -> None:
        """A slot label with no starters does not break the plan."""
        store = InMemoryRosterStore()
        team_id = store.create_team("Keepers", Sport.FOOTBALL, "coach-1")
        keeper_id = store.add_player(team_id, "Solo", "Goalkeeper", 1, False)

        assignment = arrange_formation(store.get_team(team_id), store.get_players(team_id), "3-5-2")

        self.assertEqual(assignment.placements, [(keeper_id, FieldPosition(50, 10))])

    def test_label_missing_from_table_is_unassigned(self) -> None:
        """Volleyball liberos have no slot in 6-Player Standard."""
        store = InMemoryRosterStore()
        team_id = store.create_team("Spikers", Sport.VOLLEYBALL, "coach-1")
        setter_id = store.add_player(team_id, "Setter", "Setter", 1, False)
        libero_id = store.add_player(team_id, "Libero", "Libero", 2, False)

        assignment = arrange_formation(
            store.get_team(team_id), store.get_players(team_id), "6-Player Standard"
        )

        self.assertEqual(assignment.coordinate_for(setter_id), FieldPosition(60, 30))
        self.assertEqual(assignment.unassigned, [libero_id])

    def test_formation_of_another_sport_is_rejected(self) -> None:
        with self.assertRaises(InvalidFormationError):
            self._plan("5-1")

        with self.assertRaises(InvalidFormationError):
            self._plan("No Such Formation")

    def test_planning_twice_is_deterministic(self) -> None:
        self.assertEqual(self._plan("3-5-2").placements, self._plan("3-5-2").placements)

    def test_group_by_position(self) -> None:
        players = self.store.get_players(self.team_id)
        groups = group_by_position(players)

        self.assertEqual(list(groups), ["Goalkeeper", "Defender", "Midfielder", "Forward"])
        self.assertEqual([p.name for p in groups["Defender"]][:2], ["Defender 1", "Defender 2"])


class TestFormationEngine(unittest.TestCase):
    """Test applying formations through the roster store."""

    def setUp(self) -> None:
        self.store = InMemoryRosterStore()
        self.engine = FormationEngine(self.store)
        self.team_id = self.store.create_team("Rovers", Sport.FOOTBALL, "coach-1")
        self.ids = {}
        for name, position, number in FULL_4_4_2:
            self.ids[name] = self.store.add_player(self.team_id, name, position, number, False)

    def test_apply_sets_team_formation_and_coordinates(self) -> None:
        self.engine.apply(self.team_id, "4-4-2")

        self.assertEqual(self.store.get_team(self.team_id).formation, "4-4-2")
        keeper = self.store.get_player(self.ids["Keeper"])
        self.assertEqual(keeper.formation_position, FieldPosition(50, 10))
        for player in self.store.get_players(self.team_id):
            self.assertIsNotNone(player.formation_position)

    def test_apply_is_idempotent(self) -> None:
        """Applying the same formation twice yields identical coordinates."""
        self.engine.apply(self.team_id, "4-3-3")
        first = {p.id: p.formation_position for p in self.store.get_players(self.team_id)}

        self.engine.apply(self.team_id, "4-3-3")
        second = {p.id: p.formation_position for p in self.store.get_players(self.team_id)}

        self.assertEqual(first, second)

    def test_overflow_player_keeps_previous_coordinate(self) -> None:
        """Switching 4-4-2 -> 4-3-3 leaves the fourth midfielder where it was."""
        self.engine.apply(self.team_id, "4-4-2")
        before = self.store.get_player(self.ids["Midfielder 4"]).formation_position

        assignment = self.engine.apply(self.team_id, "4-3-3")

        self.assertIn(self.ids["Midfielder 4"], assignment.unassigned)
        self.assertEqual(self.store.get_player(self.ids["Midfielder 4"]).formation_position, before)

    def test_invalid_formation_performs_no_update(self) -> None:
        self.engine.apply(self.team_id, "4-4-2")
        before = {p.id: p.formation_position for p in self.store.get_players(self.team_id)}

        with self.assertRaises(InvalidFormationError):
            self.engine.apply(self.team_id, "Singles")

        self.assertEqual(self.store.get_team(self.team_id).formation, "4-4-2")
        after = {p.id: p.formation_position for p in self.store.get_players(self.team_id)}
        self.assertEqual(before, after)

    def test_apply_to_missing_team_raises(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            self.engine.apply("missing-team", "4-4-2")

    def test_apply_is_recorded_once(self) -> None:
        """The batch is committed as a single command."""
        self.engine.apply(self.team_id, "4-4-2")

        self.assertEqual(self.engine.command_log.get_command_history(),
                         ["Apply 4-4-2 (11 placements)"])


class TestBatchApplication(unittest.TestCase):
    """Test the store's batch update policy."""

    def test_missing_player_is_skipped(self) -> None:
        """A player deleted mid-operation is skipped; the rest still apply."""
        store = InMemoryRosterStore()
        team_id = store.create_team("Rovers", Sport.FOOTBALL, "coach-1")
        keeper_id = store.add_player(team_id, "Keeper", "Goalkeeper", 1, False)
        gone_id = store.add_player(team_id, "Gone", "Defender", 2, False)
        store.delete_player(gone_id)

        skipped = store.apply_formation(team_id, "4-4-2", [
            (gone_id, FieldPosition(20, 25)),
            (keeper_id, FieldPosition(50, 10)),
        ])

        self.assertEqual(skipped, [gone_id])
        self.assertEqual(store.get_player(keeper_id).formation_position, FieldPosition(50, 10))
        self.assertEqual(store.get_team(team_id).formation, "4-4-2")


if __name__ == "__main__":
    unittest.main()
