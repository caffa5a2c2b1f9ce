"""
Unit tests for the roster service and its validation rules.

Tests team creation, validated player edits, the field capacity guard on
add/edit and avatar clean-up on player changes.
"""
import os
import shutil
import tempfile
import unittest

from formation_board.errors import (
    CapacityExceededError, PlayerValidationError, RecordNotFoundError
)
from formation_board.models import Sport
from formation_board.services import (
    InMemoryRosterStore, JerseyNumberValidator, LocalAvatarStorage,
    PlayerDataValidator, RosterService, ServiceFactory
)
from formation_board.utils import AppSettings


class TestRosterService(unittest.TestCase):
    """Test cases for RosterService."""

    def setUp(self) -> None:
        """Set up test fixtures with a temporary avatar directory."""
        self.temp_dir = tempfile.mkdtemp()
        self.avatars = LocalAvatarStorage(os.path.join(self.temp_dir, "avatars"))
        self.service = RosterService(InMemoryRosterStore(), avatar_storage=self.avatars)
        self.team = self.service.create_team("  Spikers ", Sport.VOLLEYBALL, "coach-1")

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir)

    def _store_avatar(self) -> str:
        handle = self.avatars.get_upload_target(".png")
        self.avatars.write_upload(handle.ref, b"\x89PNG")
        return handle.ref

    def test_create_team(self) -> None:
        """Team names are trimmed and teams are listed per owner."""
        self.assertEqual(self.team.name, "Spikers")
        self.assertEqual(self.team.sport, Sport.VOLLEYBALL)
        self.assertIsNone(self.team.formation)
        self.assertEqual([t.id for t in self.service.get_teams("coach-1")], [self.team.id])
        self.assertEqual(self.service.get_teams("someone-else"), [])

    def test_create_team_requires_name_and_owner(self) -> None:
        with self.assertRaises(PlayerValidationError):
            self.service.create_team("   ", Sport.FOOTBALL, "coach-1")
        with self.assertRaises(PlayerValidationError):
            self.service.create_team("Rovers", Sport.FOOTBALL, "")

    def test_add_player(self) -> None:
        """Valid players are stored with a trimmed name."""
        player = self.service.add_player(self.team.id, " Ana ", "Setter", 4)

        self.assertEqual(player.name, "Ana")
        self.assertFalse(player.is_substitute)
        self.assertIsNone(player.formation_position)
        self.assertEqual(self.service.get_starters(self.team.id), [player])

    def test_add_player_rejects_invalid_data(self) -> None:
        """Bad names, numbers and positions are rejected."""
        with self.assertRaises(PlayerValidationError):
            self.service.add_player(self.team.id, "A", "Setter", 4)
        with self.assertRaises(PlayerValidationError):
            self.service.add_player(self.team.id, "Ana", "Setter", 0)
        with self.assertRaises(PlayerValidationError):
            self.service.add_player(self.team.id, "Ana", "Goalkeeper", 4)

        self.assertEqual(self.service.get_players(self.team.id), [])

    def test_add_player_to_missing_team(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            self.service.add_player("missing", "Ana", "Setter", 4)

    def test_add_starter_to_full_field(self) -> None:
        """A seventh volleyball starter is refused; a substitute is not."""
        for number in range(1, 7):
            self.service.add_player(self.team.id, f"Player {number}", "Outside Hitter", number)

        with self.assertRaises(CapacityExceededError):
            self.service.add_player(self.team.id, "Extra", "Libero", 7)

        bench = self.service.add_player(self.team.id, "Extra", "Libero", 7, is_substitute=True)
        self.assertEqual(self.service.get_substitutes(self.team.id), [bench])

    def test_promote_substitute_on_full_field(self) -> None:
        for number in range(1, 7):
            self.service.add_player(self.team.id, f"Player {number}", "Middle Blocker", number)
        bench = self.service.add_player(self.team.id, "Reserve", "Opposite", 8, is_substitute=True)

        with self.assertRaises(CapacityExceededError):
            self.service.update_player(bench.id, "Reserve", "Opposite", 8, False)

    def test_update_starter_on_full_field(self) -> None:
        """Editing an existing starter does not count against capacity."""
        ids = [self.service.add_player(self.team.id, f"Player {n}", "Setter", n).id
               for n in range(1, 7)]

        updated = self.service.update_player(ids[0], "Renamed", "Opposite", 11, False)

        self.assertEqual((updated.name, updated.position, updated.number),
                         ("Renamed", "Opposite", 11))

    def test_renumber_player(self) -> None:
        player = self.service.add_player(self.team.id, "Ana", "Setter", 4)

        self.assertEqual(self.service.renumber_player(player.id, 14).number, 14)

    def test_update_missing_player(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            self.service.update_player("missing", "Ana", "Setter", 4, False)

    def test_delete_player_releases_avatar(self) -> None:
        """Deleting a player removes its avatar blob."""
        ref = self._store_avatar()
        player = self.service.add_player(self.team.id, "Ana", "Setter", 4, avatar_ref=ref)
        self.assertEqual(self.service.get_avatar_url(player), f"/api/avatars/{ref}")

        removed = self.service.delete_player(player.id)

        self.assertEqual(removed.id, player.id)
        self.assertFalse(self.avatars.has_avatar(ref))
        self.assertEqual(self.service.get_players(self.team.id), [])

    def test_replace_avatar_releases_previous(self) -> None:
        old_ref = self._store_avatar()
        new_ref = self._store_avatar()
        player = self.service.add_player(self.team.id, "Ana", "Setter", 4, avatar_ref=old_ref)

        updated = self.service.update_player_avatar(player.id, new_ref)

        self.assertEqual(updated.avatar_ref, new_ref)
        self.assertFalse(self.avatars.has_avatar(old_ref))
        self.assertTrue(self.avatars.has_avatar(new_ref))

    def test_avatar_url_without_blob(self) -> None:
        player = self.service.add_player(self.team.id, "Ana", "Setter", 4)

        self.assertIsNone(self.service.get_avatar_url(player))


class TestServiceFactory(unittest.TestCase):
    """Test cases for ServiceFactory wiring."""

    def test_suite_shares_store_and_storage(self) -> None:
        temp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, temp_dir)
        storage = LocalAvatarStorage(temp_dir)
        factory = ServiceFactory(AppSettings(avatar_dir=temp_dir))
        factory.configure_avatar_storage(storage)

        suite = factory.create_service_suite()

        self.assertIs(suite.avatar_storage, storage)
        self.assertIs(suite.roster.store, suite.store)
        self.assertIs(suite.engine.command_log, suite.controller.command_log)


class TestPlayerValidators(unittest.TestCase):
    """Test cases for the player validation rules."""

    def test_jersey_number_range(self) -> None:
        validator = JerseyNumberValidator()

        self.assertTrue(validator.validate(1).is_valid)
        self.assertTrue(validator.validate(99).is_valid)
        self.assertFalse(validator.validate(100).is_valid)
        self.assertFalse(validator.validate("7").is_valid)
        self.assertFalse(validator.validate(True).is_valid)

    def test_player_data_collects_all_errors(self) -> None:
        result = PlayerDataValidator().validate(Sport.BADMINTON, "", "Setter", -1)

        self.assertFalse(result.is_valid)
        self.assertEqual(len(result.errors), 3)
        self.assertIn("Player name is required", result.message)


if __name__ == "__main__":
    unittest.main()
