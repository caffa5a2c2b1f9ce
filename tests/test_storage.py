"""
Unit tests for avatar storage and roster persistence.
"""
import json
import os
import shutil
import tempfile
import unittest

from formation_board.models import FieldPosition, Sport
from formation_board.services import (
    InMemoryRosterStore, LocalAvatarStorage, PersistenceService
)


class TestLocalAvatarStorage(unittest.TestCase):
    """Test cases for LocalAvatarStorage."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()
        self.storage = LocalAvatarStorage(os.path.join(self.temp_dir, "avatars"))

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir)

    def test_upload_target_and_url(self) -> None:
        """A written upload resolves to a URL under the prefix."""
        handle = self.storage.get_upload_target("PNG")

        self.assertTrue(handle.ref.endswith(".png"))
        self.assertIsNone(self.storage.resolve_avatar_url(handle.ref))

        self.storage.write_upload(handle.ref, b"image-bytes")

        self.assertEqual(self.storage.resolve_avatar_url(handle.ref), f"/api/avatars/{handle.ref}")
        with open(handle.path, "rb") as f:
            self.assertEqual(f.read(), b"image-bytes")

    def test_delete_is_idempotent(self) -> None:
        handle = self.storage.get_upload_target(".png")
        self.storage.write_upload(handle.ref, b"x")

        self.storage.delete_avatar(handle.ref)
        self.storage.delete_avatar(handle.ref)

        self.assertFalse(self.storage.has_avatar(handle.ref))

    def test_rejects_path_like_references(self) -> None:
        """References cannot escape the avatar directory."""
        with self.assertRaises(ValueError):
            self.storage.delete_avatar("../settings.json")
        with self.assertRaises(ValueError):
            self.storage.write_upload("../../evil", b"x")
        self.assertFalse(self.storage.has_avatar("../settings.json"))
        self.assertIsNone(self.storage.resolve_avatar_url(None))


class TestPersistenceService(unittest.TestCase):
    """Test cases for PersistenceService."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, "data", "roster.json")

        self.store = InMemoryRosterStore()
        self.team_id = self.store.create_team("Rovers", Sport.FOOTBALL, "coach-1")
        self.player_id = self.store.add_player(self.team_id, "Keeper", "Goalkeeper", 1, False)
        self.store.apply_formation(self.team_id, "4-4-2", [(self.player_id, FieldPosition(50, 10))])
        self.store.add_player(self.team_id, "Reserve", "Forward", 12, True)

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir)

    def test_save_and_load(self) -> None:
        """A saved store loads back with the same teams, players and coordinates."""
        PersistenceService.save_store_to_file(self.store, self.file_path)

        loaded = PersistenceService.load_store_from_file(self.file_path)

        self.assertEqual(loaded.get_team(self.team_id), self.store.get_team(self.team_id))
        self.assertEqual(loaded.get_players(self.team_id), self.store.get_players(self.team_id))
        self.assertEqual(loaded.get_player(self.player_id).formation_position,
                         FieldPosition(50, 10))
        self.assertFalse(os.path.exists(f"{self.file_path}.tmp"))

    def test_saved_file_is_json(self) -> None:
        PersistenceService.save_store_to_file(self.store, self.file_path)

        with open(self.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        self.assertEqual(len(data["teams"]), 1)
        self.assertEqual(len(data["players"]), 2)

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PersistenceService.load_store_from_file(self.file_path)

    def test_load_or_create_starts_empty(self) -> None:
        store = PersistenceService.load_or_create(self.file_path)

        self.assertEqual(store.get_teams("coach-1"), [])

    def test_backup(self) -> None:
        path = PersistenceService.backup(self.store, os.path.join(self.temp_dir, "backup"))

        self.assertIsNotNone(path)
        self.assertTrue(os.path.exists(path))


if __name__ == "__main__":
    unittest.main()
