"""
Persistence service for the Formation Board application.

This module handles saving and loading the roster store to/from JSON files.
"""
import datetime
import json
import logging
import os
from typing import Optional

from .roster_store import InMemoryRosterStore

logger = logging.getLogger(__name__)


class PersistenceService:
    """Service for persisting the in-memory roster store to JSON files."""

    @staticmethod
    def save_store_to_file(store: InMemoryRosterStore, file_path: str) -> None:
        """
        Save all teams and players to a JSON file.

        Args:
            store: The roster store to save
            file_path: Path where to save the file

        Raises:
            OSError: If the file cannot be written
        """
        directory = os.path.dirname(file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        snapshot = store.to_json()
        # Write beside the target and swap, so readers never see a partial file
        temp_path = f"{file_path}.tmp"
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2)
        os.replace(temp_path, file_path)
        logger.info("Saved %d team(s), %d player(s) to %s",
                    len(snapshot["teams"]), len(snapshot["players"]), file_path)

    @staticmethod
    def load_store_from_file(file_path: str) -> InMemoryRosterStore:
        """
        Load a roster store from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            InMemoryRosterStore populated from the file

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
            KeyError: If a record is missing a required field
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Roster file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return InMemoryRosterStore.from_json(data)

    @staticmethod
    def load_or_create(file_path: str) -> InMemoryRosterStore:
        """Load the store if the file exists, otherwise start empty."""
        if not os.path.exists(file_path):
            logger.info("No roster file at %s; starting empty", file_path)
            return InMemoryRosterStore()
        return PersistenceService.load_store_from_file(file_path)

    @staticmethod
    def backup(store: InMemoryRosterStore, backup_dir: str = "backup") -> Optional[str]:
        """
        Save a timestamped copy of the store.

        Returns:
            Path to saved file, or None if the save failed
        """
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = os.path.join(backup_dir, f"roster_backup_{timestamp}.json")
        try:
            PersistenceService.save_store_to_file(store, file_path)
        except OSError as e:
            logger.error("Backup to %s failed: %s", file_path, e)
            return None
        return file_path
