"""
Service factory for dependency injection.

This module wires the roster store, avatar storage and the formation services
together so every service shares one store and one command log.
"""
from dataclasses import dataclass
from typing import Optional

from ..utils import AppSettings
from .avatar_storage import AvatarStorage, LocalAvatarStorage
from .conflict_resolution import ConflictResolutionFlow
from .drag_controller import DragController
from .formation_engine import FormationEngine
from .persistence_service import PersistenceService
from .roster_commands import RosterCommandLog
from .roster_service import RosterService
from .roster_store import InMemoryRosterStore, RosterStore


@dataclass
class ServiceSuite:
    """All services for one formation-board session."""
    store: RosterStore
    avatar_storage: AvatarStorage
    command_log: RosterCommandLog
    roster: RosterService
    engine: FormationEngine
    controller: DragController


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        """Initialize factory with settings (defaults from the environment)."""
        self.settings = settings or AppSettings.load_from_env()
        self._avatar_storage: Optional[AvatarStorage] = None

    def create_store(self, load_from_disk: bool = False) -> InMemoryRosterStore:
        """
        Create the roster store.

        Args:
            load_from_disk: Load the configured data file if it exists
        """
        if load_from_disk:
            return PersistenceService.load_or_create(self.settings.data_file)
        return InMemoryRosterStore()

    def create_service_suite(self, store: Optional[RosterStore] = None) -> ServiceSuite:
        """
        Create a complete suite of services sharing one store.

        Args:
            store: Roster store to use (a new empty store if omitted)
        """
        store = store if store is not None else self.create_store()
        avatar_storage = self._get_avatar_storage()
        command_log = RosterCommandLog(store)

        return ServiceSuite(
            store=store,
            avatar_storage=avatar_storage,
            command_log=command_log,
            roster=RosterService(store, avatar_storage),
            engine=FormationEngine(store, command_log),
            controller=DragController(store, command_log, ConflictResolutionFlow()),
        )

    def configure_avatar_storage(self, storage: AvatarStorage) -> None:
        """Configure a custom avatar storage."""
        self._avatar_storage = storage

    def _get_avatar_storage(self) -> AvatarStorage:
        """Get singleton avatar storage."""
        if self._avatar_storage is None:
            self._avatar_storage = LocalAvatarStorage(self.settings.avatar_dir)
        return self._avatar_storage
