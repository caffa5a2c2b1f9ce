"""
Services package for the Formation Board.

This package contains service classes that handle business logic: the roster
store, the formation engine, the drag controller and conflict resolution.
"""
from .roster_store import RosterStore, InMemoryRosterStore
from .avatar_storage import AvatarStorage, LocalAvatarStorage, UploadHandle
from .formation_validator import (
    ValidationResult, PlayerDataValidator, JerseyNumberValidator,
    FieldCapacityValidator, DuplicateNumberValidator
)
from .roster_commands import (
    RosterCommand, MovePlayerCommand, SetSubstituteCommand,
    RenumberPlayerCommand, ApplyFormationCommand, RosterCommandLog
)
from .formation_engine import FormationEngine, arrange_formation
from .conflict_resolution import ConflictResolutionFlow, ResolutionChoice, ResolutionProposal
from .drag_controller import DragController
from .roster_service import RosterService
from .persistence_service import PersistenceService
from .service_factory import ServiceFactory, ServiceSuite

__all__ = [
    "RosterStore", "InMemoryRosterStore", "AvatarStorage", "LocalAvatarStorage",
    "UploadHandle", "ValidationResult", "PlayerDataValidator", "JerseyNumberValidator",
    "FieldCapacityValidator", "DuplicateNumberValidator", "RosterCommand",
    "MovePlayerCommand", "SetSubstituteCommand", "RenumberPlayerCommand",
    "ApplyFormationCommand", "RosterCommandLog", "FormationEngine",
    "arrange_formation", "ConflictResolutionFlow", "ResolutionChoice",
    "ResolutionProposal", "DragController", "RosterService",
    "PersistenceService", "ServiceFactory", "ServiceSuite"
]
