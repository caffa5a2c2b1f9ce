"""
Formation Board

Roster management for small sports teams (football, volleyball, badminton)
with a formation arrangement engine: players are placed on the named slots of
a formation, dragged between the bench and the field under capacity and
jersey number rules, and duplicate numbers are resolved by renumbering.
"""
from .models import Player, Team, Sport, FieldPosition, FormationCatalog
from .services import (
    InMemoryRosterStore, FormationEngine, DragController, RosterService,
    ServiceFactory, arrange_formation
)
from .ui import create_app, run_web_app
from .utils import APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "Team", "Sport", "FieldPosition", "FormationCatalog",
    "InMemoryRosterStore", "FormationEngine", "DragController", "RosterService",
    "ServiceFactory", "arrange_formation", "create_app", "run_web_app", "APP_TITLE"
]
