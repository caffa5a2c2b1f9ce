"""
Utilities package for the Formation Board.

This package contains catalog constants, settings, logging setup and record
helpers used throughout the application.
"""
from .record_utils import now_ts, new_record_id
from .constants import (
    APP_TITLE, MIN_JERSEY_NUMBER, MAX_JERSEY_NUMBER,
    SPORT_POSITIONS, SPORT_FORMATIONS, MAX_PLAYERS_ON_FIELD, FORMATION_SLOTS
)
from .settings import AppSettings
from .logging_config import configure_logging

__all__ = [
    "now_ts", "new_record_id", "APP_TITLE", "MIN_JERSEY_NUMBER",
    "MAX_JERSEY_NUMBER", "SPORT_POSITIONS", "SPORT_FORMATIONS",
    "MAX_PLAYERS_ON_FIELD", "FORMATION_SLOTS", "AppSettings", "configure_logging"
]
