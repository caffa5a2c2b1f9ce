"""
Constants for the Formation Board application.

This module contains the static catalog data and configuration defaults used
throughout the application.
"""

# Application metadata
APP_TITLE = "Formation Board"

# Jersey numbers are sport independent
MIN_JERSEY_NUMBER = 1
MAX_JERSEY_NUMBER = 99

# Player name limits
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100

# Field coordinates are percentages of the field bounds
MIN_COORDINATE = 0.0
MAX_COORDINATE = 100.0

# Position labels per sport, in display order
SPORT_POSITIONS = {
    "badminton": ["Singles", "Doubles Front", "Doubles Back"],
    "volleyball": ["Setter", "Outside Hitter", "Middle Blocker", "Opposite", "Libero"],
    "football": ["Goalkeeper", "Defender", "Midfielder", "Forward"],
}

# Formation names per sport
SPORT_FORMATIONS = {
    "badminton": ["Singles", "2-Player"],
    "volleyball": ["6-Player Standard", "5-1", "4-2"],
    "football": ["4-4-2", "4-3-3", "3-5-2"],
}

# Maximum starters on the field at the same time
MAX_PLAYERS_ON_FIELD = {
    "badminton": 2,
    "volleyball": 6,
    "football": 11,
}

# Slot coordinates per formation: position label -> ordered (x, y) list
FORMATION_SLOTS = {
    "Singles": {
        "Singles": [(50, 50)],
    },
    "2-Player": {
        "Doubles Front": [(30, 50)],
        "Doubles Back": [(70, 50)],
    },
    "6-Player Standard": {
        "Outside Hitter": [(20, 30), (20, 70)],
        "Middle Blocker": [(40, 30), (40, 70)],
        "Setter": [(60, 30)],
        "Opposite": [(60, 70)],
    },
    "5-1": {
        "Outside Hitter": [(30, 30), (30, 70)],
        "Middle Blocker": [(50, 30), (50, 70)],
        "Setter": [(70, 30)],
        "Opposite": [(70, 70)],
    },
    "4-2": {
        "Outside Hitter": [(25, 30), (25, 70)],
        "Middle Blocker": [(45, 30), (45, 70)],
        "Setter": [(70, 30), (70, 70)],
    },
    "4-4-2": {
        "Goalkeeper": [(50, 10)],
        "Defender": [(20, 25), (40, 25), (60, 25), (80, 25)],
        "Midfielder": [(20, 55), (40, 55), (60, 55), (80, 55)],
        "Forward": [(35, 85), (65, 85)],
    },
    "4-3-3": {
        "Goalkeeper": [(50, 10)],
        "Defender": [(20, 25), (40, 25), (60, 25), (80, 25)],
        "Midfielder": [(30, 55), (50, 55), (70, 55)],
        "Forward": [(25, 85), (50, 85), (75, 85)],
    },
    "3-5-2": {
        "Goalkeeper": [(50, 10)],
        "Defender": [(30, 25), (50, 25), (70, 25)],
        "Midfielder": [(20, 55), (35, 55), (50, 55), (65, 55), (80, 55)],
        "Forward": [(40, 85), (60, 85)],
    },
}

# Runtime defaults (overridable through the environment, see settings.py)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_DATA_FILE = "data/formation_board.json"
DEFAULT_AVATAR_DIR = "avatars"
DEFAULT_LOG_LEVEL = "INFO"
