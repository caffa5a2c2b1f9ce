"""
Record helpers for the Formation Board application.

Identifiers and timestamps for teams, players and avatar blobs.
"""
import time
import uuid


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()


def new_record_id() -> str:
    """Generate an opaque identifier for a stored record."""
    return uuid.uuid4().hex
