"""
Roster store for the Formation Board application.

RosterStore is the contract the formation core consumes; InMemoryRosterStore is
the reference implementation used by the web application and the tests.
Every call is atomic with respect to readers.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import RecordNotFoundError
from ..models import FieldPosition, Player, Sport, Team
from ..utils import new_record_id, now_ts

logger = logging.getLogger(__name__)

Placement = Tuple[str, FieldPosition]


class RosterStore(ABC):
    """Abstract roster store - teams and players with simple CRUD operations."""

    @abstractmethod
    def get_teams(self, owner_id: str) -> List[Team]:
        pass

    @abstractmethod
    def get_team(self, team_id: str) -> Team:
        pass

    @abstractmethod
    def get_players(self, team_id: str) -> List[Player]:
        pass

    @abstractmethod
    def get_player(self, player_id: str) -> Player:
        pass

    @abstractmethod
    def create_team(self, name: str, sport: Sport, owner_id: str) -> str:
        pass

    @abstractmethod
    def add_player(self, team_id: str, name: str, position: str, number: int,
                   is_substitute: bool, avatar_ref: Optional[str] = None) -> str:
        pass

    @abstractmethod
    def update_player(self, player_id: str, name: str, position: str,
                      number: int, is_substitute: bool) -> None:
        pass

    @abstractmethod
    def update_player_position(self, player_id: str, position: FieldPosition) -> None:
        pass

    @abstractmethod
    def set_substitute_status(self, player_id: str, is_substitute: bool,
                              position: Optional[FieldPosition] = None) -> None:
        pass

    @abstractmethod
    def update_player_number(self, player_id: str, number: int) -> None:
        pass

    @abstractmethod
    def update_player_avatar(self, player_id: str, avatar_ref: Optional[str]) -> Optional[str]:
        """Replace the avatar reference and return the previous one."""
        pass

    @abstractmethod
    def apply_formation(self, team_id: str, formation_name: str,
                        placements: Sequence[Placement]) -> List[str]:
        """Set the team formation and player coordinates; return skipped player ids."""
        pass

    @abstractmethod
    def delete_player(self, player_id: str) -> Player:
        """Delete a player and return the removed record."""
        pass


class InMemoryRosterStore(RosterStore):
    """
    Thread-safe in-memory roster store.

    Records are copied on the way in and out, so callers only ever hold
    snapshots and never observe a half-applied mutation.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._teams: Dict[str, Team] = {}
        self._players: Dict[str, Player] = {}

    # ==================== Queries ==================== #

    def get_teams(self, owner_id: str) -> List[Team]:
        with self._lock:
            teams = [t for t in self._teams.values() if t.owner_id == owner_id]
            return [replace(t) for t in sorted(teams, key=lambda t: t.created_at)]

    def get_team(self, team_id: str) -> Team:
        with self._lock:
            return replace(self._require_team(team_id))

    def get_players(self, team_id: str) -> List[Player]:
        with self._lock:
            # Insertion order is the roster order
            return [p.copy() for p in self._players.values() if p.team_id == team_id]

    def get_player(self, player_id: str) -> Player:
        with self._lock:
            return self._require_player(player_id).copy()

    # ==================== Mutations ==================== #

    def create_team(self, name: str, sport: Sport, owner_id: str) -> str:
        team = Team(id=new_record_id(), name=name, sport=sport,
                    owner_id=owner_id, created_at=now_ts())
        with self._lock:
            self._teams[team.id] = team
        logger.info("Created team %s (%s) for owner %s", team.id, sport.value, owner_id)
        return team.id

    def add_player(self, team_id: str, name: str, position: str, number: int,
                   is_substitute: bool, avatar_ref: Optional[str] = None) -> str:
        with self._lock:
            self._require_team(team_id)
            player = Player(
                id=new_record_id(),
                team_id=team_id,
                name=name,
                position=position,
                number=number,
                is_substitute=is_substitute,
                avatar_ref=avatar_ref,
            )
            self._players[player.id] = player
        logger.info("Added player %s #%d to team %s", player.id, number, team_id)
        return player.id

    def update_player(self, player_id: str, name: str, position: str,
                      number: int, is_substitute: bool) -> None:
        with self._lock:
            player = self._require_player(player_id)
            player.name = name
            player.position = position
            player.number = number
            player.is_substitute = is_substitute

    def update_player_position(self, player_id: str, position: FieldPosition) -> None:
        with self._lock:
            self._require_player(player_id).formation_position = position

    def set_substitute_status(self, player_id: str, is_substitute: bool,
                              position: Optional[FieldPosition] = None) -> None:
        with self._lock:
            player = self._require_player(player_id)
            player.is_substitute = is_substitute
            if position is not None:
                player.formation_position = position

    def update_player_number(self, player_id: str, number: int) -> None:
        with self._lock:
            self._require_player(player_id).number = number

    def update_player_avatar(self, player_id: str, avatar_ref: Optional[str]) -> Optional[str]:
        with self._lock:
            player = self._require_player(player_id)
            previous = player.avatar_ref
            player.avatar_ref = avatar_ref
            return previous

    def apply_formation(self, team_id: str, formation_name: str,
                        placements: Sequence[Placement]) -> List[str]:
        """
        Apply a formation batch in one locked pass.

        A player deleted since the batch was planned is skipped and logged;
        the remaining placements still apply.

        Raises:
            RecordNotFoundError: If the team no longer exists
        """
        skipped = []
        with self._lock:
            team = self._require_team(team_id)
            team.formation = formation_name
            for player_id, position in placements:
                player = self._players.get(player_id)
                if player is None:
                    logger.warning("Player %s not found while applying %s; skipping",
                                   player_id, formation_name)
                    skipped.append(player_id)
                    continue
                player.formation_position = position
        return skipped

    def delete_player(self, player_id: str) -> Player:
        with self._lock:
            player = self._require_player(player_id)
            del self._players[player_id]
        logger.info("Deleted player %s from team %s", player_id, player.team_id)
        return player

    # ==================== Snapshots ==================== #

    def to_json(self) -> dict:
        """Convert the whole store to a JSON-serializable dictionary."""
        with self._lock:
            return {
                "teams": [t.to_dict() for t in self._teams.values()],
                "players": [p.to_dict() for p in self._players.values()],
            }

    @classmethod
    def from_json(cls, data: dict) -> "InMemoryRosterStore":
        """Create a store from a dictionary produced by to_json."""
        store = cls()
        for team_data in data.get("teams", []):
            team = Team.from_dict(team_data)
            store._teams[team.id] = team
        for player_data in data.get("players", []):
            player = Player.from_dict(player_data)
            store._players[player.id] = player
        return store

    def _require_team(self, team_id: str) -> Team:
        team = self._teams.get(team_id)
        if team is None:
            raise RecordNotFoundError("team", team_id)
        return team

    def _require_player(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise RecordNotFoundError("player", player_id)
        return player
