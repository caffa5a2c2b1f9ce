"""
Roster service for the Formation Board application.

This module provides the validated team and player operations behind the
roster screens: creating teams, adding, editing and deleting players, and
managing player avatars.
"""
import logging
from typing import List, Optional

from ..errors import CapacityExceededError, PlayerValidationError
from ..models import Player, Sport, Team
from .avatar_storage import AvatarStorage
from .formation_validator import FieldCapacityValidator, PlayerDataValidator
from .roster_store import RosterStore

logger = logging.getLogger(__name__)


class RosterService:
    """
    Service class for managing teams and players.

    Validates every edit against the team's sport before it reaches the
    roster store, and keeps avatar blobs in step with player records.
    """

    def __init__(self, store: RosterStore, avatar_storage: Optional[AvatarStorage] = None,
                 validator: Optional[PlayerDataValidator] = None):
        """
        Initialize RosterService.

        Args:
            store: Roster store holding teams and players
            avatar_storage: Optional blob storage for player avatars
            validator: Optional custom player validator
        """
        self.store = store
        self.avatar_storage = avatar_storage
        self.validator = validator or PlayerDataValidator()

    # ==================== Teams ==================== #

    def create_team(self, name: str, sport: Sport, owner_id: str) -> Team:
        """
        Create a team for an owner.

        Raises:
            PlayerValidationError: If the name or owner is missing
        """
        name = (name or "").strip()
        if not name:
            raise PlayerValidationError("Team name is required")
        if not owner_id:
            raise PlayerValidationError("Team owner is required")

        team_id = self.store.create_team(name, sport, owner_id)
        return self.store.get_team(team_id)

    def get_teams(self, owner_id: str) -> List[Team]:
        return self.store.get_teams(owner_id)

    def get_team(self, team_id: str) -> Team:
        return self.store.get_team(team_id)

    def get_players(self, team_id: str) -> List[Player]:
        return self.store.get_players(team_id)

    def get_starters(self, team_id: str) -> List[Player]:
        return [p for p in self.store.get_players(team_id) if p.is_starter]

    def get_substitutes(self, team_id: str) -> List[Player]:
        return [p for p in self.store.get_players(team_id) if p.is_substitute]

    # ==================== Players ==================== #

    def add_player(self, team_id: str, name: str, position: str, number: int,
                   is_substitute: bool = False, avatar_ref: Optional[str] = None) -> Player:
        """
        Add a validated player to a team.

        Raises:
            PlayerValidationError: If player data is invalid
            CapacityExceededError: If a starter is added to a full field
            RecordNotFoundError: If the team does not exist
        """
        team = self.store.get_team(team_id)
        self._validate(team.sport, name, position, number)
        if not is_substitute:
            self._check_capacity(team, exclude_player_id=None)

        player_id = self.store.add_player(
            team_id, name.strip(), position, number, is_substitute, avatar_ref
        )
        return self.store.get_player(player_id)

    def update_player(self, player_id: str, name: str, position: str,
                      number: int, is_substitute: bool) -> Player:
        """
        Edit a player's attributes.

        Raises:
            PlayerValidationError: If player data is invalid
            CapacityExceededError: If a substitute is promoted onto a full field
            RecordNotFoundError: If the player does not exist
        """
        current = self.store.get_player(player_id)
        team = self.store.get_team(current.team_id)
        self._validate(team.sport, name, position, number)
        if current.is_substitute and not is_substitute:
            self._check_capacity(team, exclude_player_id=player_id)

        self.store.update_player(player_id, name.strip(), position, number, is_substitute)
        return self.store.get_player(player_id)

    def renumber_player(self, player_id: str, number: int) -> Player:
        """Give a player a new jersey number."""
        current = self.store.get_player(player_id)
        return self.update_player(player_id, current.name, current.position,
                                  number, current.is_substitute)

    def update_player_avatar(self, player_id: str, avatar_ref: Optional[str]) -> Player:
        """
        Point a player at a new avatar and release the previous blob.

        Raises:
            RecordNotFoundError: If the player does not exist
        """
        previous = self.store.update_player_avatar(player_id, avatar_ref)
        if previous and previous != avatar_ref:
            self._release_avatar(previous)
        return self.store.get_player(player_id)

    def delete_player(self, player_id: str) -> Player:
        """
        Delete a player and release its avatar blob.

        Raises:
            RecordNotFoundError: If the player does not exist
        """
        removed = self.store.delete_player(player_id)
        if removed.avatar_ref:
            self._release_avatar(removed.avatar_ref)
        return removed

    def get_avatar_url(self, player: Player) -> Optional[str]:
        if self.avatar_storage is None:
            return None
        return self.avatar_storage.resolve_avatar_url(player.avatar_ref)

    def _validate(self, sport: Sport, name: str, position: str, number: int) -> None:
        result = self.validator.validate(sport, name, position, number)
        if not result.is_valid:
            raise PlayerValidationError(f"Player validation failed: {result.message}")

    def _check_capacity(self, team: Team, exclude_player_id: Optional[str]) -> None:
        starters = [p for p in self.get_starters(team.id) if p.id != exclude_player_id]
        rule = FieldCapacityValidator(team.sport)
        if not rule.validate(starters).is_valid:
            raise CapacityExceededError(rule.max_players)

    def _release_avatar(self, ref: str) -> None:
        if self.avatar_storage is None:
            return
        try:
            self.avatar_storage.delete_avatar(ref)
        except (OSError, ValueError) as e:
            # The record change already committed
            logger.warning("Could not delete avatar %s: %s", ref, e)
