"""
Web application module for the Formation Board.

This module contains the Flask web server that provides the JSON API a browser
front-end drives: teams and rosters, formation selection, drag and drop
between bench and field, and jersey number conflict resolution.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, send_from_directory, session

from ..errors import (
    CapacityExceededError, ConfigurationError, InvalidFormationError,
    InvalidTransitionError, PlayerValidationError, RecordNotFoundError,
    ResolutionRejectedError
)
from ..models import DropBox, FormationCatalog, Player, Sport, User
from ..services import (
    LocalAvatarStorage, PersistenceService, ResolutionChoice, ServiceFactory,
    ServiceSuite
)
from ..utils import AppSettings, configure_logging

logger = logging.getLogger(__name__)

SPORT_NAMES = [sport.value for sport in Sport]


class WebAppState:
    """
    State holder for the web application.

    One formation-board session per server: a single roster store, a single
    drag controller and the signed-in user kept in the Flask session.
    """

    def __init__(self, settings: AppSettings, factory: Optional[ServiceFactory] = None,
                 load_from_disk: bool = False):
        self.settings = settings
        self.factory = factory or ServiceFactory(settings)
        store = self.factory.create_store(load_from_disk=load_from_disk)
        self.services: ServiceSuite = self.factory.create_service_suite(store)

    def reset_services(self, store) -> None:
        """Rebuild all services around a newly loaded store."""
        self.services = self.factory.create_service_suite(store)


def create_app(settings: Optional[AppSettings] = None,
               factory: Optional[ServiceFactory] = None,
               load_from_disk: bool = False) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        settings: Application settings (loaded from the environment if omitted)
        factory: Optional service factory, e.g. with a custom avatar storage
        load_from_disk: Load the roster from the configured data file

    Returns:
        Configured Flask application instance
    """
    settings = settings or AppSettings.load_from_env()
    # API only; nothing on disk is exposed as a static file
    app = Flask(__name__, static_folder=None)
    app.secret_key = settings.secret_key
    app_state = WebAppState(settings, factory, load_from_disk)
    app.extensions["formation_board"] = app_state

    def _services() -> ServiceSuite:
        return app_state.services

    def _error(message: str, status: int, **extra: Any):
        return jsonify({"success": False, "error": message, **extra}), status

    def _current_user() -> Optional[User]:
        data = session.get("user")
        return User.from_dict(data) if data else None

    def _player_data(player: Player) -> Dict[str, Any]:
        data = player.to_dict()
        data["avatar_url"] = _services().roster.get_avatar_url(player)
        return data

    def _owns_team(team_id: str) -> bool:
        user = _current_user()
        return user is not None and _services().roster.get_team(team_id).owner_id == user.id

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(e: ConfigurationError):
        """Catalog bugs are fatal for the request and always logged."""
        logger.exception("Configuration error: %s", e)
        return _error(f"Configuration error: {e}", 500)

    # ==================== Session ==================== #

    @app.route("/api/session", methods=["POST"])
    def login():
        """Sign an operator in. Credentials are checked by an outside provider."""
        data = request.get_json(silent=True) or {}
        email = (data.get("email") or "").strip()
        if not email:
            return _error("Email is required", 400)
        user = User(id=data.get("id") or email, email=email, name=(data.get("name") or "").strip())
        session["user"] = user.to_dict()
        return jsonify({"success": True, "user": user.to_dict()})

    @app.route("/api/session", methods=["GET"])
    def get_session():
        user = _current_user()
        return jsonify({"success": True, "user": user.to_dict() if user else None})

    @app.route("/api/session", methods=["DELETE"])
    def logout():
        session.pop("user", None)
        _services().controller.reset()
        _services().command_log.clear_history()
        return jsonify({"success": True})

    # ==================== Catalog ==================== #

    @app.route("/api/catalog/<sport_name>", methods=["GET"])
    def get_catalog(sport_name: str):
        """Get positions, formations and field capacity for a sport."""
        if sport_name not in SPORT_NAMES:
            return _error(f"Unknown sport: {sport_name}", 404)
        sport = Sport(sport_name)
        return jsonify({
            "success": True,
            "sport": sport.value,
            "positions": FormationCatalog.positions_for(sport),
            "formations": FormationCatalog.formations_for(sport),
            "max_players": FormationCatalog.capacity_for(sport),
        })

    @app.route("/api/formations/<formation_name>/slots", methods=["GET"])
    def get_formation_slots(formation_name: str):
        try:
            slots = FormationCatalog.slot_table_for(formation_name)
        except InvalidFormationError as e:
            return _error(str(e), 404)
        return jsonify({
            "success": True,
            "formation": formation_name,
            "slots": {label: [p.to_dict() for p in points] for label, points in slots.items()},
        })

    # ==================== Teams ==================== #

    @app.route("/api/teams", methods=["GET"])
    def get_teams():
        user = _current_user()
        if user is None:
            return _error("Not signed in", 401)
        teams = _services().roster.get_teams(user.id)
        return jsonify({"success": True, "teams": [t.to_dict() for t in teams]})

    @app.route("/api/teams", methods=["POST"])
    def create_team():
        user = _current_user()
        if user is None:
            return _error("Not signed in", 401)
        data = request.get_json(silent=True) or {}
        sport_name = (data.get("sport") or "").strip().lower()
        if sport_name not in SPORT_NAMES:
            return _error(f"Sport must be one of: {', '.join(SPORT_NAMES)}", 400)
        try:
            team = _services().roster.create_team(data.get("name", ""), Sport(sport_name), user.id)
        except PlayerValidationError as e:
            return _error(str(e), 400)
        return jsonify({"success": True, "team": team.to_dict()}), 201

    @app.route("/api/teams/<team_id>/players", methods=["GET"])
    def get_players(team_id: str):
        try:
            if not _owns_team(team_id):
                return _error("Team not found", 404)
            players = _services().roster.get_players(team_id)
        except RecordNotFoundError:
            return _error("Team not found", 404)
        return jsonify({
            "success": True,
            "starters": [_player_data(p) for p in players if p.is_starter],
            "substitutes": [_player_data(p) for p in players if p.is_substitute],
            "count": len(players),
        })

    @app.route("/api/teams/<team_id>/players", methods=["POST"])
    def add_player(team_id: str):
        data = request.get_json(silent=True) or {}
        try:
            if not _owns_team(team_id):
                return _error("Team not found", 404)
            player = _services().roster.add_player(
                team_id,
                name=data.get("name", ""),
                position=data.get("position", ""),
                number=data.get("number"),
                is_substitute=bool(data.get("is_substitute", False)),
                avatar_ref=data.get("avatar_ref"),
            )
        except RecordNotFoundError:
            return _error("Team not found", 404)
        except (PlayerValidationError, CapacityExceededError) as e:
            return _error(str(e), 400)
        return jsonify({"success": True, "player": _player_data(player)}), 201

    @app.route("/api/teams/<team_id>/formation", methods=["POST"])
    def apply_formation(team_id: str):
        """Apply a formation: place every starter on its slot in one batch."""
        data = request.get_json(silent=True) or {}
        formation_name = data.get("formation", "")
        try:
            if not _owns_team(team_id):
                return _error("Team not found", 404)
            assignment = _services().engine.apply(team_id, formation_name)
        except RecordNotFoundError:
            return _error("Team not found", 404)
        except InvalidFormationError as e:
            logger.error("Rejected formation request: %s", e)
            return _error(str(e), 400)
        return jsonify({"success": True, "assignment": assignment.to_dict()})

    # ==================== Players ==================== #

    @app.route("/api/players/<player_id>", methods=["PUT"])
    def update_player(player_id: str):
        """Edit a player (opened by double-clicking a player card)."""
        data = request.get_json(silent=True) or {}
        try:
            current = _services().store.get_player(player_id)
            if not _owns_team(current.team_id):
                return _error("Player not found", 404)
            player = _services().roster.update_player(
                player_id,
                name=data.get("name", current.name),
                position=data.get("position", current.position),
                number=data.get("number", current.number),
                is_substitute=bool(data.get("is_substitute", current.is_substitute)),
            )
        except RecordNotFoundError:
            return _error("Player not found", 404)
        except (PlayerValidationError, CapacityExceededError) as e:
            return _error(str(e), 400)
        return jsonify({"success": True, "player": _player_data(player)})

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        try:
            current = _services().store.get_player(player_id)
            if not _owns_team(current.team_id):
                return _error("Player not found", 404)
            removed = _services().roster.delete_player(player_id)
        except RecordNotFoundError:
            return _error("Player not found", 404)
        return jsonify({"success": True, "message": f"Player '{removed.name}' deleted"})

    @app.route("/api/players/<player_id>/avatar", methods=["PUT"])
    def update_player_avatar(player_id: str):
        data = request.get_json(silent=True) or {}
        try:
            current = _services().store.get_player(player_id)
            if not _owns_team(current.team_id):
                return _error("Player not found", 404)
            player = _services().roster.update_player_avatar(player_id, data.get("avatar_ref"))
        except RecordNotFoundError:
            return _error("Player not found", 404)
        return jsonify({"success": True, "player": _player_data(player)})

    # ==================== Avatars ==================== #

    def _local_storage() -> Optional[LocalAvatarStorage]:
        storage = _services().avatar_storage
        return storage if isinstance(storage, LocalAvatarStorage) else None

    @app.route("/api/avatars/upload-target", methods=["POST"])
    def get_upload_target():
        storage = _local_storage()
        if storage is None:
            return _error("Avatar uploads are not served by this server", 404)
        data = request.get_json(silent=True) or {}
        try:
            handle = storage.get_upload_target(data.get("extension", ""))
        except ValueError as e:
            return _error(str(e), 400)
        return jsonify({
            "success": True,
            "ref": handle.ref,
            "upload_url": f"{storage.url_prefix}/{handle.ref}",
        })

    @app.route("/api/avatars/<ref>", methods=["PUT"])
    def upload_avatar(ref: str):
        storage = _local_storage()
        if storage is None:
            return _error("Avatar uploads are not served by this server", 404)
        try:
            storage.write_upload(ref, request.get_data())
        except ValueError as e:
            return _error(str(e), 400)
        return jsonify({"success": True, "ref": ref})

    @app.route("/api/avatars/<ref>", methods=["GET"])
    def get_avatar(ref: str):
        storage = _local_storage()
        if storage is None or not storage.has_avatar(ref):
            return _error("Avatar not found", 404)
        return send_from_directory(str(Path(storage.directory).resolve()), ref)

    # ==================== Drag and drop ==================== #

    @app.route("/api/drag/state", methods=["GET"])
    def get_drag_state():
        return jsonify({"success": True, **_services().controller.to_dict()})

    @app.route("/api/drag/start", methods=["POST"])
    def start_drag():
        data = request.get_json(silent=True) or {}
        try:
            current = _services().store.get_player(data.get("player_id", ""))
            if not _owns_team(current.team_id):
                return _error("Player not found", 404)
            drag_session = _services().controller.start_drag(current.id)
        except RecordNotFoundError:
            return _error("Player not found", 404)
        except InvalidTransitionError as e:
            return _error(str(e), 409)
        return jsonify({"success": True, "drag_session": drag_session.to_dict()})

    @app.route("/api/drag/drop-field", methods=["POST"])
    def drop_on_field():
        """Drop the dragged player on the field at the pointer location."""
        data = request.get_json(silent=True) or {}
        try:
            box = DropBox.from_dict(data.get("box") or {})
            result = _services().controller.drop_on_field(
                float(data["pointer_x"]), float(data["pointer_y"]), box
            )
        except (KeyError, TypeError, ValueError) as e:
            _services().controller.cancel_drag()
            return _error(f"Invalid drop: {e}", 400)
        except RecordNotFoundError:
            return _error("Player not found", 404)
        return jsonify({"success": result.error is None, **result.to_dict()})

    @app.route("/api/drag/drop-bench", methods=["POST"])
    def drop_on_bench():
        try:
            result = _services().controller.drop_on_bench()
        except RecordNotFoundError:
            return _error("Player not found", 404)
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/drag/cancel", methods=["POST"])
    def cancel_drag():
        _services().controller.cancel_drag()
        return jsonify({"success": True})

    @app.route("/api/errors/dismiss", methods=["POST"])
    def dismiss_error():
        _services().controller.dismiss_error()
        return jsonify({"success": True})

    # ==================== Conflict resolution ==================== #

    @app.route("/api/conflict/resolve", methods=["POST"])
    def resolve_conflict():
        """Renumber one of the two players sharing a jersey number."""
        data = request.get_json(silent=True) or {}
        try:
            choice = ResolutionChoice.parse(data.get("choice", ""))
            player = _services().controller.resolve_conflict(choice, data.get("number"))
        except InvalidTransitionError as e:
            return _error(str(e), 409)
        except ResolutionRejectedError as e:
            return _error(str(e), 400)
        except RecordNotFoundError:
            return _error("Player not found", 404)
        return jsonify({"success": True, "player": _player_data(player)})

    @app.route("/api/conflict/dismiss", methods=["POST"])
    def dismiss_conflict():
        _services().controller.dismiss_conflict()
        return jsonify({"success": True})

    @app.route("/api/history", methods=["GET"])
    def get_command_history():
        return jsonify({
            "success": True,
            "history": _services().command_log.get_command_history(),
        })

    # ==================== Persistence ==================== #

    @app.route("/api/save", methods=["POST"])
    def save_roster():
        """Save the roster; with {"backup": true} also keep a timestamped copy."""
        data = request.get_json(silent=True) or {}
        data_file = app_state.settings.data_file
        try:
            PersistenceService.save_store_to_file(_services().store, data_file)
        except OSError as e:
            logger.error("Save failed: %s", e)
            return _error(f"Could not save roster: {e}", 500)

        backup_path = None
        if data.get("backup"):
            backup_dir = os.path.join(os.path.dirname(data_file), "backup")
            backup_path = PersistenceService.backup(_services().store, backup_dir)
        return jsonify({"success": True, "file": data_file, "backup": backup_path})

    @app.route("/api/load", methods=["POST"])
    def load_roster():
        try:
            store = PersistenceService.load_store_from_file(app_state.settings.data_file)
        except FileNotFoundError as e:
            return _error(str(e), 404)
        except (ValueError, KeyError) as e:
            logger.error("Load failed: %s", e)
            return _error(f"Could not load roster: {e}", 400)
        app_state.reset_services(store)
        return jsonify({"success": True})

    return app


def run_web_app(settings: Optional[AppSettings] = None) -> None:
    """
    Run the web application.

    Args:
        settings: Application settings (loaded from the environment if omitted)
    """
    settings = settings or AppSettings.load_from_env()
    configure_logging(settings.log_level)
    logger.info("Starting web app on %s:%d", settings.host, settings.port)
    app = create_app(settings, load_from_disk=True)
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    run_web_app()
