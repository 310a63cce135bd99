"""Flask application exposing the game server controls over HTTP."""
import logging

from flask import Flask, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from errors import InvalidGametype, PartialFailure, RconError
from gametype import from_tag
from maps_db import get_active_maps

log = logging.getLogger(__name__)

API_PREFIX = "/api/public/v1"


class InvalidRequest(Exception):
    """Raised when a request body cannot be turned into a server command."""


def _game_server():
    return current_app.extensions["olg.game_server"]


def _engine():
    engine = current_app.extensions.get("olg.db_engine")
    if engine is None:
        raise SQLAlchemyError("no database configured")
    return engine


def _no_content():
    return "", 204


def _error(status: int, message: str, **extra):
    body = {"message": message}
    body.update(extra)
    return jsonify(body), status


def health():
    return _no_content()


def maps():
    return jsonify([m.to_dict() for m in get_active_maps(_engine())])


def map_restart():
    _game_server().map_restart()
    return _no_content()


def fast_restart():
    _game_server().fast_restart()
    return _no_content()


def gametype_map():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequest("request body must be a JSON object")

    gametype = from_tag(payload.get("gametype"))
    map_name = payload.get("map")
    if not isinstance(map_name, str) or not map_name.strip():
        raise InvalidRequest("'map' must be a non-empty string")
    try:
        map_name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidRequest("'map' must be valid UTF-8 text") from exc

    _game_server().set_gametype_and_map(gametype, map_name)
    return _no_content()


def _handle_bad_request(exc):
    return _error(400, str(exc))


def _handle_partial_failure(exc: PartialFailure):
    log.error("%s left in a mixed state: %s", _game_server(), exc)
    return _error(
        500,
        f"Internal server error: {exc}",
        partial=True,
        completed=exc.completed,
    )


def _handle_rcon_error(exc: RconError):
    log.warning("RCON command to %s failed: %s", _game_server(), exc)
    return _error(500, f"Internal server error: {exc}")


def _handle_db_error(exc: SQLAlchemyError):
    log.warning("Map query failed: %s", exc)
    return _error(500, f"Internal server error: {exc}")


def create_app(game_server, db_engine=None) -> Flask:
    app = Flask(__name__)
    app.extensions["olg.game_server"] = game_server
    app.extensions["olg.db_engine"] = db_engine

    app.add_url_rule("/health", view_func=health, methods=["GET"])
    app.add_url_rule(f"{API_PREFIX}/maps", view_func=maps, methods=["GET"])
    app.add_url_rule(f"{API_PREFIX}/server/map_restart", view_func=map_restart, methods=["GET"])
    app.add_url_rule(f"{API_PREFIX}/server/fast_restart", view_func=fast_restart, methods=["GET"])
    app.add_url_rule(f"{API_PREFIX}/server/gametype_map", view_func=gametype_map, methods=["POST"])

    app.register_error_handler(InvalidRequest, _handle_bad_request)
    app.register_error_handler(InvalidGametype, _handle_bad_request)
    app.register_error_handler(PartialFailure, _handle_partial_failure)
    app.register_error_handler(RconError, _handle_rcon_error)
    app.register_error_handler(SQLAlchemyError, _handle_db_error)
    return app
