import argparse
import logging
from pathlib import Path

from config import LOG_LEVELS, load_config_file, load_settings, setup_logging
from game_server import GameServer
from http_api import create_app
from maps_db import create_engine_from_settings

log = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="OLG Server - OnLine Gaming server management")
    parser.add_argument(
        "-l", "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Log level (defaults to LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "-c", "--config-file",
        default=None,
        help="Path to a JSONC configuration file (defaults to CONFIG_PATH or ./config.jsonc)",
    )
    return parser.parse_args(argv)


def build_game_server(settings) -> GameServer:
    return GameServer(
        settings.server_host,
        settings.server_port,
        settings.server_rcon_password,
        timeout=settings.rcon_timeout,
        max_packet_size=settings.rcon_max_packet_size,
    )


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    cfg = None
    if args.config_file:
        path = Path(args.config_file)
        if not path.exists():
            raise SystemExit(f"configuration file {path} does not exist")
        cfg = load_config_file(path)
    settings = load_settings(cfg)
    log.info("Using settings %s", settings)

    log.info("Creating database engine")
    engine = create_engine_from_settings(settings)

    game_server = build_game_server(settings)
    log.info("Controlling game server %s", game_server)

    app = create_app(game_server, engine)
    log.info("HTTP API listening on [%s]:%d", settings.http_bind_host, settings.http_bind_port)
    try:
        app.run(host=settings.http_bind_host, port=settings.http_bind_port, threaded=True)
    finally:
        engine.dispose()
        log.info("Shutdown complete")


if __name__ == "__main__":
    main()
