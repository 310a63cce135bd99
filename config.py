import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import json5

LOGGER = logging.getLogger(__name__)

CONFIG_PATH = Path(os.environ.get("CONFIG_PATH", "/app/config.jsonc"))

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARN", "WARNING", "ERROR")
# Room for the 4-byte out-of-band marker.
MIN_PACKET_SIZE = 4


def load_config_file(path: Path):
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json5.load(fh)
    except (OSError, ValueError):
        LOGGER.exception("Failed to load configuration from %s", path)
        return {}
    LOGGER.info("Loaded configuration from %s", path)
    return data if isinstance(data, dict) else {}


def _resolve_config():
    candidates = [CONFIG_PATH, Path.cwd() / "config.jsonc"]
    for candidate in candidates:
        cfg = load_config_file(candidate)
        if cfg:
            return cfg
    LOGGER.info("No configuration file found; falling back to environment variables")
    return {}

CONFIG = _resolve_config()


def get_env(name: str, default=None):
    return os.environ.get(name, default)


def get_setting(env_key: str, json_key: str, default=None, config=None):
    value = os.environ.get(env_key)
    if value:
        return value
    value = (CONFIG if config is None else config).get(json_key)
    return default if value is None else value


def _as_int(key: str, value, minimum: int | None = None, maximum: int | None = None) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc
    if minimum is not None and result < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {result}")
    if maximum is not None and result > maximum:
        raise ValueError(f"{key} must be <= {maximum}, got {result}")
    return result


def _as_port(key: str, value) -> int:
    return _as_int(key, value, minimum=1, maximum=65535)


def _as_positive_float(key: str, value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc
    if not result > 0:
        raise ValueError(f"{key} must be > 0, got {result}")
    return result


@dataclass(frozen=True)
class Settings:
    http_bind_host: str = "::"
    http_bind_port: int = 7000
    server_host: str = "127.0.0.1"
    server_port: int = 28960
    server_rcon_password: str = field(default="password", repr=False)
    rcon_timeout: float = 2.0
    rcon_max_packet_size: int = 1400
    db_url: str | None = field(default=None, repr=False)
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = field(default="password", repr=False)
    db_name: str = "olg"


def load_settings(config=None) -> Settings:
    """Build the process settings from the environment and a config mapping.

    Every key is looked up first in the environment and then under the same
    name in ``config`` (the JSONC file resolved at import when omitted);
    unset keys keep the ``Settings`` default.
    """
    defaults = Settings()

    def setting(key, default=None):
        return get_setting(key, key, default, config)

    return Settings(
        http_bind_host=str(setting("HTTP_BIND_HOST", defaults.http_bind_host)),
        http_bind_port=_as_port("HTTP_BIND_PORT", setting("HTTP_BIND_PORT", defaults.http_bind_port)),
        server_host=str(setting("SERVER_HOST", defaults.server_host)),
        server_port=_as_port("SERVER_PORT", setting("SERVER_PORT", defaults.server_port)),
        server_rcon_password=str(setting("SERVER_RCON_PASSWORD", defaults.server_rcon_password)),
        rcon_timeout=_as_positive_float("RCON_TIMEOUT", setting("RCON_TIMEOUT", defaults.rcon_timeout)),
        rcon_max_packet_size=_as_int(
            "RCON_MAX_PACKET_SIZE",
            setting("RCON_MAX_PACKET_SIZE", defaults.rcon_max_packet_size),
            minimum=MIN_PACKET_SIZE,
        ),
        db_url=setting("DB_URL"),
        db_host=str(setting("DB_HOST", defaults.db_host)),
        db_port=_as_port("DB_PORT", setting("DB_PORT", defaults.db_port)),
        db_user=str(setting("DB_USER", defaults.db_user)),
        db_password=str(setting("DB_PASSWORD", defaults.db_password)),
        db_name=str(setting("DB_NAME", defaults.db_name)),
    )


def setup_logging(level: str | None = None):
    raw = (level or get_env("LOG_LEVEL", "INFO")).upper()
    if raw not in LOG_LEVELS:
        raw = "INFO"
    logging.basicConfig(
        level=getattr(logging, raw),
        format=LOG_FORMAT
    )
