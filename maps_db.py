import logging
from dataclasses import asdict, dataclass

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine

from config import Settings

log = logging.getLogger(__name__)

ACTIVE_MAPS_QUERY = text(
    "SELECT m.tag AS tag, m.name AS name FROM codmap m WHERE m.active = TRUE ORDER BY name"
)


@dataclass(frozen=True)
class Map:
    tag: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def build_url(settings: Settings):
    if settings.db_url:
        return settings.db_url
    return URL.create(
        "postgresql+psycopg",
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


def create_engine_from_settings(settings: Settings) -> Engine:
    url = build_url(settings)
    engine = create_engine(url, pool_pre_ping=True)
    log.info("Database engine ready for %s", engine.url.render_as_string(hide_password=True))
    return engine


def get_active_maps(engine: Engine) -> list[Map]:
    with engine.connect() as conn:
        rows = conn.execute(ACTIVE_MAPS_QUERY).all()
    return [Map(tag=row.tag, name=row.name) for row in rows]
