from sqlalchemy.engine import URL

from config import Settings
from maps_db import Map, build_url, create_engine_from_settings, get_active_maps


def test_get_active_maps_filters_and_orders(maps_engine):
    assert get_active_maps(maps_engine) == [
        Map("mp_backlot", "Backlot"),
        Map("mp_crash", "Crash"),
        Map("mp_strike", "Strike"),
    ]


def test_map_to_dict():
    assert Map("mp_crash", "Crash").to_dict() == {"tag": "mp_crash", "name": "Crash"}


def test_build_url_from_parts():
    url = build_url(Settings(db_host="db", db_port=5433, db_user="olg", db_password="s3cret", db_name="maps"))
    assert isinstance(url, URL)
    assert url.drivername == "postgresql+psycopg"
    assert (url.host, url.port, url.username, url.password, url.database) == ("db", 5433, "olg", "s3cret", "maps")


def test_build_url_prefers_explicit_url():
    assert build_url(Settings(db_url="sqlite:///maps.db")) == "sqlite:///maps.db"


def test_create_engine_from_settings(tmp_path):
    engine = create_engine_from_settings(Settings(db_url=f"sqlite:///{tmp_path / 'maps.db'}"))
    try:
        assert engine.dialect.name == "sqlite"
    finally:
        engine.dispose()
