import pytest
from librarydesk.core.config import Settings
from librarydesk.db.session import StoreConfigError, build_engine


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('["http://a.test", "http://b.test"]', ["http://a.test", "http://b.test"]),
        ("[http://a.test, http://b.test]", ["http://a.test", "http://b.test"]),
        ("http://a.test, http://b.test", ["http://a.test", "http://b.test"]),
        ("*", ["*"]),
        ("", []),
    ],
)
def test_cors_origins_formats(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings().cors_origins == expected


def test_store_settings_come_from_env(monkeypatch):
    monkeypatch.setenv("LIBRARY_STORE_URL", "sqlite+pysqlite:///./x.db")
    monkeypatch.setenv("LIBRARY_STORE_KEY", "k")

    s = Settings()
    assert s.store_url == "sqlite+pysqlite:///./x.db"
    assert s.store_key == "k"


@pytest.mark.parametrize(
    "url, key, missing",
    [
        (None, "k", "LIBRARY_STORE_URL"),
        ("sqlite+pysqlite:///:memory:", None, "LIBRARY_STORE_KEY"),
        ("", "", "LIBRARY_STORE_URL, LIBRARY_STORE_KEY"),
    ],
)
def test_store_client_needs_url_and_key(url, key, missing):
    with pytest.raises(StoreConfigError) as exc:
        build_engine(url, key)
    assert missing in str(exc.value)


def test_sqlite_store_builds_engine():
    engine = build_engine("sqlite+pysqlite:///:memory:", "k")
    try:
        assert engine.url.get_backend_name() == "sqlite"
    finally:
        engine.dispose()
