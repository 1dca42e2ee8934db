from typing import Iterator

import pytest
from guestlist.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "STRICT_TABLE_OCCUPANCY", "LOG_LEVEL", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.database_url == Settings.model_fields["database_url"].default
    assert settings.strict_table_occupancy is False
    assert settings.log_level == "INFO"
    assert settings.port == 3000


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///guests.db")
    monkeypatch.setenv("STRICT_TABLE_OCCUPANCY", "1")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PORT", "8080")
    settings = get_settings()
    assert settings.database_url == "sqlite+aiosqlite:///guests.db"
    assert settings.strict_table_occupancy is True
    assert settings.log_level == "DEBUG"
    assert settings.port == 8080
