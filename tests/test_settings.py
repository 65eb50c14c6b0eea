# tests/test_settings.py
from typing import Any

from debate_stage.core.settings import Settings


def test_database_url_is_used_as_given(monkeypatch: Any) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://app@db/debate")
    monkeypatch.delenv("USE_TEST_DATABASE", raising=False)

    assert Settings().effective_database_url == "postgresql+psycopg://app@db/debate"


def test_testing_database_overrides_main_url(monkeypatch: Any) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///main.db")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("USE_TEST_DATABASE", "true")

    assert Settings().effective_database_url == "sqlite://"
