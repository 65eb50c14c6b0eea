"""Engine, session factory and FastAPI session dependency."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from debate_stage.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Model modules must be imported so create_all sees every table.
import debate_stage.models  # noqa: E402,F401


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    if url.startswith("sqlite"):
        # Notification delivery writes from a worker thread.
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(
    settings.effective_database_url,
    **_engine_options(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session; each vote or follow is its own unit of work."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all tables for local bootstrapping; deployments use Alembic."""
    Base.metadata.create_all(bind=engine)
