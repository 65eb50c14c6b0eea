"""Create the schema straight from the ORM models for local development."""

import logging

from debate_stage.core.settings import settings
from debate_stage.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


def main() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    init_db()
    logger.info("Database initialized at %s", settings.effective_database_url)


if __name__ == "__main__":
    main()
