# menu_memorizer/core/database.py
import logging

from tortoise import Tortoise
from menu_memorizer.core.config import settings

logger = logging.getLogger(__name__)


def get_db_url() -> str:
    """
    Convert DATABASE_URL to Tortoise-ORM compatible format.
    Tortoise-ORM uses 'postgres://' instead of 'postgresql://'
    """
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgres://", 1)
    return db_url


TORTOISE_ORM = {
    "connections": {
        "default": get_db_url()
    },
    "apps": {
        "models": {
            "models": ["menu_memorizer.models.menu"],
            "default_connection": "default",
        }
    },
}


async def init_db() -> None:
    """
    Initialize database connection and create missing tables.
    """
    await Tortoise.init(config=TORTOISE_ORM)
    await Tortoise.generate_schemas(safe=True)
    logger.info("Database initialized")


async def close_db() -> None:
    """
    Close database connection.
    """
    await Tortoise.close_connections()
    logger.info("Database connections closed")
