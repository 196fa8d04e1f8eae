# homeserve/init_db.py
import asyncio
import logging
from pathlib import Path

from .database import connect

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def init_db() -> None:
    """Create the tables and indexes if they do not exist yet"""
    conn = await connect()
    try:
        await conn.execute(SCHEMA_PATH.read_text())
        logger.info(f"Applied schema from {SCHEMA_PATH.name}")
    finally:
        await conn.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(init_db())
