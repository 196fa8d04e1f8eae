# homeserve/database.py
import json
import asyncpg
from typing import AsyncGenerator
from .config import settings


def _encode_json(value) -> str:
    return json.dumps(value, default=str)


async def init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns into Python objects"""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=_encode_json,
            decoder=json.loads,
            schema="pg_catalog"
        )


async def connect() -> asyncpg.Connection:
    conn = await asyncpg.connect(
        user=settings.database_username,
        password=settings.database_password,
        database=settings.database_name,
        host=settings.database_hostname,
        port=settings.database_port
    )
    await init_connection(conn)
    return conn


async def get_db() -> AsyncGenerator[asyncpg.Connection, None]:
    conn = await connect()
    try:
        yield conn
    finally:
        await conn.close()
