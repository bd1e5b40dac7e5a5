from __future__ import annotations

import logging
from typing import Sequence

import asyncpg

from .config import AppConfig


LOGGER = logging.getLogger("atlas_notify.database")


CREATE_USERS_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        stripe_customer_id TEXT,
        created_at TIMESTAMP DEFAULT now()
    )
"""

CREATE_MEMBERSHIPS_SQL = """
    CREATE TABLE IF NOT EXISTS memberships (
        id SERIAL PRIMARY KEY,
        user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
        stripe_session_id TEXT,
        plan TEXT,
        started_at TIMESTAMP,
        expires_at TIMESTAMP
    )
"""

CREATE_TEMPLATES_SQL = """
    CREATE TABLE IF NOT EXISTS templates (
        id TEXT PRIMARY KEY,
        name TEXT,
        description TEXT,
        keywords JSONB,
        sources JSONB,
        user_urls JSONB,
        area JSONB,
        delivery JSONB,
        notes TEXT,
        created_at TIMESTAMP DEFAULT now()
    )
"""

CREATE_ALERTS_SQL = """
    CREATE TABLE IF NOT EXISTS alerts (
        id SERIAL PRIMARY KEY,
        user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
        name TEXT,
        keywords JSONB,
        area JSONB,
        delivery JSONB,
        frequency_minutes INTEGER,
        sensitivity TEXT,
        last_run TIMESTAMP,
        created_at TIMESTAMP DEFAULT now(),
        paused BOOLEAN DEFAULT false
    )
"""

# Added as an index so tables created before the constraint existed pick it up too.
CREATE_MEMBERSHIP_SESSION_INDEX_SQL = """
    CREATE UNIQUE INDEX IF NOT EXISTS memberships_stripe_session_id_key
    ON memberships (stripe_session_id)
"""

COUNT_DUPLICATE_SESSIONS_SQL = """
    SELECT count(*) FROM (
        SELECT stripe_session_id
        FROM memberships
        WHERE stripe_session_id IS NOT NULL
        GROUP BY stripe_session_id
        HAVING count(*) > 1
    ) AS duplicated
"""

# Order matters: memberships and alerts reference users.
SCHEMA_STATEMENTS: Sequence[str] = (
    CREATE_USERS_SQL,
    CREATE_MEMBERSHIPS_SQL,
    CREATE_TEMPLATES_SQL,
    CREATE_ALERTS_SQL,
)


async def create_pool(config: AppConfig) -> asyncpg.Pool:
    return await asyncpg.create_pool(
        dsn=config.database_url,
        min_size=config.db_pool_min_size,
        max_size=config.db_pool_max_size,
        command_timeout=config.db_command_timeout,
        timeout=config.db_connect_timeout,
    )


async def _ensure_session_index(connection: asyncpg.Connection) -> bool:
    duplicated = await connection.fetchval(COUNT_DUPLICATE_SESSIONS_SQL)
    if duplicated:
        LOGGER.warning(
            "Skipping unique index on memberships.stripe_session_id: %s session ids already repeat",
            duplicated,
        )
        return False
    await connection.execute(CREATE_MEMBERSHIP_SESSION_INDEX_SQL)
    return True


async def ensure_schema(pool: asyncpg.Pool) -> None:
    """Create every table the service relies on if it does not exist yet.

    The unique session index is only added when existing rows allow it;
    membership inserts stay idempotent without it.
    """

    LOGGER.info("Verifying database schema")
    try:
        async with pool.acquire() as connection:
            for statement in SCHEMA_STATEMENTS:
                await connection.execute(statement)
            indexed = await _ensure_session_index(connection)
    except Exception:
        LOGGER.exception("Database schema verification failed")
        raise
    LOGGER.info(
        "Database schema verified",
        extra={"schema_statements": len(SCHEMA_STATEMENTS), "session_index": indexed},
    )


__all__ = ["SCHEMA_STATEMENTS", "create_pool", "ensure_schema"]
