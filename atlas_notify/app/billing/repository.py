"""Persistence layer for billing domain objects."""
from __future__ import annotations

import logging

import asyncpg

from .models import CheckoutCompletion, MembershipCommit

logger = logging.getLogger("billing.repository")


UPSERT_USER_SQL = """
    INSERT INTO users (email, stripe_customer_id)
    VALUES ($1, $2)
    ON CONFLICT (email) DO UPDATE SET stripe_customer_id = EXCLUDED.stripe_customer_id
    RETURNING id
"""

# Serializes concurrent deliveries of one session until the transaction ends.
LOCK_SESSION_SQL = "SELECT pg_advisory_xact_lock(hashtext($1))"

# Does not rely on the unique index, which databases holding older duplicate
# rows never receive.
INSERT_MEMBERSHIP_SQL = """
    INSERT INTO memberships (user_id, stripe_session_id, plan, started_at)
    SELECT $1::integer, $2::text, $3::text, now()
    WHERE NOT EXISTS (
        SELECT 1 FROM memberships WHERE stripe_session_id = $2::text
    )
    RETURNING id
"""


class PostgresMembershipRepository:
    """Concrete repository persisting users and memberships in PostgreSQL."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def record_checkout(self, completion: CheckoutCompletion) -> MembershipCommit:
        """Upsert the buyer and insert the membership in one transaction.

        The pooled connection is held for the whole transaction and handed
        back on every exit path; any error rolls both statements back.
        """

        if not completion.email:
            raise ValueError("completion has no email to key the user on")
        if not completion.session_id:
            raise ValueError("completion has no checkout session id")

        async with self._pool.acquire() as connection:
            async with connection.transaction():
                await connection.execute(LOCK_SESSION_SQL, completion.session_id)
                user_id = await connection.fetchval(
                    UPSERT_USER_SQL,
                    completion.email,
                    completion.customer_id,
                )
                if user_id is None:
                    raise RuntimeError("Failed to persist user")
                membership_id = await connection.fetchval(
                    INSERT_MEMBERSHIP_SQL,
                    user_id,
                    completion.session_id,
                    completion.plan,
                )

        if membership_id is None:
            logger.info(
                "Membership for session %s already recorded",
                completion.session_id,
                extra={"user_id": user_id},
            )
        return MembershipCommit(user_id=int(user_id), membership_id=membership_id)


__all__ = ["PostgresMembershipRepository"]
