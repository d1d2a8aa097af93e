"""Data store: sole owner of the database.

All access goes through one SQLite connection guarded by one asyncio lock.
The lock is held for a single storage operation at a time, never across a
whole request, and every operation runs in its own transaction.
"""

import asyncio
import logging
import os
import secrets
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import aiosqlite
from sqlalchemy import delete, event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shoal.core.errors import NotPermittedError
from shoal.models.base import Base, as_utc, utcnow
from shoal.models.fish import Fish
from shoal.models.session import Session
from shoal.schemas.fish import FishCreate, FishUpdate
from shoal.services import fish_service
from shoal.services.fish_seed import TEMPLATE_FISH, seed_templates

logger = logging.getLogger("shoal")

SESSION_TTL_SECONDS = 3600


def _generate_session_id() -> str:
    """16 random bytes, hex-encoded."""
    return secrets.token_hex(16)


def _set_sqlite_pragma(dbapi_connection, connection_record):
    # Foreign keys are off by default in SQLite; cascade deletes need them.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """Serialized access to the session and fish tables."""

    def __init__(
        self,
        database_url: str = "sqlite+aiosqlite:///:memory:",
        *,
        session_ttl: timedelta = timedelta(seconds=SESSION_TTL_SECONDS),
        templates: list[dict] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._engine = create_async_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        event.listen(self._engine.sync_engine, "connect", _set_sqlite_pragma)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._lock = asyncio.Lock()
        self._session_ttl = session_ttl
        self._templates = list(TEMPLATE_FISH if templates is None else templates)
        self._clock = clock
        self._initialized = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Hold the lock and an open transaction for one storage operation."""
        async with self._lock:
            async with self._session_factory.begin() as db:
                yield db

    async def initialize(self) -> None:
        """Create tables and insert the template fish. Only valid once."""
        if self._initialized:
            raise RuntimeError("Store is already initialized")
        async with self._lock:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        async with self.transaction() as db:
            count = await seed_templates(db, self._templates)
        self._initialized = True
        logger.info("Store initialized with %d template fish", count)

    async def close(self) -> None:
        await self._engine.dispose()

    async def create_session(self) -> tuple[str, datetime]:
        """Create a session holding a copy of every template fish.

        Session row and fish copies are written in one transaction, so a
        session is never visible without its fish.
        """
        session_id = _generate_session_id()
        expires_at = self._clock() + self._session_ttl
        async with self.transaction() as db:
            db.add(Session(id=session_id, expires_at=expires_at))
            await db.flush()
            copied = await fish_service.copy_templates(db, session_id)
        logger.debug("Created session %s with %d fish", session_id, copied)
        return session_id, expires_at

    async def reap_expired_sessions(self) -> list[str]:
        """Delete sessions whose expiry is strictly before now.

        Their fish go with them through the cascading foreign key.
        Returns the deleted session ids.
        """
        now = self._clock()
        async with self.transaction() as db:
            result = await db.execute(
                select(Session.id).where(Session.expires_at < now)
            )
            expired = list(result.scalars().all())
            if expired:
                await db.execute(delete(Session).where(Session.id.in_(expired)))
        return expired

    async def session_exists_and_live(self, session_id: str) -> bool:
        now = self._clock()
        async with self.transaction() as db:
            result = await db.execute(
                select(Session.expires_at).where(Session.id == session_id)
            )
            expires_at = result.scalar_one_or_none()
        return expires_at is not None and as_utc(expires_at) > now

    async def dump(self, destination: str | os.PathLike) -> None:
        """Write a consistent snapshot of the whole database to a file."""
        async with self._lock:
            async with self._engine.connect() as conn:
                raw = await conn.get_raw_connection()
                target = await aiosqlite.connect(
                    os.fspath(destination), check_same_thread=False
                )
                try:
                    await raw.driver_connection.backup(target)
                finally:
                    await target.close()
        logger.info("Dumped store to %s", destination)

    def scoped(self, session_id: str | None) -> "SessionStore":
        """Handle bound to one session, or to the read-only template view."""
        return SessionStore(self, session_id)


class SessionStore:
    """Fish operations restricted to one session.

    With no session the handle only reads the template fish; every mutation
    raises NotPermittedError.
    """

    def __init__(self, store: Store, session_id: str | None):
        self._store = store
        self.session_id = session_id

    def _require_session(self) -> str:
        if self.session_id is None:
            raise NotPermittedError()
        return self.session_id

    async def list(self) -> list[Fish]:
        async with self._store.transaction() as db:
            return await fish_service.list_fish(db, self.session_id)

    async def get(self, fish_id: int) -> Fish:
        async with self._store.transaction() as db:
            return await fish_service.get_fish(db, self.session_id, fish_id)

    async def create(self, fields: FishCreate) -> Fish:
        session_id = self._require_session()
        async with self._store.transaction() as db:
            return await fish_service.create_fish(
                db, session_id=session_id, **fields.model_dump()
            )

    async def update(self, fish_id: int, fields: FishUpdate) -> Fish:
        session_id = self._require_session()
        # Absent and null fields both keep the stored value
        changes = fields.model_dump(exclude_none=True)
        async with self._store.transaction() as db:
            return await fish_service.update_fish(db, session_id, fish_id, changes)

    async def delete(self, fish_id: int) -> Fish:
        session_id = self._require_session()
        async with self._store.transaction() as db:
            return await fish_service.delete_fish(db, session_id, fish_id)
