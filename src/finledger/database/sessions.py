"""Durable session storage for the authentication layer.

Sessions live in their own table, outside the entity schema. The table is
created the first time the store is used, and expired rows are pruned at
most once per ``prune_interval`` as a side effect of normal calls.
"""

import threading
from datetime import datetime, timedelta, UTC
from typing import Any, Callable, Optional

from sqlalchemy import Column, DateTime, JSON, MetaData, String, Table, delete, insert, select, update
from sqlalchemy.orm import Session, sessionmaker

from finledger.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PRUNE_INTERVAL = timedelta(minutes=15)

session_metadata = MetaData()

user_sessions = Table(
    "user_sessions",
    session_metadata,
    Column("sid", String, primary_key=True),
    Column("sess", JSON, nullable=False),
    Column("expire", DateTime(timezone=True), nullable=False, index=True),
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SQLAlchemySessionStore:
    """Key/value session store backed by the ``user_sessions`` table."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        prune_interval: timedelta = DEFAULT_PRUNE_INTERVAL,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.session_factory = session_factory
        self.prune_interval = prune_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._table_ready = False
        self._last_prune: Optional[datetime] = None

    def _now(self) -> datetime:
        return _as_utc(self._clock())

    def _ensure_table(self) -> None:
        with self._lock:
            if not self._table_ready:
                with self.session_factory() as session:
                    user_sessions.create(session.get_bind(), checkfirst=True)
                self._table_ready = True

    def _prepare(self) -> None:
        """Create the table on first use and prune when the period has elapsed."""
        self._ensure_table()
        with self._lock:
            due = self._last_prune is None or self._now() - self._last_prune >= self.prune_interval
        if due:
            self.prune_expired()

    def get(self, sid: str) -> Optional[dict[str, Any]]:
        """Return session data, or None if missing or expired."""
        self._prepare()
        with self.session_factory() as session:
            row = session.execute(
                select(user_sessions.c.sess).where(
                    user_sessions.c.sid == sid, user_sessions.c.expire > self._now()
                )
            ).first()
        return None if row is None else row.sess

    def set(self, sid: str, data: dict[str, Any], expires_at: datetime) -> None:
        """Insert or replace a session."""
        self._prepare()
        expires_at = _as_utc(expires_at)
        with self.session_factory.begin() as session:
            exists = session.execute(
                select(user_sessions.c.sid).where(user_sessions.c.sid == sid)
            ).first()
            if exists is None:
                session.execute(insert(user_sessions).values(sid=sid, sess=data, expire=expires_at))
            else:
                session.execute(
                    update(user_sessions)
                    .where(user_sessions.c.sid == sid)
                    .values(sess=data, expire=expires_at)
                )

    def touch(self, sid: str, expires_at: datetime) -> bool:
        """Extend a live session. Returns False if it is missing or expired."""
        self._prepare()
        with self.session_factory.begin() as session:
            result = session.execute(
                update(user_sessions)
                .where(user_sessions.c.sid == sid, user_sessions.c.expire > self._now())
                .values(expire=_as_utc(expires_at))
            )
        return result.rowcount > 0

    def destroy(self, sid: str) -> None:
        """Remove a session if present."""
        self._prepare()
        with self.session_factory.begin() as session:
            session.execute(delete(user_sessions).where(user_sessions.c.sid == sid))

    def prune_expired(self) -> int:
        """Delete expired sessions. Returns the number of rows removed."""
        self._ensure_table()
        now = self._now()
        with self.session_factory.begin() as session:
            result = session.execute(delete(user_sessions).where(user_sessions.c.expire <= now))
        with self._lock:
            self._last_prune = now
        if result.rowcount:
            logger.info("sessions_pruned", count=result.rowcount)
        return result.rowcount
