"""
Session storage abstraction.

Separates persistence from battle logic for testability. Every write is
conditional: ``create`` refuses to overwrite, ``update`` refuses to
create and refuses a stale ``version``.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine

from pokebattle.data.models import BattleSession, BattleSessionRecord
from pokebattle.errors import StoreConflict
from pokebattle.utils.config import Config

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """
    Storage interface for battle sessions.

    Implementations:
    - SqlSessionStore: SQLModel table (production)
    - MemorySessionStore: In-memory dict (testing, local play)
    """

    def create(self, session: BattleSession) -> BattleSession:
        """Insert a new session. Raises StoreConflict if the id is taken."""
        ...

    def get(self, session_id: str) -> BattleSession | None:
        """Load a session by id. Returns None if not found."""
        ...

    def update(self, session: BattleSession) -> BattleSession:
        """Rewrite a session in full.

        Succeeds only if the record exists and its stored version equals
        ``session.version``. Returns the session as written (new version,
        new ``last_updated``). Raises StoreConflict otherwise.
        """
        ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemorySessionStore:
    """
    In-memory session storage.

    Stores deep copies so callers can't mutate what is "on disk".
    """

    def __init__(self):
        self._sessions: dict[str, BattleSession] = {}
        self._lock = threading.Lock()

    def create(self, session: BattleSession) -> BattleSession:
        with self._lock:
            if session.session_id in self._sessions:
                logger.warning(f"Refusing to overwrite existing session {session.session_id}")
                raise StoreConflict(session.session_id, "session already exists")
            self._sessions[session.session_id] = session.model_copy(deep=True)
        return session.model_copy(deep=True)

    def get(self, session_id: str) -> BattleSession | None:
        with self._lock:
            stored = self._sessions.get(session_id)
            return stored.model_copy(deep=True) if stored else None

    def update(self, session: BattleSession) -> BattleSession:
        with self._lock:
            stored = self._sessions.get(session.session_id)
            if stored is None:
                logger.warning(f"Update for unknown session {session.session_id}")
                raise StoreConflict(session.session_id, "session does not exist")
            if stored.version != session.version:
                logger.warning(
                    f"Stale update for session {session.session_id}: "
                    f"stored version {stored.version}, got {session.version}"
                )
                raise StoreConflict(session.session_id, "session was modified concurrently")

            written = session.model_copy(
                update={"version": session.version + 1, "last_updated": _now()},
                deep=True,
            )
            self._sessions[session.session_id] = written
            return written.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._sessions)


class SqlSessionStore:
    """
    SQLModel-backed session storage (one row per session in ``battle_sessions``).

    The connection comes from ``config``; tests may hand in a ready engine.
    """

    def __init__(self, config: Config, engine: Engine | None = None):
        if engine is None:
            if not config.database_url:
                config.ensure_dirs()
            engine = create_engine(config.resolved_database_url, echo=config.echo_sql)
        self.engine = engine
        SQLModel.metadata.create_all(self.engine)

    def create(self, session: BattleSession) -> BattleSession:
        with Session(self.engine) as db:
            if db.get(BattleSessionRecord, session.session_id) is not None:
                logger.warning(f"Refusing to overwrite existing session {session.session_id}")
                raise StoreConflict(session.session_id, "session already exists")
            db.add(BattleSessionRecord.from_session(session))
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise StoreConflict(session.session_id, "session already exists") from e
        return session

    def get(self, session_id: str) -> BattleSession | None:
        with Session(self.engine) as db:
            record = db.get(BattleSessionRecord, session_id)
            return record.to_session() if record else None

    def update(self, session: BattleSession) -> BattleSession:
        now = _now()
        new_version = session.version + 1
        row = BattleSessionRecord.from_session(session)

        stmt = (
            update(BattleSessionRecord)
            .where(BattleSessionRecord.session_id == session.session_id)
            .where(BattleSessionRecord.version == session.version)
            .values(
                battle_state=row.battle_state,
                turn_log=row.turn_log,
                last_updated=now,
                version=new_version,
            )
        )

        with Session(self.engine) as db:
            result = db.execute(stmt)
            if result.rowcount != 1:
                db.rollback()
                exists = db.get(BattleSessionRecord, session.session_id) is not None
                reason = "session was modified concurrently" if exists else "session does not exist"
                logger.warning(f"Conditional update failed for session {session.session_id}: {reason}")
                raise StoreConflict(session.session_id, reason)
            db.commit()

        return session.model_copy(update={"version": new_version, "last_updated": now}, deep=True)
