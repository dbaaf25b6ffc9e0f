"""Session records: the pydantic model the service works with and the
SQLModel table it is persisted to.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import JSON, Column, Field, SQLModel

from pokebattle.core.battle import BattleState


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TurnRecord(BaseModel):
    """All formatted event lines for one turn number."""

    turn_number: int
    events: list[str] = PydanticField(default_factory=list)
    recorded_at: datetime = PydanticField(default_factory=_now)


class BattleSession(BaseModel):
    """One battle as stored: both participants, the engine state and the turn log.

    ``version`` is bumped by the store on every successful update; an
    update carrying an older version is rejected.
    """

    session_id: str = PydanticField(default_factory=lambda: str(uuid.uuid4()))
    side_a_id: str
    side_b_id: str
    battle_state: BattleState
    turn_log: list[TurnRecord] = PydanticField(default_factory=list)
    created_at: datetime = PydanticField(default_factory=_now)
    last_updated: datetime = PydanticField(default_factory=_now)
    version: int = 0

    def has_player(self, player_id: str) -> bool:
        return player_id in (self.side_a_id, self.side_b_id)

    def append_turns(self, turns: list[TurnRecord]) -> None:
        """Merge new turn records into the log, keeping turn numbers strictly increasing.

        A record for the turn already at the tail extends that record.
        """
        for record in turns:
            if self.turn_log and self.turn_log[-1].turn_number == record.turn_number:
                self.turn_log[-1].events.extend(record.events)
            else:
                self.turn_log.append(record)

    def last_turns(self, n: int | None = None) -> list[TurnRecord]:
        if n is None:
            return list(self.turn_log)
        if n <= 0:
            return []
        return self.turn_log[-n:]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

class BattleSessionRecord(SQLModel, table=True):
    """Persistent row for one battle session."""

    __tablename__ = "battle_sessions"  # type: ignore[assignment]

    session_id: str = Field(primary_key=True)
    side_a_id: str = Field(index=True)
    side_b_id: str = Field(index=True)

    # Engine state and turn log (full JSON blobs)
    battle_state: dict = Field(default_factory=dict, sa_column=Column(JSON))
    turn_log: list = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=_now)
    last_updated: datetime = Field(default_factory=_now)
    version: int = 0

    @classmethod
    def from_session(cls, session: BattleSession) -> BattleSessionRecord:
        return cls(
            session_id=session.session_id,
            side_a_id=session.side_a_id,
            side_b_id=session.side_b_id,
            battle_state=session.battle_state.model_dump(mode="json"),
            turn_log=[t.model_dump(mode="json") for t in session.turn_log],
            created_at=session.created_at,
            last_updated=session.last_updated,
            version=session.version,
        )

    def to_session(self) -> BattleSession:
        return BattleSession(
            session_id=self.session_id,
            side_a_id=self.side_a_id,
            side_b_id=self.side_b_id,
            battle_state=BattleState.model_validate(self.battle_state),
            turn_log=[TurnRecord.model_validate(t) for t in self.turn_log],
            created_at=self.created_at,
            last_updated=self.last_updated,
            version=self.version,
        )
