"""
Adapter: Signal repository.

Implements SignalRepository port.
Persists generated signals to the `signals` table through SQLAlchemy Core.
Runs on PostgreSQL in deployment and on SQLite in tests.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    delete,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from signaldesk.domain.signals.entities import NewSignal, Signal
from signaldesk.domain.signals.errors import SignalPersistenceError
from signaldesk.domain.signals.ports import SignalRepository

logger = logging.getLogger(__name__)

metadata = MetaData()

signals_table = Table(
    "signals",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("pair", Text, nullable=False),
    Column("action", Text, nullable=False),
    Column("confidence", Integer, nullable=False),
    Column("start_time", Text, nullable=False),
    Column("end_time", Text, nullable=False),
    Column("status", Text, nullable=False, server_default="active"),
    Column("analysis", Text, nullable=False),
    Column("verifiers", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

_newest_first = (signals_table.c.created_at.desc(), signals_table.c.id.desc())


def create_schema(engine: Engine) -> None:
    """Create the signals table if it does not exist yet."""
    metadata.create_all(engine)


def _row_to_signal(row: Any) -> Signal:
    data = row._mapping
    return Signal(
        id=data["id"],
        pair=data["pair"],
        action=data["action"],
        confidence=data["confidence"],
        start_time=data["start_time"],
        end_time=data["end_time"],
        status=data["status"],
        analysis=data["analysis"],
        verifiers=list(data["verifiers"] or []),
        created_at=data["created_at"],
    )


class SignalRepositoryAdapter(SignalRepository):
    """SQLAlchemy implementation of the signal repository.

    Every storage failure is re-raised as SignalPersistenceError so the
    interface layer can tell storage problems from provider problems.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_all(self) -> list[Signal]:
        """Return every stored signal, newest first."""
        query = select(signals_table).order_by(*_newest_first)
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(query).fetchall()
        except SQLAlchemyError as exc:
            raise SignalPersistenceError("list", type(exc).__name__) from exc
        return [_row_to_signal(row) for row in rows]

    def get_latest(self) -> Optional[Signal]:
        """Return the newest signal, or None if the table is empty."""
        query = select(signals_table).order_by(*_newest_first).limit(1)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            raise SignalPersistenceError("get_latest", type(exc).__name__) from exc
        return _row_to_signal(row) if row is not None else None

    def insert(self, new_signal: NewSignal) -> Signal:
        """Persist a signal and return it with its id and created_at.

        Args:
            new_signal: The signal to store.

        Returns:
            The stored signal.
        """
        created_at = datetime.now(timezone.utc)
        values = {
            "pair": new_signal.pair,
            "action": new_signal.action,
            "confidence": new_signal.confidence,
            "start_time": new_signal.start_time,
            "end_time": new_signal.end_time,
            "status": new_signal.status.value,
            "analysis": new_signal.analysis,
            "verifiers": list(new_signal.verifiers),
            "created_at": created_at,
        }
        try:
            with self._engine.begin() as conn:
                result = conn.execute(insert(signals_table).values(**values))
                signal_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise SignalPersistenceError("insert", type(exc).__name__) from exc

        logger.debug("Inserted signal id=%d pair=%s.", signal_id, new_signal.pair)
        return Signal(id=signal_id, **values)

    def delete_all(self) -> int:
        """Delete every signal. An empty table is not an error."""
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(signals_table))
        except SQLAlchemyError as exc:
            raise SignalPersistenceError("delete_all", type(exc).__name__) from exc

        deleted = max(result.rowcount, 0)
        logger.info("Deleted %d signals.", deleted)
        return deleted
