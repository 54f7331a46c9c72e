"""
SQLAlchemy-backed DataStore.

Each call opens its own session from the injected factory (the shared
settings-driven factory when none is given). History is read
back from the ledger table, newest first.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from launchsense.db.engine import get_session_factory
from launchsense.db.models import DecisionRuleRecord, LedgerRecord, SignalWeightRecord
from launchsense.decisions.schemas import (
    Decision,
    DecisionSource,
    InputSnapshot,
    LedgerEntry,
    RuleDefinition,
)
from launchsense.exceptions import LedgerConflictError
from launchsense.schemas.telemetry import HistoryRecord, finite_score
from launchsense.store.base import DataStore

logger = structlog.get_logger(__name__)


def _to_entry(row: LedgerRecord) -> LedgerEntry:
    return LedgerEntry(
        ledger_id=row.ledger_id,
        game_id=row.game_id,
        decision=Decision(row.decision),
        decision_source=DecisionSource(row.decision_source),
        risk_score=row.risk_score,
        confidence=row.confidence,
        explanation_id=row.explanation_id,
        temporal_trend=row.temporal_trend,
        temporal_volatility=row.temporal_volatility,
        temporal_shock=row.temporal_shock,
        input_snapshot=InputSnapshot(**(row.input_snapshot or {})),
        created_at=row.created_at,
    )


class SqlDataStore(DataStore):

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_factory = session_factory or get_session_factory()

    async def fetch_active_rules(self) -> list[RuleDefinition]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(DecisionRuleRecord)
                .where(DecisionRuleRecord.active.is_(True))
                .order_by(DecisionRuleRecord.priority.asc(), DecisionRuleRecord.id.asc())
            )
            return [
                RuleDefinition(
                    rule_key=r.rule_key,
                    min_value=r.min_value,
                    max_value=r.max_value,
                    decision=Decision(r.decision),
                    priority=r.priority,
                    active=r.active,
                    description=r.description,
                )
                for r in result.scalars().all()
            ]

    async def fetch_signal_weights(self) -> dict[str, float]:
        async with self.session_factory() as session:
            result = await session.execute(select(SignalWeightRecord))
            return {w.signal_key: float(w.weight) for w in result.scalars().all()}

    async def fetch_history(self, game_id: str, limit: int = 20) -> list[HistoryRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(
                    LedgerRecord.risk_score,
                    LedgerRecord.decision,
                    LedgerRecord.confidence,
                    LedgerRecord.created_at,
                )
                .where(LedgerRecord.game_id == game_id)
                .order_by(LedgerRecord.created_at.desc())
                .limit(limit)
            )
            return [
                HistoryRecord(
                    risk_score=finite_score(row.risk_score),
                    decision=Decision(row.decision),
                    confidence=row.confidence,
                    created_at=row.created_at,
                )
                for row in result.all()
            ]

    async def append_ledger(self, entry: LedgerEntry) -> None:
        async with self.session_factory() as session:
            session.add(LedgerRecord(
                ledger_id=entry.ledger_id,
                game_id=entry.game_id,
                decision=entry.decision.value,
                decision_source=entry.decision_source.value,
                risk_score=entry.risk_score,
                confidence=entry.confidence,
                explanation_id=entry.explanation_id,
                temporal_trend=entry.temporal_trend,
                temporal_volatility=entry.temporal_volatility,
                temporal_shock=entry.temporal_shock,
                input_snapshot=entry.input_snapshot.model_dump(),
                created_at=entry.created_at,
            ))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise LedgerConflictError(entry.ledger_id)

        logger.info("ledger_recorded", ledger_id=entry.ledger_id, game_id=entry.game_id)

    async def fetch_ledger(
        self,
        game_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[LedgerEntry]:
        async with self.session_factory() as session:
            stmt = select(LedgerRecord)
            if game_id is not None:
                stmt = stmt.where(LedgerRecord.game_id == game_id)
            stmt = stmt.order_by(LedgerRecord.created_at.desc()).limit(limit)
            result = await session.execute(stmt)
            return [_to_entry(r) for r in result.scalars().all()]
