"""
In-memory DataStore for development and tests.

Holds rules, weights and the ledger in plain lists/dicts. History is
derived from ledger entries of the same game, plus any seeded records.
"""

from typing import Iterable, Optional

import structlog

from launchsense.decisions.schemas import LedgerEntry, RuleDefinition
from launchsense.exceptions import LedgerConflictError
from launchsense.schemas.telemetry import HistoryRecord
from launchsense.store.base import DataStore

logger = structlog.get_logger(__name__)


class InMemoryDataStore(DataStore):

    def __init__(
        self,
        rules: Optional[Iterable[RuleDefinition]] = None,
        weights: Optional[dict[str, float]] = None,
        history: Optional[dict[str, list[HistoryRecord]]] = None,
    ):
        self.rules: list[RuleDefinition] = list(rules or [])
        self.weights: dict[str, float] = dict(weights or {})
        self.seeded_history: dict[str, list[HistoryRecord]] = {
            k: list(v) for k, v in (history or {}).items()
        }
        self._ledger: list[LedgerEntry] = []
        self._ledger_ids: set[str] = set()

    async def fetch_active_rules(self) -> list[RuleDefinition]:
        return sorted((r for r in self.rules if r.active), key=lambda r: r.priority)

    async def fetch_signal_weights(self) -> dict[str, float]:
        return dict(self.weights)

    async def fetch_history(self, game_id: str, limit: int = 20) -> list[HistoryRecord]:
        ledgered = [
            HistoryRecord(
                risk_score=e.risk_score,
                decision=e.decision,
                confidence=e.confidence,
                created_at=e.created_at,
            )
            for e in reversed(self._ledger)
            if e.game_id == game_id
        ]
        return (ledgered + self.seeded_history.get(game_id, []))[:limit]

    async def append_ledger(self, entry: LedgerEntry) -> None:
        if entry.ledger_id in self._ledger_ids:
            raise LedgerConflictError(entry.ledger_id)
        self._ledger_ids.add(entry.ledger_id)
        self._ledger.append(entry)
        logger.debug("ledger_appended", ledger_id=entry.ledger_id, game_id=entry.game_id)

    async def fetch_ledger(
        self,
        game_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[LedgerEntry]:
        entries = [
            e for e in reversed(self._ledger)
            if game_id is None or e.game_id == game_id
        ]
        return entries[:limit]
