"""
In-Memory DataStore Tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from launchsense.decisions.ledger import build_ledger_entry
from launchsense.decisions.schemas import Decision, DecisionSource, RuleDefinition
from launchsense.exceptions import LedgerConflictError
from launchsense.schemas.telemetry import HistoryRecord
from launchsense.store.memory import InMemoryDataStore

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _entry(game_id="g1", risk=50.0, minutes=0):
    return build_ledger_entry(
        game_id=game_id,
        decision=Decision.ITERATE,
        source=DecisionSource.AI,
        input_data={"deaths": 2},
        risk_score=risk,
        confidence=0.6,
        now=T0 + timedelta(minutes=minutes),
    )


class TestInMemoryDataStore:
    @pytest.mark.asyncio
    async def test_rules_active_and_ordered(self):
        store = InMemoryDataStore(rules=[
            RuleDefinition(rule_key="b", decision=Decision.KILL, priority=2),
            RuleDefinition(rule_key="off", decision=Decision.GO, priority=0, active=False),
            RuleDefinition(rule_key="a", decision=Decision.ITERATE, priority=1),
        ])
        rules = await store.fetch_active_rules()
        assert [r.rule_key for r in rules] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_weights_are_copied(self):
        store = InMemoryDataStore(weights={"deaths": 2.0})
        weights = await store.fetch_signal_weights()
        weights["deaths"] = 0.0
        assert (await store.fetch_signal_weights())["deaths"] == 2.0

    @pytest.mark.asyncio
    async def test_duplicate_ledger_id_rejected(self):
        store = InMemoryDataStore()
        entry = _entry()
        await store.append_ledger(entry)
        with pytest.raises(LedgerConflictError):
            await store.append_ledger(entry)
        assert len(await store.fetch_ledger()) == 1

    @pytest.mark.asyncio
    async def test_ledger_newest_first_and_filtered(self):
        store = InMemoryDataStore()
        await store.append_ledger(_entry("g1", minutes=0))
        await store.append_ledger(_entry("g2", minutes=1))
        await store.append_ledger(_entry("g1", minutes=2))

        all_entries = await store.fetch_ledger()
        assert [e.game_id for e in all_entries] == ["g1", "g2", "g1"]
        g1 = await store.fetch_ledger(game_id="g1")
        assert [e.created_at.minute for e in g1] == [2, 0]
        assert len(await store.fetch_ledger(limit=1)) == 1

    @pytest.mark.asyncio
    async def test_history_ledger_before_seeded(self):
        store = InMemoryDataStore(history={"g1": [HistoryRecord(risk_score=10)]})
        await store.append_ledger(_entry("g1", risk=80))
        history = await store.fetch_history("g1")
        assert [h.risk_score for h in history] == [80, 10]
        assert await store.fetch_history("unknown") == []

    @pytest.mark.asyncio
    async def test_history_limit(self):
        store = InMemoryDataStore(history={"g1": [HistoryRecord(risk_score=v) for v in range(30)]})
        assert len(await store.fetch_history("g1", limit=20)) == 20
