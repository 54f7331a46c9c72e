"""
Dashboard Service — aggregated metrics from the decision ledger.

Every number traces to a ledger entry. Zero mock data.
If the ledger is empty, returns zeros with a helpful message.
"""

import structlog

from launchsense.decisions.schemas import LedgerEntry
from launchsense.schemas.dashboard import (
    DashboardOverview,
    DecisionCounts,
    DecisionSummary,
    TopRiskCounts,
)
from launchsense.store.base import DataStore

logger = structlog.get_logger(__name__)

OVERVIEW_SAMPLE: int = 1000
HIGH_DEATHS: int = 3
LOW_PLAYTIME_SEC: float = 60.0


def _summary(entry: LedgerEntry) -> DecisionSummary:
    return DecisionSummary(
        ledger_id=entry.ledger_id,
        game_id=entry.game_id,
        decision=entry.decision.value,
        decision_source=entry.decision_source.value,
        risk_score=entry.risk_score,
        confidence=entry.confidence,
        created_at=entry.created_at,
    )


class DashboardService:
    """Compute dashboard views from the store's ledger."""

    def __init__(self, store: DataStore, sample_size: int = OVERVIEW_SAMPLE):
        self.store = store
        self.sample_size = sample_size

    async def overview(self) -> DashboardOverview:
        entries = await self.store.fetch_ledger(limit=self.sample_size)
        if not entries:
            return DashboardOverview(
                message="No decisions yet. Submit playtest telemetry to start.",
            )

        risks = [e.risk_score for e in entries if e.risk_score is not None]
        confidences = [e.confidence for e in entries if e.confidence is not None]

        counts = DecisionCounts()
        for entry in entries:
            name = entry.decision.value
            setattr(counts, name, getattr(counts, name) + 1)

        overview = DashboardOverview(
            total_decisions=len(entries),
            avg_risk=round(sum(risks) / len(risks)) if risks else 0,
            avg_confidence=round(sum(confidences) / len(confidences), 2) if confidences else 0.0,
            decisions=counts,
        )
        logger.debug("dashboard_overview_computed", total=overview.total_decisions)
        return overview

    async def recent(self, limit: int = 20) -> list[DecisionSummary]:
        return [_summary(e) for e in await self.store.fetch_ledger(limit=limit)]

    async def game_history(self, game_id: str, limit: int = 50) -> list[DecisionSummary]:
        entries = await self.store.fetch_ledger(game_id=game_id, limit=limit)
        return [_summary(e) for e in entries]

    async def top_risks(self, limit: int = 100) -> TopRiskCounts:
        """Count raw risk patterns across the most recent ledgered inputs."""
        entries = await self.store.fetch_ledger(limit=limit)
        counts = TopRiskCounts(sample_size=len(entries))
        for entry in entries:
            snap = entry.input_snapshot
            if snap.early_quit:
                counts.early_quit += 1
            if snap.deaths >= HIGH_DEATHS:
                counts.high_deaths += 1
            if snap.playtime < LOW_PLAYTIME_SEC:
                counts.low_playtime += 1
        return counts
