"""
Decision Ledger — immutable record of every model decision.

DESIGN:
  1. One entry per pipeline invocation, built after every other stage.
  2. Entries are frozen models: no field can be reassigned after creation.
  3. Persistence is append-only; stores reject a duplicate ledger_id.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from launchsense.decisions.schemas import (
    Decision,
    DecisionSource,
    InputSnapshot,
    LedgerEntry,
)
from launchsense.engine.temporal import TemporalProfile
from launchsense.schemas.telemetry import DecisionInput


def snapshot_input(data: Union[DecisionInput, Mapping[str, Any], None]) -> InputSnapshot:
    """Copy the bounded subset of telemetry; missing fields default to 0/False."""
    if data is None:
        return InputSnapshot()
    if isinstance(data, DecisionInput):
        data = data.model_dump(include={"playtime", "deaths", "restarts", "early_quit"})
    return InputSnapshot(
        playtime=data.get("playtime") or 0,
        deaths=data.get("deaths") or 0,
        restarts=data.get("restarts") or 0,
        early_quit=bool(data.get("early_quit")),
    )


def build_ledger_entry(
    game_id: str,
    decision: Decision,
    source: DecisionSource,
    input_data: Union[DecisionInput, Mapping[str, Any], None],
    risk_score: Optional[float] = None,
    confidence: Optional[float] = None,
    explanation_id: Optional[str] = None,
    temporal: Optional[TemporalProfile] = None,
    now: Optional[datetime] = None,
) -> LedgerEntry:
    """Build a new ledger entry with a freshly generated ledger_id."""
    return LedgerEntry(
        ledger_id=str(uuid.uuid4()),
        game_id=game_id,
        decision=decision,
        decision_source=source,
        risk_score=risk_score,
        confidence=confidence,
        explanation_id=explanation_id,
        temporal_trend=temporal.trend if temporal else None,
        temporal_volatility=temporal.volatility if temporal else None,
        temporal_shock=temporal.shock if temporal else None,
        input_snapshot=snapshot_input(input_data),
        created_at=now or datetime.now(timezone.utc),
    )
