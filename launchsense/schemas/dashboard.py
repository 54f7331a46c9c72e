"""
Dashboard Schemas — aggregated views over the decision ledger.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DecisionCounts(BaseModel):
    GO: int = 0
    ITERATE: int = 0
    KILL: int = 0


class DashboardOverview(BaseModel):
    """Headline numbers. Empty ledger → zeros, never an error."""

    total_decisions: int = 0
    avg_risk: int = 0
    avg_confidence: float = 0.0
    decisions: DecisionCounts = Field(default_factory=DecisionCounts)
    message: Optional[str] = None


class DecisionSummary(BaseModel):
    ledger_id: str
    game_id: str
    decision: str
    decision_source: str
    risk_score: Optional[float] = None
    confidence: Optional[float] = None
    created_at: datetime


class TopRiskCounts(BaseModel):
    """How often each raw risk pattern shows up in ledgered inputs."""

    early_quit: int = 0
    high_deaths: int = 0
    low_playtime: int = 0
    sample_size: int = 0
