"""
Decision Schemas — fully typed, auditable decision objects.

Every pipeline result answers:
1. What did we decide? (GO / ITERATE / KILL)
2. Who decided? (model or rule store)
3. How sure are we?
4. Why? (ranked factors)
5. What should the studio do next?
6. Where is the audit record?
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Decision(StrEnum):
    GO = "GO"
    ITERATE = "ITERATE"
    KILL = "KILL"


class DecisionSource(StrEnum):
    """Who produced a ledgered decision."""
    AI = "AI"
    HUMAN = "HUMAN"
    RULE_ENGINE = "RULE_ENGINE"


class PipelineSource(StrEnum):
    """Which branch of the pipeline produced the returned decision."""
    MODEL = "MODEL"
    RULE_ENGINE = "RULE_ENGINE"


class ConfidenceLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RecommendationPriority(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    WARNING = "warning"


# ── Rules ────────────────────────────────────────────────────────────────


class RuleDefinition(BaseModel):
    """
    A decision rule owned by the rule store.

    None on either bound means unbounded on that side.
    """

    model_config = ConfigDict(frozen=True)

    rule_key: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    decision: Decision
    priority: int = 0
    active: bool = True
    description: Optional[str] = None


class RuleMatch(BaseModel):
    """The first active rule that matched the request metrics."""

    model_config = ConfigDict(frozen=True)

    decision: Decision
    matched_rule: str
    value: float
    range: tuple[Optional[float], Optional[float]]
    priority: int
    description: Optional[str] = None
    source: str = "DB_RULE"


# ── Explanation & Actions ────────────────────────────────────────────────


class Reason(BaseModel):
    """One contributing factor and its impact (0-1)."""

    model_config = ConfigDict(frozen=True)

    factor: str
    impact: float = Field(ge=0.0, le=1.0)


class Explanation(BaseModel):
    """Ranked reasons (at most three) behind a decision."""

    model_config = ConfigDict(frozen=True)

    explanation_id: str
    decision: Decision
    reasons: list[Reason]
    confidence: float = Field(ge=0.0, le=1.0)
    summary: str = ""


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority: RecommendationPriority
    action: str
    reason: str


# ── Ledger ───────────────────────────────────────────────────────────────


class InputSnapshot(BaseModel):
    """Bounded copy of the telemetry fields that drove a decision."""

    model_config = ConfigDict(frozen=True)

    playtime: float = 0
    deaths: int = 0
    restarts: int = 0
    early_quit: bool = False


class LedgerEntry(BaseModel):
    """
    Append-only audit record of one pipeline invocation.

    Frozen: no field can be reassigned once the entry exists.
    """

    model_config = ConfigDict(frozen=True)

    ledger_id: str
    game_id: str
    decision: Decision
    decision_source: DecisionSource
    risk_score: Optional[float] = None
    confidence: Optional[float] = None
    explanation_id: Optional[str] = None
    temporal_trend: Optional[str] = None
    temporal_volatility: Optional[float] = None
    temporal_shock: Optional[bool] = None
    input_snapshot: InputSnapshot
    created_at: datetime


# ── Pipeline Result ──────────────────────────────────────────────────────


class PipelineResult(BaseModel):
    """Successful pipeline outcome (model-scored or rule override)."""

    ok: bool = True
    decision: Decision
    risk_score: Optional[float] = None
    confidence: Union[float, ConfidenceLevel]
    source: PipelineSource

    # Intelligence
    insights: dict[str, Any] = Field(default_factory=dict)
    signals: dict[str, Any] = Field(default_factory=dict)
    rule: Optional[RuleMatch] = None
    assessment: Optional[dict[str, Any]] = None
    temporal: Optional[dict[str, Any]] = None
    trend: Optional[dict[str, Any]] = None
    cohort: Optional[dict[str, Any]] = None
    counterfactuals: Optional[dict[str, Any]] = None

    # Action layer
    recommendations: list[Recommendation] = Field(default_factory=list)

    # Explainability + audit
    explanation: Optional[Explanation] = None
    ledger: Optional[LedgerEntry] = None
    stages: list[str] = Field(default_factory=list)


class PipelineFailure(BaseModel):
    """Structured failure — the pipeline never raises to its caller."""

    ok: bool = False
    error: str
    details: dict[str, Any] = Field(default_factory=dict)
    stages: list[str] = Field(default_factory=list)
