"""
Gameplay Telemetry Schemas.

DecisionInput is the validated, immutable payload for one decision request.
HistoryRecord is the fixed shape of a past decision read back from the store.

sessions and events are optional context: null reads as empty, and a
malformed entry is dropped rather than failing the whole request.
"""

import math
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from launchsense.decisions.schemas import Decision

logger = structlog.get_logger(__name__)


class SessionRecord(BaseModel):
    """A sub-session attached to the reported session."""

    model_config = ConfigDict(frozen=True, extra="allow")

    session_id: Optional[str] = None
    duration_sec: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    deaths: Optional[int] = Field(default=None, ge=0)
    restarts: Optional[int] = Field(default=None, ge=0)
    early_quit: Optional[bool] = None


class GameEvent(BaseModel):
    """A single in-game event (death, checkpoint, purchase, ...)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: Optional[str] = None
    timestamp: Optional[float] = None


def _keep_valid(items: Any, model: type[BaseModel], field_name: str) -> Any:
    if items is None:
        return []
    if not isinstance(items, (list, tuple)):
        return items

    kept = []
    for index, item in enumerate(items):
        try:
            kept.append(model.model_validate(item))
        except ValidationError as exc:
            logger.debug(
                "telemetry_record_dropped",
                field=field_name,
                index=index,
                errors=exc.error_count(),
            )
    return kept


class DecisionInput(BaseModel):
    """
    One telemetry record submitted for a launch decision.

    playtime is in seconds. deaths/restarts must be real integers and
    early_quit a real boolean — "3" or "true" are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    game_id: str = Field(min_length=1)
    player_id: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    playtime: float = Field(ge=0, strict=True, allow_inf_nan=False)
    deaths: int = Field(ge=0, strict=True)
    restarts: int = Field(ge=0, strict=True)
    early_quit: bool = Field(strict=True)
    sessions: list[SessionRecord] = Field(default_factory=list)
    events: list[GameEvent] = Field(default_factory=list)

    @field_validator("sessions", mode="before")
    @classmethod
    def _tolerant_sessions(cls, v: Any) -> Any:
        return _keep_valid(v, SessionRecord, "sessions")

    @field_validator("events", mode="before")
    @classmethod
    def _tolerant_events(cls, v: Any) -> Any:
        return _keep_valid(v, GameEvent, "events")


class HistoryRecord(BaseModel):
    """A past decision for the same game. History sequences are newest first."""

    model_config = ConfigDict(frozen=True)

    risk_score: Optional[float] = Field(default=None, allow_inf_nan=False)
    decision: Optional[Decision] = None
    confidence: Optional[float] = None
    created_at: Optional[datetime] = None


def risk_values(history: list[HistoryRecord]) -> list[float]:
    """Finite numeric risk scores from a history sequence, order preserved."""
    return [
        float(h.risk_score)
        for h in history
        if h.risk_score is not None and math.isfinite(h.risk_score)
    ]


def finite_score(value: Optional[float]) -> Optional[float]:
    """A stored score as a float, or None when it is missing or not finite."""
    if value is None or not math.isfinite(value):
        return None
    return float(value)
