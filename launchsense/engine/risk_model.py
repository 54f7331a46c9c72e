"""
Risk/Decision Model — deterministic weighted risk score.

Four behavioural checks, each adding a fixed weight when it trips:
- short sessions      (retention)   +30
- early-quit rate     (retention)   +25
- average deaths      (difficulty)  +25
- restart rate        (fun)         +20

The sum is clamped to [0, 100] and banded into GO / ITERATE / KILL.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from launchsense.decisions.schemas import Decision
from launchsense.schemas.telemetry import DecisionInput

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

SHORT_SESSION_MINUTES: float = 8.0
EARLY_QUIT_RATE_THRESHOLD: float = 0.4
AVG_DEATHS_THRESHOLD: float = 5.0
RESTART_RATE_THRESHOLD: float = 0.35

WEIGHT_SHORT_SESSIONS: float = 30.0
WEIGHT_EARLY_QUIT: float = 25.0
WEIGHT_DIFFICULTY: float = 25.0
WEIGHT_FRUSTRATION: float = 20.0

ITERATE_THRESHOLD: float = 40.0
KILL_THRESHOLD: float = 70.0

# Tie-break precedence for the dominant category
CATEGORY_PRECEDENCE: tuple[str, ...] = ("retention", "difficulty", "fun")


@dataclass(frozen=True)
class SessionMetrics:
    """Per-session averages over the reported session and its sub-sessions."""
    avg_playtime_min: float
    early_quit_rate: float
    avg_deaths: float
    restart_rate: float
    n_sessions: int

    @classmethod
    def from_input(cls, data: DecisionInput) -> "SessionMetrics":
        playtimes = [data.playtime] + [
            s.duration_sec for s in data.sessions if s.duration_sec is not None
        ]
        quits = [data.early_quit] + [
            s.early_quit for s in data.sessions if s.early_quit is not None
        ]
        deaths = [data.deaths] + [s.deaths for s in data.sessions if s.deaths is not None]
        restarts = [data.restarts] + [
            s.restarts for s in data.sessions if s.restarts is not None
        ]
        return cls(
            avg_playtime_min=(sum(playtimes) / len(playtimes)) / 60,
            early_quit_rate=sum(1 for q in quits if q) / len(quits),
            avg_deaths=sum(deaths) / len(deaths),
            restart_rate=sum(restarts) / len(restarts),
            n_sessions=1 + len(data.sessions),
        )


@dataclass(frozen=True)
class RiskAssessment:
    """
    Model output for one request — created once, never mutated.

    contributions holds the weight each category added before clamping.
    """
    risk_score: float
    decision: Decision
    primary_risk_category: str
    signals: list[str] = field(default_factory=list)
    contributions: dict[str, float] = field(default_factory=dict)
    metrics: Optional[SessionMetrics] = None

    def to_dict(self) -> dict:
        return {
            "risk_score": self.risk_score,
            "decision": self.decision.value,
            "primary_risk_category": self.primary_risk_category,
            "signals": list(self.signals),
            "contributions": dict(self.contributions),
        }


def decision_for_score(
    risk_score: float,
    iterate_threshold: float = ITERATE_THRESHOLD,
    kill_threshold: float = KILL_THRESHOLD,
) -> Decision:
    if risk_score >= kill_threshold:
        return Decision.KILL
    if risk_score >= iterate_threshold:
        return Decision.ITERATE
    return Decision.GO


class RiskModel:
    """Score a DecisionInput and label it GO / ITERATE / KILL."""

    def __init__(
        self,
        short_session_minutes: float = SHORT_SESSION_MINUTES,
        early_quit_rate_threshold: float = EARLY_QUIT_RATE_THRESHOLD,
        avg_deaths_threshold: float = AVG_DEATHS_THRESHOLD,
        restart_rate_threshold: float = RESTART_RATE_THRESHOLD,
        weights: Optional[dict[str, float]] = None,
        iterate_threshold: float = ITERATE_THRESHOLD,
        kill_threshold: float = KILL_THRESHOLD,
    ):
        self.short_session_minutes = short_session_minutes
        self.early_quit_rate_threshold = early_quit_rate_threshold
        self.avg_deaths_threshold = avg_deaths_threshold
        self.restart_rate_threshold = restart_rate_threshold
        self.weights = {
            "short_sessions": WEIGHT_SHORT_SESSIONS,
            "early_quit": WEIGHT_EARLY_QUIT,
            "difficulty": WEIGHT_DIFFICULTY,
            "frustration": WEIGHT_FRUSTRATION,
        }
        if weights:
            self.weights.update(weights)
        self.iterate_threshold = iterate_threshold
        self.kill_threshold = kill_threshold

    def assess(self, data: DecisionInput) -> RiskAssessment:
        m = SessionMetrics.from_input(data)
        contributions = {name: 0.0 for name in CATEGORY_PRECEDENCE}
        signals: list[str] = []

        if m.avg_playtime_min < self.short_session_minutes:
            contributions["retention"] += self.weights["short_sessions"]
            signals.append(
                f"Average session {m.avg_playtime_min:.1f} min is under "
                f"{self.short_session_minutes:g} min"
            )

        if m.early_quit_rate > self.early_quit_rate_threshold:
            contributions["retention"] += self.weights["early_quit"]
            signals.append(f"Early-quit rate {m.early_quit_rate:.0%} is elevated")

        if m.avg_deaths > self.avg_deaths_threshold:
            contributions["difficulty"] += self.weights["difficulty"]
            signals.append(f"Average {m.avg_deaths:.1f} deaths per session suggests a difficulty spike")

        if m.restart_rate > self.restart_rate_threshold:
            contributions["fun"] += self.weights["frustration"]
            signals.append(f"Restart rate {m.restart_rate:.2f} per session signals frustration")

        risk_score = max(0.0, min(100.0, sum(contributions.values())))
        decision = decision_for_score(risk_score, self.iterate_threshold, self.kill_threshold)
        category = self._dominant_category(contributions)

        logger.debug(
            "risk_assessed",
            game_id=data.game_id,
            risk_score=risk_score,
            decision=decision.value,
            primary_risk_category=category,
        )

        return RiskAssessment(
            risk_score=risk_score,
            decision=decision,
            primary_risk_category=category,
            signals=signals,
            contributions=contributions,
            metrics=m,
        )

    @staticmethod
    def _dominant_category(contributions: dict[str, float]) -> str:
        best = "none"
        best_value = 0.0
        # Strict > keeps the earlier category on ties
        for name in CATEGORY_PRECEDENCE:
            if contributions[name] > best_value:
                best, best_value = name, contributions[name]
        return best
