"""
Insight Extractor — detects the dominant qualitative risk pattern.

Advisory only: the result feeds the recommendation generator, never the
risk score.
"""

from dataclasses import dataclass, field

import structlog

from launchsense.schemas.telemetry import DecisionInput

logger = structlog.get_logger(__name__)

EARLY_EXIT_SECONDS: float = 180.0
EARLY_EXIT_MAJORITY: float = 0.5
DEATH_EVENT_TYPE: str = "death"
DEATH_SPIKE_COUNT: int = 3

EARLY_ABANDONMENT = "early_abandonment"
DIFFICULTY_SPIKE = "difficulty_spike"
UNCLEAR = "unclear"


@dataclass(frozen=True)
class Insights:
    primary_risk: str
    signals: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"primary_risk": self.primary_risk, "signals": list(self.signals)}


class InsightExtractor:
    """Scan attached sessions and events for abandonment and difficulty."""

    def extract(self, data: DecisionInput) -> Insights:
        primary_risk = None
        signals: list[str] = []

        sessions = data.sessions
        if sessions:
            early_exits = [
                s for s in sessions
                if s.duration_sec is not None and s.duration_sec < EARLY_EXIT_SECONDS
            ]
            if len(early_exits) / len(sessions) > EARLY_EXIT_MAJORITY:
                primary_risk = EARLY_ABANDONMENT
                signals.append("Majority of players exit within first 3 minutes")

        deaths = [e for e in data.events if e.type == DEATH_EVENT_TYPE]
        if len(deaths) >= DEATH_SPIKE_COUNT:
            # Abandonment takes precedence as the primary pattern
            if primary_risk is None:
                primary_risk = DIFFICULTY_SPIKE
            signals.append("Repeated early deaths indicate difficulty spike")

        if primary_risk is None:
            primary_risk = UNCLEAR
            signals.append("No dominant risk pattern detected yet")

        logger.debug("insights_extracted", game_id=data.game_id, primary_risk=primary_risk)
        return Insights(primary_risk=primary_risk, signals=signals)
