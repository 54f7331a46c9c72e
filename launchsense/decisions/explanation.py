"""
Explanation Builder — why did we reach this decision?

Accumulates weighted reasons from the raw telemetry, ranks them by impact
and keeps the top three. Aggregate confidence grows with total impact.
"""

import uuid
from typing import Mapping, Optional

from launchsense.decisions.schemas import Decision, Explanation, Reason
from launchsense.engine.signals import SignalLevel
from launchsense.schemas.telemetry import DecisionInput

MAX_REASONS: int = 3
BASE_CONFIDENCE: float = 0.4
HEALTHY_IMPACT: float = 0.1

DEATHS_TRIGGER: int = 3
SESSION_LENGTH_TRIGGER_SEC: float = 120.0
RETRIES_TRIGGER: int = 2


def build_reason(levels: Mapping[str, SignalLevel], decision: Decision) -> str:
    """One-sentence summary naming every HIGH signal."""
    high = [k.replace("_", " ") for k, v in levels.items() if v == SignalLevel.HIGH]
    if not high:
        return f"Decision {decision.value} based on overall healthy signals."
    return f"Decision {decision.value} due to high {' and '.join(high)}."


class ExplanationBuilder:

    def __init__(self, max_reasons: int = MAX_REASONS):
        self.max_reasons = max_reasons

    def build(
        self,
        data: DecisionInput,
        decision: Decision,
        levels: Optional[Mapping[str, SignalLevel]] = None,
    ) -> Explanation:
        reasons: list[Reason] = []

        if data.deaths > DEATHS_TRIGGER:
            reasons.append(Reason(factor="deaths", impact=min(0.4, data.deaths / 10)))

        if data.playtime < SESSION_LENGTH_TRIGGER_SEC:
            shortfall = (SESSION_LENGTH_TRIGGER_SEC - data.playtime) / SESSION_LENGTH_TRIGGER_SEC
            reasons.append(Reason(factor="session_length", impact=round(min(0.3, shortfall), 4)))

        if data.restarts > RETRIES_TRIGGER:
            reasons.append(Reason(factor="retries", impact=min(0.2, data.restarts / 5)))

        if not reasons:
            reasons.append(Reason(factor="healthy_engagement", impact=HEALTHY_IMPACT))

        total_impact = sum(r.impact for r in reasons)
        confidence = round(min(1.0, BASE_CONFIDENCE + total_impact), 2)

        ranked = sorted(reasons, key=lambda r: r.impact, reverse=True)[: self.max_reasons]

        return Explanation(
            explanation_id=str(uuid.uuid4()),
            decision=decision,
            reasons=ranked,
            confidence=confidence,
            summary=build_reason(levels or {}, decision),
        )
