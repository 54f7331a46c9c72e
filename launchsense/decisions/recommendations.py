"""
Recommendation Generator — what should the studio do next?

An append-only rule table keyed on decision, risk score and insight.
Every rule that applies fires; order is significant because consumers
may only read the first few entries.
"""

from typing import Optional

import structlog

from launchsense.decisions.schemas import Decision, Recommendation, RecommendationPriority
from launchsense.engine.insights import DIFFICULTY_SPIKE, EARLY_ABANDONMENT, Insights

logger = structlog.get_logger(__name__)

CRITICAL_RISK: float = 75.0
GUARDRAIL_RISK: float = 60.0


class RecommendationGenerator:

    def generate(
        self,
        decision: Decision,
        risk_score: Optional[float],
        insights: Optional[Insights] = None,
    ) -> list[Recommendation]:
        actions: list[Recommendation] = []
        risk = risk_score or 0.0
        primary_risk = insights.primary_risk if insights else None

        if decision == Decision.KILL or risk > CRITICAL_RISK:
            actions.append(Recommendation(
                priority=RecommendationPriority.CRITICAL,
                action="Pause further development",
                reason="High early risk detected with low engagement signals",
            ))
            actions.append(Recommendation(
                priority=RecommendationPriority.CRITICAL,
                action="Fix core loop before adding content",
                reason="Players are exiting before engagement stabilizes",
            ))

        if decision == Decision.ITERATE:
            actions.append(Recommendation(
                priority=RecommendationPriority.HIGH,
                action="Run another closed playtest after changes",
                reason="Risk patterns need validation after iteration",
            ))

        if primary_risk == EARLY_ABANDONMENT:
            actions.append(Recommendation(
                priority=RecommendationPriority.HIGH,
                action="Simplify onboarding / tutorial",
                reason="Majority of exits happen before core loop is learned",
            ))

        if primary_risk == DIFFICULTY_SPIKE:
            actions.append(Recommendation(
                priority=RecommendationPriority.MEDIUM,
                action="Smooth early difficulty curve",
                reason="Repeated early deaths detected",
            ))

        if risk > GUARDRAIL_RISK:
            actions.append(Recommendation(
                priority=RecommendationPriority.WARNING,
                action="Do not scale user acquisition",
                reason="Scaling before retention stabilizes increases burn",
            ))

        logger.debug("recommendations_generated", decision=decision.value, count=len(actions))
        return actions
