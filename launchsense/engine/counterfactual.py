"""
Counterfactual Simulator — what if we chose differently?

Simulates GO, ITERATE and KILL from the same base (risk, confidence,
momentum) using fixed response functions, scores each outcome by regret
and names the minimum-regret option.

    regret = clamp(burn×3 + (1 − upside)×3 + expected_risk×4, 0, 10)

Decision support only: the verdict never overrides the risk model.
"""

from dataclasses import dataclass, field
from typing import Mapping

import structlog

from launchsense.decisions.schemas import Decision

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

RISK_BOUNDS: tuple[float, float] = (0.0, 1.0)
CONFIDENCE_BOUNDS: tuple[float, float] = (0.2, 0.95)
MOMENTUM_BOUNDS: tuple[float, float] = (-10.0, 10.0)
REGRET_BOUNDS: tuple[float, float] = (0.0, 10.0)

# Exact regret ties resolve in this order
TIE_BREAK_ORDER: tuple[Decision, ...] = (Decision.ITERATE, Decision.KILL, Decision.GO)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class SimulatedOutcome:
    expected_risk: float
    burn: float
    upside: float
    confidence: float
    regret: float

    def to_dict(self) -> dict:
        return {
            "expected_risk": self.expected_risk,
            "burn": self.burn,
            "upside": self.upside,
            "confidence": self.confidence,
            "regret": self.regret,
        }


@dataclass(frozen=True)
class CounterfactualSet:
    outcomes: dict[Decision, SimulatedOutcome] = field(default_factory=dict)
    safest_decision: Decision = Decision.ITERATE
    regret_floor: float = 0.0

    def to_dict(self) -> dict:
        return {
            "simulations": {d.value: o.to_dict() for d, o in self.outcomes.items()},
            "safest_decision": self.safest_decision.value,
            "regret_floor": self.regret_floor,
        }


def regret_score(expected_risk: float, burn: float, upside: float) -> float:
    raw = burn * 3 + (1 - upside) * 3 + expected_risk * 4
    return _clamp(raw, REGRET_BOUNDS)


def select_safest(outcomes: Mapping[Decision, SimulatedOutcome]) -> Decision:
    """Minimum-regret decision; strict < keeps the earlier option on ties."""
    safest = None
    minimum = float("inf")
    for decision in TIE_BREAK_ORDER:
        outcome = outcomes.get(decision)
        if outcome is not None and outcome.regret < minimum:
            safest, minimum = decision, outcome.regret
    if safest is None:
        raise ValueError("no simulated outcomes to compare")
    return safest


class CounterfactualSimulator:
    """Regret-minimizing comparison of GO / ITERATE / KILL."""

    def simulate(self, risk: float, confidence: float, momentum: float) -> CounterfactualSet:
        risk = _clamp(risk, RISK_BOUNDS)
        confidence = _clamp(confidence, CONFIDENCE_BOUNDS)
        momentum = _clamp(momentum, MOMENTUM_BOUNDS)

        outcomes = {
            Decision.GO: self._outcome(
                expected_risk=_clamp(risk + 0.18 + momentum * 0.05, RISK_BOUNDS),
                burn=0.9,
                upside=0.85,
                confidence=_clamp(confidence - 0.15, CONFIDENCE_BOUNDS),
            ),
            Decision.ITERATE: self._outcome(
                expected_risk=_clamp(risk - 0.25, RISK_BOUNDS),
                burn=0.5,
                upside=0.6,
                confidence=_clamp(confidence + 0.1, CONFIDENCE_BOUNDS),
            ),
            Decision.KILL: self._outcome(
                expected_risk=0.05,
                burn=0.1,
                upside=0.15,
                confidence=_clamp(confidence + 0.05, CONFIDENCE_BOUNDS),
            ),
        }

        safest = select_safest(outcomes)
        logger.debug(
            "counterfactuals_simulated",
            safest_decision=safest.value,
            regrets={d.value: o.regret for d, o in outcomes.items()},
        )
        return CounterfactualSet(
            outcomes=outcomes,
            safest_decision=safest,
            regret_floor=round(outcomes[safest].regret, 2),
        )

    @staticmethod
    def _outcome(expected_risk: float, burn: float, upside: float, confidence: float) -> SimulatedOutcome:
        return SimulatedOutcome(
            expected_risk=round(expected_risk, 4),
            burn=burn,
            upside=upside,
            confidence=round(confidence, 4),
            regret=round(regret_score(expected_risk, burn, upside), 4),
        )
