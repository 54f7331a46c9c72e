"""
Confidence Scorer — how much should we trust this decision?

Pure function of (signal levels, decision source, weight table):
    start at 0.5
    HIGH   → +0.15 × weight
    LOW    → −0.05 × weight
    MEDIUM → neutral
    rule-sourced decisions get a flat +0.2
Rounded to two decimals and clamped to [0, 1].
"""

from typing import Mapping, Optional

from launchsense.engine.signals import SignalLevel

BASE_CONFIDENCE: float = 0.5
HIGH_INCREMENT: float = 0.15
LOW_DECREMENT: float = 0.05
RULE_SOURCE_BOOST: float = 0.2
DEFAULT_WEIGHT: float = 1.0

RULE_SOURCES: frozenset[str] = frozenset({"DB_RULE", "RULE_ENGINE"})


def calculate_confidence(
    signals: Mapping[str, SignalLevel],
    source: str,
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    weights = weights or {}
    score = BASE_CONFIDENCE

    for key, level in signals.items():
        weight = weights.get(key, DEFAULT_WEIGHT)
        if level == SignalLevel.HIGH:
            score += HIGH_INCREMENT * weight
        elif level == SignalLevel.LOW:
            score -= LOW_DECREMENT * weight

    if str(source) in RULE_SOURCES:
        score += RULE_SOURCE_BOOST

    return min(1.0, max(0.0, round(score, 2)))
