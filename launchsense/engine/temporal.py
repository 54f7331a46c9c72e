"""
Temporal Analyzer — time-aware interpretation of past risk scores.

Input is a sequence of historical risk values, newest first.

Implements:
- Trend: mean of consecutive differences (v[i-1] - v[i])
- Volatility: population standard deviation, rounded
- Shock: jump between the two most recent values
- Stability: banding of shock + volatility
- Momentum: slope across the most recent window (feeds counterfactuals)
"""

import statistics
from dataclasses import dataclass
from typing import Sequence

# ── Configuration ─────────────────────────────────────────────────────────

MIN_POINTS: int = 3
TREND_THRESHOLD: float = 2.0
SHOCK_THRESHOLD: float = 25.0
STABLE_VOLATILITY_MAX: float = 8.0      # below → High stability
UNSTABLE_VOLATILITY_MIN: float = 18.0   # above → Low stability

MOMENTUM_WINDOW: int = 7
MOMENTUM_DIRECTION_THRESHOLD: float = 1.0
MOMENTUM_MEDIUM: float = 2.0
MOMENTUM_STRONG: float = 4.0


@dataclass(frozen=True)
class TemporalProfile:
    trend: str          # "IMPROVING" | "DECLINING" | "STABLE"
    volatility: int
    shock: bool
    stability: str      # "Low" | "Medium" | "High"

    def to_dict(self) -> dict:
        return {
            "trend": self.trend,
            "volatility": self.volatility,
            "shock": self.shock,
            "stability": self.stability,
        }


@dataclass(frozen=True)
class MomentumProfile:
    direction: str      # "UP" | "DOWN" | "FLAT"
    strength: str       # "WEAK" | "MEDIUM" | "STRONG"
    slope: float        # positive → risk rising

    def to_dict(self) -> dict:
        return {"direction": self.direction, "strength": self.strength, "slope": self.slope}


NEUTRAL_PROFILE = TemporalProfile(trend="STABLE", volatility=0, shock=False, stability="Medium")
FLAT_MOMENTUM = MomentumProfile(direction="FLAT", strength="WEAK", slope=0.0)


class TemporalAnalyzer:
    """Trend / volatility / shock analysis over a risk history."""

    def __init__(
        self,
        min_points: int = MIN_POINTS,
        trend_threshold: float = TREND_THRESHOLD,
        shock_threshold: float = SHOCK_THRESHOLD,
    ):
        if min_points < 2:
            raise ValueError(f"min_points must be at least 2, got {min_points}")
        self.min_points = min_points
        self.trend_threshold = trend_threshold
        self.shock_threshold = shock_threshold

    def analyze(self, values: Sequence[float]) -> TemporalProfile:
        if len(values) < self.min_points:
            return NEUTRAL_PROFILE

        diffs = [values[i - 1] - values[i] for i in range(1, len(values))]
        avg_diff = sum(diffs) / len(diffs)

        if avg_diff > self.trend_threshold:
            trend = "IMPROVING"
        elif avg_diff < -self.trend_threshold:
            trend = "DECLINING"
        else:
            trend = "STABLE"

        volatility = round(statistics.pstdev(values))
        shock = abs(values[0] - values[1]) > self.shock_threshold

        if shock or volatility > UNSTABLE_VOLATILITY_MIN:
            stability = "Low"
        elif volatility < STABLE_VOLATILITY_MAX:
            stability = "High"
        else:
            stability = "Medium"

        return TemporalProfile(
            trend=trend,
            volatility=volatility,
            shock=shock,
            stability=stability,
        )

    def momentum(self, values: Sequence[float]) -> MomentumProfile:
        """Slope from the oldest to the newest value in the recent window."""
        window = list(values[:MOMENTUM_WINDOW])
        if len(window) < self.min_points:
            return FLAT_MOMENTUM

        slope = round((window[0] - window[-1]) / len(window), 2)

        direction = "FLAT"
        if slope > MOMENTUM_DIRECTION_THRESHOLD:
            direction = "UP"
        elif slope < -MOMENTUM_DIRECTION_THRESHOLD:
            direction = "DOWN"

        strength = "WEAK"
        if abs(slope) > MOMENTUM_STRONG:
            strength = "STRONG"
        elif abs(slope) > MOMENTUM_MEDIUM:
            strength = "MEDIUM"

        return MomentumProfile(direction=direction, strength=strength, slope=slope)
