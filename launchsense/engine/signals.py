"""
Signal Deriver — converts raw gameplay telemetry into comparable signals.

Two views of the same input:
- normalized: numeric rates that can be compared across session lengths
- levels: categorical LOW / MEDIUM / HIGH severity per raw metric
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Sequence

from launchsense.schemas.telemetry import DecisionInput, HistoryRecord, risk_values

# ── Configuration ─────────────────────────────────────────────────────────

DEATH_THRESHOLDS: tuple[float, float] = (3, 6)        # (medium, high)
RESTART_THRESHOLDS: tuple[float, float] = (2, 5)
# Inverted: shorter playtime is more severe
PLAYTIME_THRESHOLDS_SEC: tuple[float, float] = (300, 120)
BASELINE_RISK: float = 50.0


class SignalLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class DerivedSignals:
    """Normalized rates plus categorical levels for one request."""
    normalized: dict[str, float] = field(default_factory=dict)
    levels: dict[str, SignalLevel] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "normalized": dict(self.normalized),
            "levels": {k: v.value for k, v in self.levels.items()},
        }


def classify_level(value: float, medium: float, high: float) -> SignalLevel:
    """Map a value onto LOW/MEDIUM/HIGH with inclusive lower bounds."""
    if value >= high:
        return SignalLevel.HIGH
    if value >= medium:
        return SignalLevel.MEDIUM
    return SignalLevel.LOW


class SignalDeriver:
    """Derive normalized and categorical signals from a DecisionInput."""

    def normalize(
        self,
        data: DecisionInput,
        history: Optional[Sequence[HistoryRecord]] = None,
    ) -> dict[str, float]:
        # Floor at one minute so near-zero playtime can't blow up the rates
        playtime_min = max(data.playtime / 60, 1)

        signals = {
            "deaths_per_min": data.deaths / playtime_min,
            "restarts_per_min": data.restarts / playtime_min,
            "early_exit_flag": 1.0 if data.early_quit else 0.0,
            "session_depth": float(len(data.sessions)),
        }

        values = risk_values(list(history or []))
        if values:
            avg_risk = sum(values) / len(values)
            signals["deviation_from_baseline"] = abs(avg_risk - BASELINE_RISK) / BASELINE_RISK
        else:
            signals["deviation_from_baseline"] = 0.0

        return signals

    def classify(self, data: DecisionInput) -> dict[str, SignalLevel]:
        medium_pt, high_pt = PLAYTIME_THRESHOLDS_SEC
        return {
            "early_quit": SignalLevel.HIGH if data.early_quit else SignalLevel.LOW,
            "deaths": classify_level(data.deaths, *DEATH_THRESHOLDS),
            "playtime": classify_level(-data.playtime, -medium_pt, -high_pt),
            "restarts": classify_level(data.restarts, *RESTART_THRESHOLDS),
        }

    def derive(
        self,
        data: DecisionInput,
        history: Optional[Sequence[HistoryRecord]] = None,
    ) -> DerivedSignals:
        return DerivedSignals(
            normalized=self.normalize(data, history),
            levels=self.classify(data),
        )
