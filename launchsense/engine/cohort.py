"""
Cohort Comparator — where does this request sit among past decisions?

Percentile of the current risk score within the game's historical risk
scores. Needs at least MIN_COHORT_SIZE past values; otherwise it reports
INSUFFICIENT_DATA instead of failing.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

MIN_COHORT_SIZE: int = 5
WORSE_PERCENTILE: float = 0.8
BETTER_PERCENTILE: float = 0.2


@dataclass(frozen=True)
class CohortComparison:
    relative_risk: Optional[float]
    comparison: str

    def to_dict(self) -> dict:
        return {"relative_risk": self.relative_risk, "comparison": self.comparison}


def percentile_rank(value: float, values: Sequence[float]) -> Optional[float]:
    """Fraction of values less than or equal to value, two decimals."""
    if not values:
        return None
    count = sum(1 for v in values if v <= value)
    return round(count / len(values), 2)


class CohortComparator:

    def __init__(self, min_size: int = MIN_COHORT_SIZE):
        self.min_size = min_size

    def compare(self, risk_score: float, values: Sequence[float]) -> CohortComparison:
        if len(values) < self.min_size:
            return CohortComparison(relative_risk=None, comparison="INSUFFICIENT_DATA")

        pct = percentile_rank(risk_score, values)
        label = "AVERAGE"
        if pct >= WORSE_PERCENTILE:
            label = "WORSE_THAN_MOST"
        elif pct <= BETTER_PERCENTILE:
            label = "BETTER_THAN_MOST"

        return CohortComparison(relative_risk=pct, comparison=label)
