"""
Rule Override Evaluator — authoritative decisions from the rule store.

Rules are evaluated as a priority-ordered, short-circuiting linear scan:
the first active rule (lowest priority value) whose range contains the
metric wins. This is not a best-match search.

Store failures are returned as an explicit RuleCheck error rather than
raised, so the orchestrator can choose lenient (fall through to the model)
or strict (fail the request) handling.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, TYPE_CHECKING

import structlog

from launchsense.decisions.schemas import RuleDefinition, RuleMatch
from launchsense.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from launchsense.store.base import DataStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RuleCheck:
    """
    Outcome of the rule step.

    - match set: a rule fired, the pipeline short-circuits
    - match None, error None: no override, normal fallthrough
    - error set: the store could not be read
    """
    match: Optional[RuleMatch] = None
    error: Optional[StoreUnavailableError] = None
    rules_evaluated: int = 0

    @property
    def matched(self) -> bool:
        return self.match is not None

    @property
    def store_failed(self) -> bool:
        return self.error is not None


def _in_range(value: float, rule: RuleDefinition) -> bool:
    if rule.min_value is not None and value < rule.min_value:
        return False
    if rule.max_value is not None and value > rule.max_value:
        return False
    return True


def order_rules(rules: Sequence[RuleDefinition]) -> list[RuleDefinition]:
    """Active rules by ascending priority; sort is stable so store order breaks ties."""
    return sorted((r for r in rules if r.active), key=lambda r: r.priority)


def match_rule(
    rules: Sequence[RuleDefinition],
    metrics: Mapping[str, float],
) -> Optional[RuleMatch]:
    """Return the first matching rule in priority order, or None."""
    for rule in order_rules(rules):
        raw = metrics.get(rule.rule_key)
        if raw is None:
            continue
        value = float(raw)
        if _in_range(value, rule):
            return RuleMatch(
                decision=rule.decision,
                matched_rule=rule.rule_key,
                value=value,
                range=(rule.min_value, rule.max_value),
                priority=rule.priority,
                description=rule.description,
            )
    return None


class RuleOverrideEvaluator:
    """Fetch active rules from the store and look for an override."""

    async def evaluate(
        self,
        store: "DataStore",
        metrics: Mapping[str, float],
    ) -> RuleCheck:
        try:
            rules = await store.fetch_active_rules()
        except Exception as exc:
            logger.warning("rule_store_unavailable", error=str(exc))
            return RuleCheck(
                error=StoreUnavailableError("fetch_active_rules", str(exc)),
            )

        if not rules:
            return RuleCheck()

        match = match_rule(rules, metrics)
        if match is not None:
            logger.info(
                "rule_override_matched",
                rule_key=match.matched_rule,
                value=match.value,
                priority=match.priority,
                decision=match.decision.value,
            )
        return RuleCheck(match=match, rules_evaluated=len(rules))
