"""
Recommendation Generator Tests.
"""

from launchsense.decisions.recommendations import RecommendationGenerator
from launchsense.decisions.schemas import Decision, RecommendationPriority
from launchsense.engine.insights import DIFFICULTY_SPIKE, EARLY_ABANDONMENT, UNCLEAR, Insights


class TestRecommendationGenerator:
    def setup_method(self):
        self.generator = RecommendationGenerator()

    def test_healthy_go_has_no_actions(self):
        assert self.generator.generate(Decision.GO, 10, Insights(primary_risk=UNCLEAR)) == []

    def test_kill_actions_in_order(self):
        actions = self.generator.generate(Decision.KILL, 100, Insights(primary_risk=UNCLEAR))
        assert [a.action for a in actions] == [
            "Pause further development",
            "Fix core loop before adding content",
            "Do not scale user acquisition",
        ]
        assert [a.priority for a in actions] == [
            RecommendationPriority.CRITICAL,
            RecommendationPriority.CRITICAL,
            RecommendationPriority.WARNING,
        ]

    def test_iterate_with_early_abandonment(self):
        actions = self.generator.generate(Decision.ITERATE, 55, Insights(primary_risk=EARLY_ABANDONMENT))
        assert [a.action for a in actions] == [
            "Run another closed playtest after changes",
            "Simplify onboarding / tutorial",
        ]

    def test_difficulty_spike(self):
        actions = self.generator.generate(Decision.ITERATE, 45, Insights(primary_risk=DIFFICULTY_SPIKE))
        assert actions[-1].action == "Smooth early difficulty curve"
        assert actions[-1].priority == RecommendationPriority.MEDIUM

    def test_critical_risk_without_kill(self):
        actions = self.generator.generate(Decision.GO, 80)
        assert actions[0].priority == RecommendationPriority.CRITICAL
        assert actions[-1].action == "Do not scale user acquisition"

    def test_missing_risk_treated_as_zero(self):
        assert self.generator.generate(Decision.GO, None) == []
