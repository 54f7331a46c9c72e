"""
Explanation Builder Tests.
"""

import pytest

from launchsense.decisions.explanation import ExplanationBuilder, build_reason
from launchsense.decisions.schemas import Decision
from launchsense.engine.signals import SignalLevel
from launchsense.schemas.telemetry import DecisionInput


def _input(**overrides) -> DecisionInput:
    data = {
        "game_id": "g1",
        "player_id": "p1",
        "session_id": "s1",
        "playtime": 600,
        "deaths": 0,
        "restarts": 0,
        "early_quit": False,
    }
    data.update(overrides)
    return DecisionInput(**data)


class TestBuildReason:
    def test_names_high_signals(self):
        levels = {"deaths": SignalLevel.HIGH, "early_quit": SignalLevel.HIGH, "playtime": SignalLevel.LOW}
        assert build_reason(levels, Decision.KILL) == "Decision KILL due to high deaths and early quit."

    def test_healthy_summary(self):
        assert build_reason({}, Decision.GO) == "Decision GO based on overall healthy signals."


class TestExplanationBuilder:
    def setup_method(self):
        self.builder = ExplanationBuilder()

    def test_healthy_engagement_fallback(self):
        explanation = self.builder.build(_input(), Decision.GO)
        assert [r.factor for r in explanation.reasons] == ["healthy_engagement"]
        assert explanation.confidence == 0.5

    def test_reasons_ranked_by_impact(self):
        explanation = self.builder.build(_input(deaths=5, playtime=60, restarts=3), Decision.KILL)
        assert [r.factor for r in explanation.reasons] == ["deaths", "session_length", "retries"]
        assert [r.impact for r in explanation.reasons] == pytest.approx([0.4, 0.3, 0.2])
        assert explanation.confidence == 1.0

    def test_impacts_are_capped(self):
        explanation = self.builder.build(_input(deaths=50, restarts=50), Decision.KILL)
        impacts = {r.factor: r.impact for r in explanation.reasons}
        assert impacts == {"deaths": 0.4, "retries": 0.2}
        assert explanation.confidence == 1.0

    def test_partial_reasons_confidence(self):
        """deaths 4 → 0.4 impact → confidence 0.8."""
        explanation = self.builder.build(_input(deaths=4), Decision.ITERATE)
        assert explanation.confidence == 0.8

    def test_max_reasons_respected(self):
        builder = ExplanationBuilder(max_reasons=1)
        explanation = builder.build(_input(deaths=5, playtime=60, restarts=3), Decision.KILL)
        assert len(explanation.reasons) == 1
        assert explanation.reasons[0].factor == "deaths"

    def test_fresh_id_per_build(self):
        a = self.builder.build(_input(), Decision.GO)
        b = self.builder.build(_input(), Decision.GO)
        assert a.explanation_id != b.explanation_id
