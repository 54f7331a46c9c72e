"""
Counterfactual Simulator Tests.
"""

import pytest

from launchsense.decisions.schemas import Decision
from launchsense.engine.counterfactual import (
    CounterfactualSimulator,
    SimulatedOutcome,
    regret_score,
    select_safest,
)


def _outcome(regret: float) -> SimulatedOutcome:
    return SimulatedOutcome(expected_risk=0.1, burn=0.1, upside=0.1, confidence=0.5, regret=regret)


class TestRegret:
    def test_formula(self):
        """0.1×3 + 0.85×3 + 0.05×4 = 3.05"""
        assert regret_score(0.05, 0.1, 0.15) == pytest.approx(3.05)

    def test_clamped(self):
        assert regret_score(5.0, 5.0, -5.0) == 10.0
        assert regret_score(0.0, 0.0, 5.0) == 0.0


class TestSelectSafest:
    def test_exact_tie_prefers_iterate(self):
        outcomes = {d: _outcome(3.0) for d in Decision}
        assert select_safest(outcomes) == Decision.ITERATE

    def test_kill_beats_go_on_tie(self):
        outcomes = {Decision.GO: _outcome(2.0), Decision.KILL: _outcome(2.0)}
        assert select_safest(outcomes) == Decision.KILL

    def test_lowest_regret_wins(self):
        outcomes = {
            Decision.GO: _outcome(1.0),
            Decision.ITERATE: _outcome(2.0),
            Decision.KILL: _outcome(3.0),
        }
        assert select_safest(outcomes) == Decision.GO

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            select_safest({})


class TestCounterfactualSimulator:
    def setup_method(self):
        self.simulator = CounterfactualSimulator()

    def test_simulates_all_three(self):
        result = self.simulator.simulate(risk=0.5, confidence=0.6, momentum=0.0)
        assert set(result.outcomes) == set(Decision)

    def test_low_risk_iterate_is_safest(self):
        """ITERATE regret 2.7 < KILL 3.05 < GO 3.87."""
        result = self.simulator.simulate(risk=0.0, confidence=0.5, momentum=0.0)
        assert result.outcomes[Decision.ITERATE].regret == pytest.approx(2.7)
        assert result.outcomes[Decision.KILL].regret == pytest.approx(3.05)
        assert result.outcomes[Decision.GO].regret == pytest.approx(3.87)
        assert result.safest_decision == Decision.ITERATE
        assert result.regret_floor == 2.7

    def test_high_risk_kill_is_safest(self):
        result = self.simulator.simulate(risk=1.0, confidence=0.95, momentum=0.0)
        assert result.safest_decision == Decision.KILL

    def test_kill_regret_is_fixed(self):
        a = self.simulator.simulate(risk=0.1, confidence=0.3, momentum=-5)
        b = self.simulator.simulate(risk=0.9, confidence=0.9, momentum=5)
        assert a.outcomes[Decision.KILL].regret == b.outcomes[Decision.KILL].regret

    def test_rising_momentum_raises_go_risk(self):
        flat = self.simulator.simulate(risk=0.3, confidence=0.5, momentum=0.0)
        rising = self.simulator.simulate(risk=0.3, confidence=0.5, momentum=4.0)
        assert rising.outcomes[Decision.GO].expected_risk > flat.outcomes[Decision.GO].expected_risk

    def test_inputs_clamped(self):
        result = self.simulator.simulate(risk=7.0, confidence=5.0, momentum=99.0)
        for outcome in result.outcomes.values():
            assert 0.0 <= outcome.expected_risk <= 1.0
            assert 0.2 <= outcome.confidence <= 0.95

    def test_to_dict_shape(self):
        d = self.simulator.simulate(risk=0.0, confidence=0.5, momentum=0.0).to_dict()
        assert set(d["simulations"]) == {"GO", "ITERATE", "KILL"}
        assert d["safest_decision"] == "ITERATE"
