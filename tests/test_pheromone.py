"""
Tests for the bounded pheromone field.
"""

import pytest
import numpy as np

from antclique.exceptions import ConfigError
from antclique.pheromone import PheromoneField


class TestPheromoneField:
    """Test evaporation, deposit and scoring."""

    def test_initialised_to_tau_max_by_default(self):
        field = PheromoneField(4, tau_min=0.1, tau_max=3.0)
        assert np.all(field.as_array() == 3.0)

    def test_explicit_initial_value(self):
        field = PheromoneField(3, tau_min=0.1, tau_max=3.0, initial=0.5)
        assert field.trail(0, 2) == 0.5

    def test_evaporate_clamps_below(self):
        field = PheromoneField(3, tau_min=0.5, tau_max=2.0, initial=1.0)
        field.evaporate(0.9)
        assert field.trail(0, 1) == pytest.approx(0.9)
        for _ in range(50):
            field.evaporate(0.5)
        assert np.all(field.as_array() == 0.5)

    def test_rho_one_keeps_trails(self):
        field = PheromoneField(3, tau_min=0.1, tau_max=2.0, initial=1.5)
        field.evaporate(1.0)
        assert np.all(field.as_array() == 1.5)

    def test_deposit_touches_only_clique_pairs(self):
        field = PheromoneField(5, tau_min=0.1, tau_max=10.0, initial=1.0)
        field.deposit([0, 2, 4], 0.5)
        trail = field.as_array()

        assert trail[0, 2] == pytest.approx(1.5)
        assert trail[4, 0] == pytest.approx(1.5)
        assert trail[2, 4] == pytest.approx(1.5)
        assert trail[0, 0] == 1.0
        assert trail[0, 1] == 1.0
        assert trail[1, 3] == 1.0
        assert np.array_equal(trail, trail.T)

    def test_deposit_clamps_above(self):
        field = PheromoneField(3, tau_min=0.1, tau_max=2.0, initial=1.8)
        field.deposit([0, 1], 1.0)
        assert field.trail(0, 1) == 2.0
        assert field.trail(1, 0) == 2.0

    def test_singleton_deposit_is_noop(self):
        field = PheromoneField(3, tau_min=0.1, tau_max=2.0, initial=1.0)
        field.deposit([1], 1.0)
        assert np.all(field.as_array() == 1.0)

    def test_bounds_hold_over_many_cycles(self, rng):
        field = PheromoneField(12, tau_min=0.05, tau_max=4.0)
        for _ in range(200):
            field.evaporate(0.8)
            members = rng.choice(12, size=rng.randint(2, 6), replace=False)
            field.deposit(members, float(rng.uniform(0.1, 3.0)))
            trail = field.as_array()
            assert trail.min() >= 0.05
            assert trail.max() <= 4.0

    def test_score_is_sum_over_clique(self):
        field = PheromoneField(4, tau_min=0.1, tau_max=10.0, initial=1.0)
        field.deposit([0, 1], 2.0)
        # trail(2, 0) = 1, trail(2, 1) = 1
        assert field.score(2, [0, 1]) == pytest.approx(2.0)
        # trail(1, 0) = 3, trail(1, 3) = 1
        assert field.score(1, [0, 3]) == pytest.approx(4.0)

    def test_score_of_empty_clique_is_neutral(self):
        field = PheromoneField(3, tau_min=0.1, tau_max=2.0)
        assert field.score(1, []) == 1.0
        assert list(field.scores(np.array([0, 2]), [])) == [1.0, 1.0]

    def test_scores_match_score(self):
        field = PheromoneField(5, tau_min=0.1, tau_max=10.0, initial=1.0)
        field.deposit([0, 1, 2], 1.5)
        candidates = np.array([2, 3, 4])
        expected = [field.score(v, [0, 1]) for v in candidates]
        assert np.allclose(field.scores(candidates, [0, 1]), expected)

    def test_as_array_is_a_read_only_copy(self):
        field = PheromoneField(2, tau_min=0.1, tau_max=2.0)
        trail = field.as_array()
        with pytest.raises(ValueError):
            trail[0, 1] = 0.0
        field.evaporate(0.5)
        assert trail[0, 1] == 2.0


class TestPheromoneValidation:
    """Test rejection of invalid parameters."""

    @pytest.mark.parametrize("tau_min,tau_max", [
        (1.0, 1.0),
        (2.0, 1.0),
        (-0.1, 1.0),
        (0.1, float("inf")),
        (float("nan"), 1.0),
    ])
    def test_invalid_bounds(self, tau_min, tau_max):
        with pytest.raises(ConfigError):
            PheromoneField(3, tau_min=tau_min, tau_max=tau_max)

    def test_initial_outside_bounds(self):
        with pytest.raises(ConfigError):
            PheromoneField(3, tau_min=0.1, tau_max=1.0, initial=1.5)

    @pytest.mark.parametrize("rho", [0.0, -0.5, 1.5])
    def test_invalid_rho(self, rho):
        field = PheromoneField(3, tau_min=0.1, tau_max=1.0)
        with pytest.raises(ConfigError):
            field.evaporate(rho)

    @pytest.mark.parametrize("amount", [0.0, -1.0, float("inf")])
    def test_invalid_deposit_amount(self, amount):
        field = PheromoneField(3, tau_min=0.1, tau_max=1.0)
        with pytest.raises(ValueError):
            field.deposit([0, 1], amount)
