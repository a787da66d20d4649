from __future__ import annotations

import pytest

from mdpsolve.envs.tiger import LISTEN, OPEN_LEFT, TIGER_LEFT, TIGER_RIGHT, TigerPOMDP
from mdpsolve.utils.decision_process import MDP, Deterministic, SparseCat, UnderlyingMDP


def test_deterministic():
    d = Deterministic("a")

    assert list(d.weighted_iterator()) == [("a", 1.0)]
    assert d.support() == ("a",)
    assert d.pdf("a") == 1.0
    assert d.pdf("b") == 0.0


def test_sparse_cat_keeps_order_and_zeros():
    d = SparseCat(["x", "y", "z"], [0.5, 0.0, 0.5])

    assert list(d.weighted_iterator()) == [("x", 0.5), ("y", 0.0), ("z", 0.5)]
    assert d.support() == ["x", "y", "z"]
    assert d.pdf("y") == 0.0
    assert d.pdf("missing") == 0.0


def test_sparse_cat_repeated_values_accumulate():
    assert SparseCat(["x", "x", "y"], [0.25, 0.25, 0.5]).pdf("x") == 0.5


@pytest.mark.parametrize("values, probs", [(["x", "y"], [1.0]), (["x", "y"], [1.5, -0.5])])
def test_sparse_cat_rejects_bad_input(values, probs):
    with pytest.raises(ValueError):
        SparseCat(values, probs)


def test_incomplete_model_cannot_be_instantiated():
    class NoTransitions(MDP):
        def discount(self):
            return 0.9

        def states(self):
            return [0]

        def actions(self, state=None):
            return ["a"]

        def state_index(self, state):
            return 0

        def action_index(self, action):
            return 0

    with pytest.raises(TypeError):
        NoTransitions()


def test_underlying_mdp_forwards_dynamics():
    pomdp = TigerPOMDP()
    mdp = UnderlyingMDP(pomdp)

    assert isinstance(mdp, MDP)
    assert mdp.discount() == 0.95
    assert mdp.ordered_states() == [TIGER_LEFT, TIGER_RIGHT]
    assert mdp.ordered_actions() == pomdp.actions()
    assert mdp.state_index(TIGER_RIGHT) == 1
    assert mdp.action_index(OPEN_LEFT) == 1
    assert mdp.reward(TIGER_LEFT, OPEN_LEFT, TIGER_LEFT) == -100.0
    assert list(mdp.transition(TIGER_LEFT, LISTEN).weighted_iterator()) == [(TIGER_LEFT, 1.0)]
    assert not mdp.is_terminal(TIGER_LEFT)


def test_tiger_observations():
    pomdp = TigerPOMDP()

    assert pomdp.observation(LISTEN, TIGER_LEFT).pdf("hear-left") == pytest.approx(0.85)
    assert pomdp.observation(OPEN_LEFT, TIGER_LEFT).pdf("hear-left") == 0.5
