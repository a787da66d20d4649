from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from mdpsolve.utils.decision_process import MDP, SparseCat

LEFT, RIGHT, STAY = "left", "right", "stay"


class ChainMDP(MDP[int, str]):
    """Four states in a row; entering the last (terminal) one pays 10, every other move costs 1.

    The leftmost state cannot move left. Every transition also lists an
    unreachable ``"nowhere"`` state with zero probability, which has no index
    and no reward.
    """

    def __init__(self, n: int = 4, discount_factor: float = 0.9):
        self.n = n
        self.discount_factor = discount_factor
        self._index: Dict[int, int] = {s: s for s in range(n)}

    def discount(self) -> float:
        return self.discount_factor

    def states(self) -> List[int]:
        return list(range(self.n))

    def actions(self, state: Optional[int] = None) -> List[str]:
        if state == 0:
            return [RIGHT, STAY]
        return [LEFT, RIGHT, STAY]

    def state_index(self, state: int) -> int:
        return self._index[state]

    def action_index(self, action: str) -> int:
        return [LEFT, RIGHT, STAY].index(action)

    def is_terminal(self, state: int) -> bool:
        return state == self.n - 1

    def transition(self, state: int, action: str):
        nxt = {LEFT: state - 1, RIGHT: state + 1, STAY: state}[action]
        return SparseCat([nxt, "nowhere"], [1.0, 0.0])

    def reward(self, state: int, action: str, next_state: int) -> float:
        if next_state == "nowhere":
            raise AssertionError("zero-probability transition was evaluated")
        return 10.0 if next_state == self.n - 1 else -1.0


def reference_q_matrix(mdp: MDP, tol: float = 1e-12, max_iters: int = 10_000) -> np.ndarray:
    """Q-matrix at the fixed point, from synchronous (Jacobi) backups on dense arrays."""
    states = mdp.ordered_states()
    ns, na = len(states), len(mdp.ordered_actions())
    T = np.zeros((ns, na, ns))
    R = np.zeros((ns, na))
    terminal = np.array([mdp.is_terminal(s) for s in states])
    for i, s in enumerate(states):
        if terminal[i]:
            continue
        for a in mdp.actions(s):
            ia = mdp.action_index(a)
            for sp, p in mdp.transition(s, a).weighted_iterator():
                if p == 0.0:
                    continue
                T[i, ia, mdp.state_index(sp)] += p
                R[i, ia] += p * mdp.reward(s, a, sp)

    gamma = mdp.discount()
    v = np.zeros(ns)
    for _ in range(max_iters):
        q = R + gamma * (T @ v)
        q[terminal] = 0.0
        v_new = q.max(axis=1)
        diff = np.max(np.abs(v_new - v))
        v = v_new
        if diff < tol:
            break
    q = R + gamma * (T @ v)
    q[terminal] = 0.0
    return q


class ReversedChainMDP(ChainMDP):
    """Chain whose terminal state comes first, so each state in a sweep reads the value its left neighbour got in that same sweep.

    Entering state 0 pays 10, every other move costs 1. The rightmost state
    cannot move right.
    """

    def actions(self, state: Optional[int] = None) -> List[str]:
        if state == self.n - 1:
            return [LEFT, STAY]
        return [LEFT, RIGHT, STAY]

    def is_terminal(self, state: int) -> bool:
        return state == 0

    def reward(self, state: int, action: str, next_state: int) -> float:
        if next_state == "nowhere":
            raise AssertionError("zero-probability transition was evaluated")
        return 10.0 if next_state == 0 else -1.0
