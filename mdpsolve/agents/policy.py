from __future__ import annotations

from typing import Any, List, Optional

import numpy as np

from mdpsolve.utils.decision_process import DecisionProcess


class ValueIterationPolicy:
    """Policy produced by value iteration.

    Holds the utility vector, the policy vector (one action index per state)
    and, when requested, the (states x actions) Q-matrix. Lookups accept
    domain states and actions and are resolved through the model's
    ``state_index``/``action_index``. The arrays are read-only.

    Attributes:
        mdp: Model the policy was computed for.
        qmat: Q-matrix, or ``None`` when Q-values were not kept.
        util: Utility of each state, indexed like ``mdp.ordered_states()``.
        policy: Action index chosen in each state.
        action_map: ``mdp.ordered_actions()``, to turn indices back into actions.
        include_q: Whether ``qmat`` is available.
        iterations: Number of sweeps run by the solver (0 if not solved).
        residual: Bellman residual of the last sweep (``inf`` if not solved).
        residual_tolerance: Tolerance the residual was compared against.
    """

    def __init__(
        self,
        mdp: DecisionProcess,
        util: np.ndarray,
        policy: np.ndarray,
        qmat: Optional[np.ndarray] = None,
        iterations: int = 0,
        residual: float = float("inf"),
        residual_tolerance: float = 0.0,
    ):
        self.mdp = mdp
        self.action_map: List[Any] = list(mdp.ordered_actions())
        ns = len(mdp.ordered_states())
        na = len(self.action_map)

        util = np.array(util, dtype=np.float64)
        policy = np.array(policy, dtype=np.int64)
        if util.shape != (ns,):
            raise ValueError(f"Utility vector must have shape ({ns},), got {util.shape}")
        if policy.shape != (ns,):
            raise ValueError(f"Policy vector must have shape ({ns},), got {policy.shape}")
        if ns and (policy.min() < 0 or policy.max() >= na):
            raise ValueError(f"Policy entries must be action indices in [0, {na})")
        if qmat is not None:
            qmat = np.array(qmat, dtype=np.float64)
            if qmat.shape != (ns, na):
                raise ValueError(f"Q-matrix must have shape ({ns}, {na}), got {qmat.shape}")
            qmat.setflags(write=False)
        util.setflags(write=False)
        policy.setflags(write=False)

        self.util = util
        self.policy = policy
        self.qmat = qmat
        self.include_q = qmat is not None
        self.iterations = int(iterations)
        self.residual = float(residual)
        self.residual_tolerance = float(residual_tolerance)

    @property
    def converged(self) -> bool:
        """True if the last sweep's residual was below the solver tolerance."""
        return self.residual < self.residual_tolerance

    @staticmethod
    def empty(mdp: DecisionProcess, include_q: bool = True) -> "ValueIterationPolicy":
        """Unsolved policy: zero utility (and Q), first action everywhere."""
        ns = len(mdp.ordered_states())
        na = len(mdp.ordered_actions())
        qmat = np.zeros((ns, na)) if include_q else None
        return ValueIterationPolicy(mdp, np.zeros(ns), np.zeros(ns, dtype=np.int64), qmat)

    @staticmethod
    def from_q_matrix(mdp: DecisionProcess, qmat: np.ndarray) -> "ValueIterationPolicy":
        """Rebuild utility and policy from a Q-matrix.

        Only the actions applicable in each state are considered, and the first
        maximal one wins, matching the solver's tie-breaking. Terminal states get
        utility 0 and action index 0.
        """
        qmat = np.array(qmat, dtype=np.float64)
        states = mdp.ordered_states()
        na = len(mdp.ordered_actions())
        if qmat.shape != (len(states), na):
            raise ValueError(f"Q-matrix must have shape ({len(states)}, {na}), got {qmat.shape}")
        util = np.zeros(len(states))
        policy = np.zeros(len(states), dtype=np.int64)
        for i, s in enumerate(states):
            if mdp.is_terminal(s):
                continue
            best = -np.inf
            for a in mdp.actions(s):
                ia = mdp.action_index(a)
                if qmat[i, ia] > best:
                    best = qmat[i, ia]
                    policy[i] = ia
            util[i] = best
        return ValueIterationPolicy(mdp, util, policy, qmat)

    # --- Lookups by domain object ---
    def action(self, state: Any) -> Any:
        """Best action in ``state``."""
        return self.action_map[self.policy[self.mdp.state_index(state)]]

    best_action = action

    def value(self, state: Any, action: Any = None) -> float:
        """Utility of ``state``, or its Q-value for ``action`` when given."""
        if action is not None:
            return self.q_value(state, action)
        return float(self.util[self.mdp.state_index(state)])

    def q_value(self, state: Any, action: Any) -> float:
        self._require_q()
        return float(self.qmat[self.mdp.state_index(state), self.mdp.action_index(action)])

    def action_values(self, state: Any) -> np.ndarray:
        """Row of the Q-matrix for ``state``, indexed like ``action_map``."""
        self._require_q()
        return self.qmat[self.mdp.state_index(state)]

    def _require_q(self) -> None:
        if self.qmat is None:
            raise ValueError("Q-values were not kept for this policy; solve with include_q_values=True")

    def __repr__(self) -> str:
        return (
            f"ValueIterationPolicy(states={len(self.util)}, actions={len(self.action_map)}, "
            f"include_q={self.include_q}, iterations={self.iterations}, residual={self.residual:.3g})"
        )
