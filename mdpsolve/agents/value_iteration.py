from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np

from mdpsolve.agents.policy import ValueIterationPolicy
from mdpsolve.utils.config import SolverConfig
from mdpsolve.utils.decision_process import POMDP, DecisionProcess
from mdpsolve.utils.errors import DimensionMismatchError, UnsupportedModelError

logger = logging.getLogger(__name__)

POMDP_NOT_SUPPORTED = """\
Value iteration supports fully observable MDP models only, got a POMDP ({name}).
Use a POMDP solver that assumes full observability (e.g. QMDP) instead, or, to plan
with the transition and reward of your POMDP, wrap it first:

    from mdpsolve.utils.decision_process import UnderlyingMDP
    policy = solve(config, UnderlyingMDP(pomdp))
"""


def solve(config: Optional[SolverConfig], mdp: DecisionProcess) -> ValueIterationPolicy:
    """Compute utilities and a greedy policy via Value Iteration.

    Runs Bellman optimality backups over ``mdp.ordered_states()`` until the
    largest change of any utility during a sweep (the Bellman residual) drops
    below ``config.residual_tolerance`` or ``config.max_iterations`` sweeps
    have been made.

    Updates are applied in place (Gauss-Seidel): a state backed up later in a
    sweep already sees the new utilities of the states before it. This affects
    the exact values and iteration count, not the fixed point.

    Args:
        config: Solver parameters. ``None`` uses the defaults.
        mdp: Fully observable model implementing ``DecisionProcess``.

    Returns:
        A read-only ``ValueIterationPolicy`` with utility, policy, optional
        Q-matrix, and the number of sweeps and final residual.

    Raises:
        UnsupportedModelError: ``mdp`` is a ``POMDP``.
        DimensionMismatchError: ``config.initial_utility`` does not have one
            value per state.

    Notes:
        - Terminal states get utility 0 and action index 0.
        - Ties between actions keep the first one in ``mdp.actions(s)`` order.
        - Running out of sweeps is not an error; check ``policy.converged``.
    """
    if isinstance(mdp, POMDP):
        raise UnsupportedModelError(POMDP_NOT_SUPPORTED.format(name=type(mdp).__name__))
    cfg = config if config is not None else SolverConfig()

    discount = mdp.discount()
    state_space = mdp.ordered_states()
    ns = len(state_space)
    na = len(mdp.ordered_actions())

    # Initialize the utility from a copy of the warm start, or zeros
    if cfg.initial_utility is not None:
        if len(cfg.initial_utility) != ns:
            raise DimensionMismatchError(ns, len(cfg.initial_utility))
        util = np.array(cfg.initial_utility, dtype=np.float64)
    else:
        util = np.zeros(ns)
    include_q = cfg.include_q_values
    qmat = np.zeros((ns, na)) if include_q else None
    pol = np.zeros(ns, dtype=np.int64)

    total_time = 0.0
    residual = float("inf")
    iteration = 0

    for iteration in range(1, cfg.max_iterations + 1):
        start = time.perf_counter()
        residual = 0.0  # largest change this sweep
        for istate, s in enumerate(state_space):
            if mdp.is_terminal(s):
                util[istate] = 0.0
                pol[istate] = 0
                continue
            old_util = util[istate]
            max_util = -np.inf
            # q(s,a) = sum_{s'} T(s'|s,a) * (R(s,a,s') + discount * util(s'))
            for a in mdp.actions(s):
                iaction = mdp.action_index(a)
                q = 0.0
                for sp, p in mdp.transition(s, a).weighted_iterator():
                    if p == 0.0:
                        continue
                    q += p * (mdp.reward(s, a, sp) + discount * util[mdp.state_index(sp)])
                if include_q:
                    qmat[istate, iaction] = q
                # Strict comparison keeps the first of tied actions
                if q > max_util:
                    max_util = q
                    pol[istate] = iaction
            util[istate] = max_util
            diff = abs(max_util - old_util)
            if diff > residual:
                residual = diff
        iter_time = time.perf_counter() - start
        total_time += iter_time
        if cfg.verbose:
            logger.info(
                f"[Iteration {iteration:<4d}] residual: {residual:10.3G} | "
                f"iteration runtime: {iter_time * 1000.0:10.3f} ms, ({total_time:10.3G} s total)"
            )
        if residual < cfg.residual_tolerance:
            break

    if cfg.verbose and not residual < cfg.residual_tolerance:
        logger.warning(f"Max iterations ({cfg.max_iterations}) reached without convergence, residual {residual:.3G}")

    return ValueIterationPolicy(
        mdp,
        util,
        pol,
        qmat,
        iterations=iteration,
        residual=residual,
        residual_tolerance=cfg.residual_tolerance,
    )
