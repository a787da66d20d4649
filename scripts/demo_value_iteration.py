from __future__ import annotations

import logging
from pathlib import Path

from mdpsolve.agents.value_iteration import solve
from mdpsolve.envs.gridworld import LegacyGridWorld, arrows
from mdpsolve.utils.config import SolverConfig

if __name__ == "__main__":
    import argparse
    root = Path(__file__).resolve().parents[1]

    parser = argparse.ArgumentParser(description="Solve a gridworld with value iteration and print the policy")
    parser.add_argument("--config", type=Path, default=root / "config" / "gridworld_10x10.json", help="Gridworld + solver JSON config")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    mdp = LegacyGridWorld.from_json(args.config)
    cfg = SolverConfig.from_json(args.config)
    policy = solve(cfg, mdp)

    print(f"Value Iteration policy ({policy.iterations} sweeps, residual {policy.residual:.3g}):")
    print("\n".join(arrows(mdp, policy.policy)))
