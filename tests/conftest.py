from __future__ import annotations

import numpy as np
import pytest

from mdpsolve.envs.gridworld import GridCfg, LegacyGridWorld

from models import ChainMDP, ReversedChainMDP, reference_q_matrix


@pytest.fixture
def chain_mdp() -> ChainMDP:
    return ChainMDP()


@pytest.fixture
def simple_grid() -> LegacyGridWorld:
    # 2x3 grid, reward 10 at (2, 3), plus the absorbing state (7 states)
    return LegacyGridWorld(GridCfg(size_x=2, size_y=3, reward_states=[(2, 3)], reward_values=[10.0]))


@pytest.fixture(scope="session")
def benchmark_grid() -> LegacyGridWorld:
    # 10x10 grid, rewards -10 at (4,3), -5 at (4,6), 10 at (9,3), 3 at (8,8)
    return LegacyGridWorld(GridCfg())


@pytest.fixture(scope="session")
def q_matrix_file(benchmark_grid, tmp_path_factory):
    """Reference Q-matrix for the benchmark grid, tab-delimited, one row per state."""
    path = tmp_path_factory.mktemp("fixtures") / "grid-world-10x10-Q-matrix.txt"
    np.savetxt(path, reference_q_matrix(benchmark_grid), delimiter="\t")
    return path


@pytest.fixture(scope="session")
def reference_q(q_matrix_file) -> np.ndarray:
    return np.loadtxt(q_matrix_file)


@pytest.fixture
def reversed_chain_mdp() -> ReversedChainMDP:
    return ReversedChainMDP()
