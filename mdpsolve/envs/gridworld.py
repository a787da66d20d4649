from __future__ import annotations

"""Stochastic gridworld planning model.

Grid of ``size_x`` by ``size_y`` cells with 1-based coordinates, plus one
absorbing "done" state. This module defines:
- Constants for actions: ``UP``, ``DOWN``, ``LEFT``, ``RIGHT`` and ``ACTIONS``.
- ``GridState`` (cell coordinates and a done flag) and ``GridCfg``.
- ``LegacyGridWorld`` implementing the ``MDP`` interface.
- ``arrows`` to render a policy as text.

Dynamics: the intended move succeeds with probability ``tp``; each of the
other three directions happens with the remaining mass split evenly. Moves
that would leave the grid keep the agent in place. Leaving a terminal reward
cell moves to the absorbing state whatever the action.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from mdpsolve.utils.config import load_json
from mdpsolve.utils.decision_process import MDP, Deterministic, SparseCat

Action = int
UP, DOWN, LEFT, RIGHT = 0, 1, 2, 3
ACTIONS = (UP, DOWN, LEFT, RIGHT)
MOVES: Dict[int, Tuple[int, int]] = {UP: (0, 1), DOWN: (0, -1), LEFT: (-1, 0), RIGHT: (1, 0)}


@dataclass(frozen=True)
class GridState:
    x: int
    y: int
    done: bool = False


ABSORBING = GridState(0, 0, True)


@dataclass
class GridCfg:
    """Gridworld configuration parameters.

    Attributes:
        size_x: Number of columns.
        size_y: Number of rows.
        reward_states: Cells (x, y) that hand out a reward when left.
        reward_values: Reward for each entry of ``reward_states``.
        bounds_penalty: Added to the reward when the intended move hits the border.
        tp: Probability that the intended move happens.
        discount: Discount factor.
        terminals: Reward cells that end the episode. ``None`` means every
            reward cell with a positive value.
    """
    size_x: int = 10
    size_y: int = 10
    reward_states: List[Tuple[int, int]] = field(default_factory=lambda: [(4, 3), (4, 6), (9, 3), (8, 8)])
    reward_values: List[float] = field(default_factory=lambda: [-10.0, -5.0, 10.0, 3.0])
    bounds_penalty: float = -1.0
    tp: float = 0.7
    discount: float = 0.95
    terminals: Optional[List[Tuple[int, int]]] = None


class LegacyGridWorld(MDP[GridState, Action]):
    """Stochastic gridworld with reward cells, border penalty and an absorbing state.

    States are ordered column-fastest: ``(1, 1), (2, 1), ..., (size_x, size_y)``,
    followed by the absorbing state.
    """

    def __init__(self, cfg: Optional[GridCfg] = None):
        self.cfg = cfg if cfg is not None else GridCfg()
        if len(self.cfg.reward_states) != len(self.cfg.reward_values):
            raise ValueError("reward_states and reward_values must have the same length")
        self.size_x = self.cfg.size_x
        self.size_y = self.cfg.size_y
        self._rewards: Dict[Tuple[int, int], float] = {}
        for pos, val in zip(self.cfg.reward_states, self.cfg.reward_values):
            self._rewards[tuple(pos)] = self._rewards.get(tuple(pos), 0.0) + float(val)
        if self.cfg.terminals is None:
            terminals = [p for p, v in zip(self.cfg.reward_states, self.cfg.reward_values) if v > 0.0]
        else:
            terminals = self.cfg.terminals
        self.terminals = {tuple(p) for p in terminals}
        self._states = [GridState(x, y) for y in range(1, self.size_y + 1) for x in range(1, self.size_x + 1)]
        self._states.append(ABSORBING)

    @staticmethod
    def from_json(path: Path) -> "LegacyGridWorld":
        """Load a ``LegacyGridWorld`` from a JSON file.

        Supported keys: ``grid.size_x``, ``grid.size_y``, ``rewards`` (list of
        ``{"x", "y", "value"}``), ``bounds_penalty``, ``tp``, ``discount`` and
        ``terminals`` (list of ``[x, y]``).
        """
        data = load_json(path)
        rewards = data.get("rewards")
        gc = GridCfg(
            size_x=int(data.get("grid", {}).get("size_x", 10)),
            size_y=int(data.get("grid", {}).get("size_y", 10)),
            bounds_penalty=float(data.get("bounds_penalty", -1.0)),
            tp=float(data.get("tp", 0.7)),
            discount=float(data.get("discount", 0.95)),
            terminals=[tuple(p) for p in data["terminals"]] if "terminals" in data else None,
        )
        if rewards is not None:
            gc.reward_states = [(int(r["x"]), int(r["y"])) for r in rewards]
            gc.reward_values = [float(r["value"]) for r in rewards]
        return LegacyGridWorld(gc)

    # --- MDP interface ---
    def discount(self) -> float:
        return self.cfg.discount

    def states(self) -> List[GridState]:
        return list(self._states)

    def actions(self, state: Optional[GridState] = None) -> Sequence[Action]:
        return ACTIONS

    def state_index(self, state: GridState) -> int:
        if state.done:
            return len(self._states) - 1
        if not self.inbounds(state.x, state.y):
            raise ValueError(f"State {state} is outside the {self.size_x}x{self.size_y} grid")
        return (state.x - 1) + (state.y - 1) * self.size_x

    def action_index(self, action: Action) -> int:
        return ACTIONS.index(action)

    def is_terminal(self, state: GridState) -> bool:
        return state.done

    def transition(self, state: GridState, action: Action):
        if state.done:
            return Deterministic(state)
        if (state.x, state.y) in self.terminals:
            return Deterministic(ABSORBING)

        x, y = state.x, state.y
        # right, left, down, up, stay
        neighbors = [GridState(x + 1, y), GridState(x - 1, y), GridState(x, y - 1), GridState(x, y + 1), state]
        target = {RIGHT: 0, LEFT: 1, DOWN: 2, UP: 3}[action]
        slip = (1.0 - self.cfg.tp) / 3.0
        probs = [slip, slip, slip, slip, 0.0]
        probs[target] = self.cfg.tp
        for i in range(4):
            if not self.inbounds(neighbors[i].x, neighbors[i].y):
                # Bumping the border keeps the agent in place
                probs[4] += probs[i]
                probs[i] = 0.0
        return SparseCat(neighbors, probs)

    def reward(self, state: GridState, action: Action, next_state: Optional[GridState] = None) -> float:
        if state.done:
            return 0.0
        r = self.static_reward(state)
        if (state.x, state.y) in self.terminals:
            return r
        dx, dy = MOVES[action]
        if not self.inbounds(state.x + dx, state.y + dy):
            r += self.cfg.bounds_penalty
        return r

    # --- Helpers ---
    def static_reward(self, state: GridState) -> float:
        return self._rewards.get((state.x, state.y), 0.0)

    def inbounds(self, x: int, y: int) -> bool:
        return 1 <= x <= self.size_x and 1 <= y <= self.size_y


def arrows(mdp: LegacyGridWorld, pi: Sequence[int]) -> List[str]:
    """Render a policy vector as a textual arrow map.

    Args:
        mdp: Gridworld the policy was computed for.
        pi: Action index per state, indexed like ``mdp.ordered_states()``.

    Returns:
        One string per row, top row (largest y) first, with border '#',
        terminal cells 'G' and arrows ('^', 'v', '<', '>') elsewhere.
    """
    glyphs = {UP: "^", DOWN: "v", LEFT: "<", RIGHT: ">"}
    border = "#" * (mdp.size_x + 2)
    rows = [border]
    for y in range(mdp.size_y, 0, -1):
        row = ["#"]
        for x in range(1, mdp.size_x + 1):
            if (x, y) in mdp.terminals:
                row.append("G")
            else:
                row.append(glyphs[ACTIONS[pi[mdp.state_index(GridState(x, y))]]])
        row.append("#")
        rows.append("".join(row))
    rows.append(border)
    return rows
