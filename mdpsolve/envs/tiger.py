from __future__ import annotations

"""Classic Tiger problem.

A tiger hides behind the left or right door. The agent can listen (noisy hint
about the tiger's side) or open a door. Opening a door resets the problem with
the tiger placed uniformly at random. The tiger's position is hidden, so this
is a ``POMDP``; ``UnderlyingMDP(TigerPOMDP())`` gives its fully observable
counterpart.
"""

from typing import List, Optional

from mdpsolve.utils.decision_process import POMDP, Deterministic, SparseCat

TIGER_LEFT, TIGER_RIGHT = "tiger-left", "tiger-right"
LISTEN, OPEN_LEFT, OPEN_RIGHT = "listen", "open-left", "open-right"
HEAR_LEFT, HEAR_RIGHT = "hear-left", "hear-right"


class TigerPOMDP(POMDP[str, str]):

    def __init__(self, r_listen: float = -1.0, r_findtiger: float = -100.0, r_escapetiger: float = 10.0,
                 p_listen_correctly: float = 0.85, discount_factor: float = 0.95):
        self.r_listen = r_listen
        self.r_findtiger = r_findtiger
        self.r_escapetiger = r_escapetiger
        self.p_listen_correctly = p_listen_correctly
        self.discount_factor = discount_factor

    def discount(self) -> float:
        return self.discount_factor

    def states(self) -> List[str]:
        return [TIGER_LEFT, TIGER_RIGHT]

    def actions(self, state: Optional[str] = None) -> List[str]:
        return [LISTEN, OPEN_LEFT, OPEN_RIGHT]

    def observations(self) -> List[str]:
        return [HEAR_LEFT, HEAR_RIGHT]

    def state_index(self, state: str) -> int:
        return self.states().index(state)

    def action_index(self, action: str) -> int:
        return self.actions().index(action)

    def transition(self, state: str, action: str):
        if action == LISTEN:
            return Deterministic(state)
        return SparseCat([TIGER_LEFT, TIGER_RIGHT], [0.5, 0.5])

    def observation(self, action: str, next_state: str):
        if action != LISTEN:
            return SparseCat([HEAR_LEFT, HEAR_RIGHT], [0.5, 0.5])
        p = self.p_listen_correctly
        if next_state == TIGER_LEFT:
            return SparseCat([HEAR_LEFT, HEAR_RIGHT], [p, 1.0 - p])
        return SparseCat([HEAR_LEFT, HEAR_RIGHT], [1.0 - p, p])

    def reward(self, state: str, action: str, next_state: Optional[str] = None) -> float:
        if action == LISTEN:
            return self.r_listen
        opened_tiger = (action == OPEN_LEFT) == (state == TIGER_LEFT)
        return self.r_findtiger if opened_tiger else self.r_escapetiger

