from __future__ import annotations

"""Decision process interfaces consumed by the solvers.

This module defines:
- ``Deterministic`` and ``SparseCat`` transition distributions. Both expose
  ``weighted_iterator`` yielding ``(value, probability)`` pairs over their
  support only, so sparse transitions never touch the full state space.
- ``DecisionProcess``: the capability set a model must provide to be planned
  on (discount, ordered states/actions, indexing, transitions, rewards and
  terminal detection).
- ``MDP`` and ``POMDP`` marker subclasses, and ``UnderlyingMDP`` which exposes
  the fully observable part of a POMDP.
"""

from abc import ABC, abstractmethod
from typing import Generic, Hashable, Iterator, List, Optional, Sequence, Tuple, TypeVar

S = TypeVar("S", bound=Hashable)
A = TypeVar("A", bound=Hashable)
T = TypeVar("T")


class Deterministic(Generic[T]):
    """Distribution putting all mass on a single value."""

    def __init__(self, value: T):
        self.value = value

    def weighted_iterator(self) -> Iterator[Tuple[T, float]]:
        yield self.value, 1.0

    def support(self) -> Tuple[T, ...]:
        return (self.value,)

    def pdf(self, x: T) -> float:
        return 1.0 if x == self.value else 0.0

    def __repr__(self) -> str:
        return f"Deterministic({self.value!r})"


class SparseCat(Generic[T]):
    """Categorical distribution over an explicit, possibly repeated, support.

    ``values`` and ``probs`` are parallel sequences. Values not listed have zero
    probability. Entries with zero probability are kept so that the iteration
    order matches the order in which they were given.
    """

    def __init__(self, values: Sequence[T], probs: Sequence[float]):
        if len(values) != len(probs):
            raise ValueError(f"SparseCat needs one probability per value, got {len(values)} values and {len(probs)} probabilities")
        if any(p < 0.0 for p in probs):
            raise ValueError(f"Probabilities must be non-negative, got {list(probs)}")
        self.values: List[T] = list(values)
        self.probs: List[float] = [float(p) for p in probs]

    def weighted_iterator(self) -> Iterator[Tuple[T, float]]:
        return zip(self.values, self.probs)

    def support(self) -> List[T]:
        return list(self.values)

    def pdf(self, x: T) -> float:
        # Repeated values accumulate
        return sum(p for v, p in zip(self.values, self.probs) if v == x)

    def __repr__(self) -> str:
        items = ", ".join(f"{v!r}: {p:.4f}" for v, p in zip(self.values, self.probs))
        return f"SparseCat({{{items}}})"


class DecisionProcess(ABC, Generic[S, A]):
    """Finite sequential decision model with enumerable states and actions.

    Implementations must keep ``ordered_states``/``ordered_actions`` stable
    across calls and consistent with ``state_index``/``action_index``:
    ``ordered_states()[state_index(s)] == s`` for every state.
    """

    @abstractmethod
    def discount(self) -> float:
        """Discount factor in [0, 1]."""

    @abstractmethod
    def states(self) -> Sequence[S]:
        """All states of the model."""

    @abstractmethod
    def actions(self, state: Optional[S] = None) -> Sequence[A]:
        """All actions, or only those applicable in ``state`` when given."""

    @abstractmethod
    def state_index(self, state: S) -> int:
        """0-based position of ``state`` in ``ordered_states()``."""

    @abstractmethod
    def action_index(self, action: A) -> int:
        """0-based position of ``action`` in ``ordered_actions()``."""

    @abstractmethod
    def transition(self, state: S, action: A):
        """Distribution over next states, exposing ``weighted_iterator()``."""

    @abstractmethod
    def reward(self, state: S, action: A, next_state: S) -> float:
        """Reward for moving from ``state`` to ``next_state`` under ``action``."""

    def is_terminal(self, state: S) -> bool:
        return False

    def ordered_states(self) -> List[S]:
        return list(self.states())

    def ordered_actions(self) -> List[A]:
        return list(self.actions())


class MDP(DecisionProcess[S, A]):
    """Fully observable decision process."""


class POMDP(DecisionProcess[S, A]):
    """Decision process whose state is hidden behind observations."""

    @abstractmethod
    def observations(self) -> Sequence[Hashable]:
        """All observations."""

    @abstractmethod
    def observation(self, action: A, next_state: S):
        """Distribution over observations after ``action`` leads to ``next_state``."""


class UnderlyingMDP(MDP[S, A]):
    """Fully observable view of a POMDP: same dynamics and rewards, no observations."""

    def __init__(self, pomdp: POMDP[S, A]):
        self.pomdp = pomdp

    def discount(self) -> float:
        return self.pomdp.discount()

    def states(self) -> Sequence[S]:
        return self.pomdp.states()

    def actions(self, state: Optional[S] = None) -> Sequence[A]:
        return self.pomdp.actions(state)

    def state_index(self, state: S) -> int:
        return self.pomdp.state_index(state)

    def action_index(self, action: A) -> int:
        return self.pomdp.action_index(action)

    def transition(self, state: S, action: A):
        return self.pomdp.transition(state, action)

    def reward(self, state: S, action: A, next_state: S) -> float:
        return self.pomdp.reward(state, action, next_state)

    def is_terminal(self, state: S) -> bool:
        return self.pomdp.is_terminal(state)

    def ordered_states(self) -> List[S]:
        return self.pomdp.ordered_states()

    def ordered_actions(self) -> List[A]:
        return self.pomdp.ordered_actions()
