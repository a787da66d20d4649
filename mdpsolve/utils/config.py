from __future__ import annotations

import json
from dataclasses import dataclass
from numbers import Integral
from pathlib import Path
from typing import Any, Dict, Optional, Sequence


def load_json(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class SolverConfig:
    """Configuration for Value Iteration.

    Attributes:
        max_iterations: Upper bound on the number of sweeps over the state space.
        residual_tolerance: Stop once the Bellman residual of a sweep drops below this.
        include_q_values: Keep the (states x actions) Q-matrix in the returned policy.
        initial_utility: Optional per-state starting utility. ``None`` starts from zeros.
        verbose: Log the residual and timing of every sweep at INFO level on the
            ``mdpsolve.agents.value_iteration`` logger. No handler is installed, so
            callers must configure logging (e.g. ``logging.basicConfig``) to see it.
    """
    max_iterations: int = 100
    residual_tolerance: float = 1e-3
    include_q_values: bool = True
    initial_utility: Optional[Sequence[float]] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, Integral) or self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be a positive integer, got {self.max_iterations}")
        if not float(self.residual_tolerance) > 0.0:
            raise ValueError(f"residual_tolerance must be positive, got {self.residual_tolerance}")

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SolverConfig":
        """Build a config from a plain mapping, ignoring unknown keys.

        ``initial_utility`` may be omitted or ``null``.
        """
        init = data.get("initial_utility")
        return SolverConfig(
            max_iterations=int(data.get("max_iterations", 100)),
            residual_tolerance=float(data.get("residual_tolerance", 1e-3)),
            include_q_values=bool(data.get("include_q_values", True)),
            initial_utility=None if init is None else tuple(float(u) for u in init),
            verbose=bool(data.get("verbose", False)),
        )

    @staticmethod
    def from_json(path: Path) -> "SolverConfig":
        """Load a ``SolverConfig`` from a JSON file.

        The solver section may be nested under a top-level ``"solver"`` key so a
        single file can describe both the model and the solver.
        """
        data = load_json(path)
        return SolverConfig.from_dict(data.get("solver", data))
