from __future__ import annotations


class UnsupportedModelError(TypeError):
    """Raised when a solver is given a model type it cannot plan for."""


class DimensionMismatchError(ValueError):
    """Raised when an input vector does not match the model's state count."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Input utility dimension mismatch: expected {expected} values, got {got}")
        self.expected = expected
        self.got = got
