"""Move algebra over facelet strings and the full-solver capability."""

from __future__ import annotations

from typing import Iterable, Protocol

import numpy as np

from .moves import MOVE_FACES, MOVE_PERMUTATIONS, TOKEN_INDEX, solved_state
from .state_codec import StateValidationError, array_to_state, parse_algorithm, state_to_array, validate_state


class ForeignSolverFailure(RuntimeError):
    """Raised when the full solver errors out or returns a degenerate answer."""


def invert_token(token: str) -> str:
    if token not in TOKEN_INDEX:
        raise StateValidationError(f"Unknown move token: {token!r}")
    if token.endswith("2"):
        return token
    if token.endswith("'"):
        return token[:-1]
    return f"{token}'"


def invert_tokens(tokens: Iterable[str]) -> list[str]:
    return [invert_token(token) for token in reversed(list(tokens))]


class CubeAlgebra:
    """Mutable cube state supporting the 18 face-turn tokens."""

    def __init__(self, state: str | None = None):
        self._state = state_to_array(solved_state() if state is None else validate_state(state))

    @classmethod
    def from_string(cls, state: str) -> "CubeAlgebra":
        return cls(state)

    def copy(self) -> "CubeAlgebra":
        other = CubeAlgebra.__new__(CubeAlgebra)
        other._state = self._state.copy()
        return other

    def move(self, token: str) -> "CubeAlgebra":
        idx = TOKEN_INDEX.get(token)
        if idx is None:
            raise StateValidationError(f"Unknown move token: {token!r}")
        self._state = self._state[MOVE_PERMUTATIONS[idx]]
        return self

    def apply(self, tokens: Iterable[str]) -> "CubeAlgebra":
        for token in tokens:
            self.move(token)
        return self

    def to_string(self) -> str:
        return array_to_state(self._state)

    def __str__(self) -> str:
        return self.to_string()


def apply_tokens(state: str, tokens: Iterable[str]) -> str:
    return CubeAlgebra(state).apply(tokens).to_string()


def scramble(
    turns: int = 25,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> list[str]:
    """Random shuffle with no immediate same-face repetition.

    Quarter turns are reversed with probability 0.3.
    """
    if not isinstance(turns, int) or turns < 0:
        raise StateValidationError("Scramble turns must be a non-negative integer")

    rng = rng if rng is not None else np.random.default_rng(seed)
    tokens: list[str] = []
    last_face: str | None = None
    for _ in range(turns):
        candidates = [face for face in MOVE_FACES if face != last_face]
        face = str(rng.choice(candidates))
        modifier = "'" if rng.random() > 0.7 else ""
        tokens.append(face + modifier)
        last_face = face
    return tokens


class FullSolver(Protocol):
    """Any complete solver for the 3x3 cube."""

    def solve(self, state: str) -> list[str]:
        ...


class KociembaSolver:
    """Two-phase solver backed by the ``kociemba`` package.

    The backend is imported on first use; its lookup tables are built or
    loaded once per process at that point.
    """

    _backend = None

    @classmethod
    def _ensure_backend(cls):
        if cls._backend is None:
            import kociemba

            cls._backend = kociemba
        return cls._backend

    def solve(self, state: str) -> list[str]:
        try:
            validate_state(state)
            solution = self._ensure_backend().solve(state)
        except Exception as exc:
            raise ForeignSolverFailure(f"Full solver failed: {exc}") from exc

        if not solution or not solution.strip() or solution.strip() == "0":
            raise ForeignSolverFailure("Full solver returned an empty solution")
        tokens = parse_algorithm(solution)
        if not tokens:
            raise ForeignSolverFailure(f"Full solver returned no usable moves: {solution!r}")
        return tokens
