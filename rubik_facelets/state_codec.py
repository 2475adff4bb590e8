"""State validation, facelet extraction and remap helpers."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .moves import (
    FACE_ORDER,
    FACE_SIZE,
    REMAP_FACES,
    REMAP_PERMUTATION,
    STATE_SIZE,
    STICKERS_PER_FACE,
    TOKEN_INDEX,
    face_for_normal,
    face_index,
    facelet_row_col,
)

_TOKEN_RE = re.compile(r"^[UDFBLR][2']?$")


class StateValidationError(ValueError):
    """Raised when an input state or move token is invalid."""


@dataclass(frozen=True)
class Sticker:
    """One visible sticker as reported by the geometry layer."""

    color: str
    normal: tuple[float, float, float]
    coords: tuple[float, float, float]


def validate_state(state: str) -> str:
    """Validate a facelet string and return it unchanged."""
    if not isinstance(state, str):
        raise StateValidationError("State must be a string of facelet symbols")
    if len(state) != STATE_SIZE:
        raise StateValidationError(f"State must have {STATE_SIZE} facelets, got {len(state)}")

    unknown = set(state) - set(FACE_ORDER)
    if unknown:
        raise StateValidationError(f"State contains invalid symbols: {''.join(sorted(unknown))}")

    counts = Counter(state)
    if any(counts[face] != STICKERS_PER_FACE for face in FACE_ORDER):
        raise StateValidationError(
            f"Invalid sticker counts; each symbol must appear exactly {STICKERS_PER_FACE} times"
        )

    centers = {state[face_index(face, 4)] for face in FACE_ORDER}
    if len(centers) != len(FACE_ORDER):
        raise StateValidationError("Centre facelets must carry six distinct symbols")
    return state


def state_to_array(state: str) -> np.ndarray:
    return np.frombuffer(state.encode("ascii"), dtype=np.uint8).copy()


def array_to_state(arr: np.ndarray) -> str:
    return np.asarray(arr, dtype=np.uint8).tobytes().decode("ascii")


def flat_to_faces(state: str) -> dict[str, list[str]]:
    """Split a facelet string into per-face rows for display."""
    validate_state(state)
    faces: dict[str, list[str]] = {}
    for face in FACE_ORDER:
        start = face_index(face, 0)
        block = state[start : start + STICKERS_PER_FACE]
        faces[face] = [block[r * FACE_SIZE : (r + 1) * FACE_SIZE] for r in range(FACE_SIZE)]
    return faces


def extract(stickers: Iterable[Sticker]) -> str | None:
    """Build the facelet string from sticker geometry.

    Each sticker is assigned to the face its outward normal points at most
    strongly, and to the row/column its cubie's lattice coordinates give on that
    face. Returns None when a position is left empty or claimed twice, which is
    what happens while a layer is part-way through a turn.
    """
    slots: list[str | None] = [None] * STATE_SIZE
    for sticker in stickers:
        face = face_for_normal(sticker.normal)
        row, col = facelet_row_col(face, sticker.coords)
        if not (0 <= row < FACE_SIZE and 0 <= col < FACE_SIZE):
            return None
        idx = face_index(face, row * FACE_SIZE + col)
        if slots[idx] is not None:
            return None
        slots[idx] = sticker.color

    if any(symbol is None for symbol in slots):
        return None
    return "".join(slots)


def remap(state: str) -> str:
    """Reorient the whole cube by a half turn so the bottom layer is on top."""
    arr = state_to_array(validate_state(state))
    return array_to_state(arr[REMAP_PERMUTATION])


def remap_token(token: str) -> str:
    if token not in TOKEN_INDEX:
        raise StateValidationError(f"Unknown move token: {token!r}")
    return REMAP_FACES[token[0]] + token[1:]


def remap_tokens(tokens: Iterable[str]) -> list[str]:
    return [remap_token(token) for token in tokens]


def parse_algorithm(sequence: str) -> list[str]:
    """Split move notation into tokens, ignoring parentheses and anything unrecognised."""
    parts = sequence.replace("(", " ").replace(")", " ").split()
    return [part.strip() for part in parts if _TOKEN_RE.match(part.strip())]
