"""Move tables and sticker geometry for the 3x3 facelet model."""

from __future__ import annotations

import numpy as np

FACE_ORDER = ("U", "R", "F", "D", "L", "B")
FACE_INDEX = {face: i for i, face in enumerate(FACE_ORDER)}
N_FACES = 6
FACE_SIZE = 3
STICKERS_PER_FACE = FACE_SIZE * FACE_SIZE
STATE_SIZE = N_FACES * STICKERS_PER_FACE

# Face specification from outside view; row 0 is on the "up" side, col 0 opposite "right".
FACE_SPECS = {
    "U": {"normal": (0, 1, 0), "right": (1, 0, 0), "up": (0, 0, -1)},
    "R": {"normal": (1, 0, 0), "right": (0, 0, -1), "up": (0, 1, 0)},
    "F": {"normal": (0, 0, 1), "right": (1, 0, 0), "up": (0, 1, 0)},
    "D": {"normal": (0, -1, 0), "right": (1, 0, 0), "up": (0, 0, 1)},
    "L": {"normal": (-1, 0, 0), "right": (0, 0, 1), "up": (0, 1, 0)},
    "B": {"normal": (0, 0, -1), "right": (-1, 0, 0), "up": (0, 1, 0)},
}

# Search order matters: the cross search returns the first solution in this order.
MOVE_FACES = ("U", "D", "L", "R", "F", "B")
MOVE_SUFFIXES = ("", "'", "2")
MOVE_TOKENS = tuple(face + suffix for face in MOVE_FACES for suffix in MOVE_SUFFIXES)
TOKEN_INDEX = {token: i for i, token in enumerate(MOVE_TOKENS)}

# Quarter turns per suffix; +1 is clockwise from the face viewpoint.
SUFFIX_TURNS = {"": 1, "'": -1, "2": 2}

# Clockwise turn from face viewpoint expressed as world-axis rotation angle.
CLOCKWISE_ANGLE_DEG = {
    "U": -90,
    "D": +90,
    "L": +90,
    "R": -90,
    "F": -90,
    "B": +90,
}

FACE_AXIS_LAYER = {
    "U": ("y", +1),
    "D": ("y", -1),
    "L": ("x", -1),
    "R": ("x", +1),
    "F": ("z", +1),
    "B": ("z", -1),
}

AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


def solved_state() -> str:
    """Return the canonical solved facelet string (54 symbols, URFDLB)."""
    return "".join(face * STICKERS_PER_FACE for face in FACE_ORDER)


def face_index(face: str, index: int) -> int:
    return FACE_INDEX[face] * STICKERS_PER_FACE + index


def split_token(token: str) -> tuple[str, int]:
    """Return (face, quarter turns) for a move token like ``R'`` or ``U2``."""
    if token not in TOKEN_INDEX:
        raise ValueError(f"Unknown move token: {token!r}")
    return token[0], SUFFIX_TURNS[token[1:]]


def rotation_matrix(axis: str, angle_deg: int) -> np.ndarray:
    """Return integer rotation matrix for multiples of 90 around x/y/z axes."""
    quarter = {
        ("x", +90): [[1, 0, 0], [0, 0, -1], [0, 1, 0]],
        ("x", -90): [[1, 0, 0], [0, 0, 1], [0, -1, 0]],
        ("y", +90): [[0, 0, 1], [0, 1, 0], [-1, 0, 0]],
        ("y", -90): [[0, 0, -1], [0, 1, 0], [1, 0, 0]],
        ("z", +90): [[0, -1, 0], [1, 0, 0], [0, 0, 1]],
        ("z", -90): [[0, 1, 0], [-1, 0, 0], [0, 0, 1]],
    }
    if angle_deg in (180, -180):
        half = np.array(quarter[(axis, +90)], dtype=np.int8)
        return half @ half
    if (axis, angle_deg) not in quarter:
        raise ValueError(f"Unsupported rotation: axis={axis}, angle={angle_deg}")
    return np.array(quarter[(axis, angle_deg)], dtype=np.int8)


def face_for_normal(normal) -> str:
    """Classify an outward normal by its dominant axis (ties resolve x, then y, then z)."""
    nx, ny, nz = (float(v) for v in normal)
    ax, ay, az = abs(nx), abs(ny), abs(nz)
    if ax >= ay and ax >= az:
        return "R" if nx >= 0 else "L"
    if ay >= ax and ay >= az:
        return "U" if ny >= 0 else "D"
    return "F" if nz >= 0 else "B"


def facelet_row_col(face: str, cubie) -> tuple[int, int]:
    """Row/column of the sticker a cubie at lattice coordinates shows on ``face``."""
    spec = FACE_SPECS[face]
    cubie = np.rint(np.asarray(cubie, dtype=np.float64)).astype(np.int64)
    col = int(np.dot(cubie, spec["right"])) + 1
    row = 1 - int(np.dot(cubie, spec["up"]))
    return row, col


def _build_sticker_model() -> list[dict[str, np.ndarray]]:
    stickers: list[dict[str, np.ndarray]] = []

    for face in FACE_ORDER:
        spec = FACE_SPECS[face]
        n = np.array(spec["normal"], dtype=np.int8)
        r = np.array(spec["right"], dtype=np.int8)
        up = np.array(spec["up"], dtype=np.int8)

        for row in range(FACE_SIZE):
            for col in range(FACE_SIZE):
                cubie = n + (col - 1) * r + (1 - row) * up
                # Doubled coordinates keep the sticker centre on the integer lattice.
                center = 2 * cubie + n
                idx = face_index(face, row * FACE_SIZE + col)
                stickers.append(
                    {
                        "idx": idx,
                        "face": face,
                        "row": row,
                        "col": col,
                        "center": center,
                        "normal": n,
                        "cubie": cubie,
                    }
                )

    stickers.sort(key=lambda s: s["idx"])
    return stickers


_STICKERS = _build_sticker_model()


def _index_after(center: np.ndarray, normal: np.ndarray) -> int:
    face_new = face_for_normal(normal)
    cubie = (center - normal) // 2
    row, col = facelet_row_col(face_new, cubie)
    if not (0 <= row < FACE_SIZE and 0 <= col < FACE_SIZE):
        raise ValueError(f"Invalid sticker centre for face {face_new}: {center}")
    return face_index(face_new, row * FACE_SIZE + col)


def _generate_face_turn_permutation(face: str, turns: int) -> np.ndarray:
    axis, layer_sign = FACE_AXIS_LAYER[face]
    rot = rotation_matrix(axis, CLOCKWISE_ANGLE_DEG[face] * turns)

    axis_idx = AXIS_INDEX[axis]
    perm = np.empty(STATE_SIZE, dtype=np.int32)

    for sticker in _STICKERS:
        old_idx = int(sticker["idx"])
        center = sticker["center"]
        normal = sticker["normal"]

        if int(sticker["cubie"][axis_idx]) == layer_sign:
            new_center = rot @ center
            new_normal = rot @ normal
        else:
            new_center = center
            new_normal = normal

        perm[_index_after(new_center, new_normal)] = old_idx

    return perm


def _generate_move_permutations() -> np.ndarray:
    perms = np.empty((len(MOVE_TOKENS), STATE_SIZE), dtype=np.int32)
    for i, token in enumerate(MOVE_TOKENS):
        face, turns = split_token(token)
        perms[i] = _generate_face_turn_permutation(face, turns)
    return perms


def _generate_whole_cube_permutation(mat: np.ndarray) -> np.ndarray:
    perm = np.empty(STATE_SIZE, dtype=np.int32)
    for sticker in _STICKERS:
        new_center = mat @ sticker["center"]
        new_normal = mat @ sticker["normal"]
        perm[_index_after(new_center, new_normal)] = int(sticker["idx"])
    return perm


def _generate_face_relabeling(mat: np.ndarray) -> dict[str, str]:
    return {face: face_for_normal(mat @ np.array(FACE_SPECS[face]["normal"])) for face in FACE_ORDER}


# new_state = state[MOVE_PERMUTATIONS[TOKEN_INDEX[token]]]
MOVE_PERMUTATIONS = _generate_move_permutations()

# Sticker at position p lands on STICKER_DESTINATIONS[t][p] after token t.
STICKER_DESTINATIONS = tuple(tuple(int(v) for v in np.argsort(perm)) for perm in MOVE_PERMUTATIONS)

# Half turn of the whole cube about the x axis: the last layer (D) comes to the top.
REMAP_ROTATION = rotation_matrix("x", 180)
REMAP_PERMUTATION = _generate_whole_cube_permutation(REMAP_ROTATION)
REMAP_FACES = _generate_face_relabeling(REMAP_ROTATION)

# Read-only sticker metadata for geometry and codec.
STICKER_MODEL = tuple(
    {
        "idx": int(s["idx"]),
        "face": s["face"],
        "row": int(s["row"]),
        "col": int(s["col"]),
        "center": tuple(int(v) for v in s["center"]),
        "normal": tuple(int(v) for v in s["normal"]),
        "cubie": tuple(int(v) for v in s["cubie"]),
    }
    for s in _STICKERS
)


def _group_cubie_facelets() -> dict[tuple[int, int, int], tuple[int, ...]]:
    groups: dict[tuple[int, int, int], list[int]] = {}
    for s in STICKER_MODEL:
        groups.setdefault(s["cubie"], []).append(s["idx"])
    return {cubie: tuple(sorted(idxs)) for cubie, idxs in groups.items()}


CUBIE_FACELETS = _group_cubie_facelets()
EDGE_FACELETS = tuple(idxs for idxs in CUBIE_FACELETS.values() if len(idxs) == 2)
CORNER_FACELETS = tuple(idxs for idxs in CUBIE_FACELETS.values() if len(idxs) == 3)
