"""Stage catalogue, canned macros and slot tables."""

from __future__ import annotations

from rubik_facelets.moves import face_index

from .types import StageInfo

STAGES = (
    StageInfo(
        title="White Cross",
        goal="Make a white cross on top, matching the side colors with the center pieces.",
        algorithm="F R U R' U' F'",
    ),
    StageInfo(
        title="White Corners",
        goal="Insert the white corners to finish the first layer. Repeat until the corner is placed.",
        algorithm="R' D' R D",
    ),
    StageInfo(
        title="Middle Layer Edges",
        goal="Insert middle edges. Right insert: U R U' R' U' F' U F. Left insert: U' L' U L U F U' F'.",
        algorithm="U R U' R' U' F' U F",
    ),
    StageInfo(
        title="Yellow Cross",
        goal="Form a yellow cross on top. You may need to repeat this from different angles.",
        algorithm="F R U R' U' F'",
    ),
    StageInfo(
        title="Yellow Face",
        goal="Orient the yellow corners so the entire top face is yellow.",
        algorithm="R U R' U R U2 R'",
    ),
    StageInfo(
        title="Position Yellow Corners",
        goal="Move the yellow corners into the correct spots without changing their orientation.",
        algorithm="R' F R' B2 R F' R' B2 R2",
    ),
    StageInfo(
        title="Position Yellow Edges",
        goal="Cycle the remaining top edges until the cube is solved.",
        algorithm="R U' R U R U R U' R' U' R2",
    ),
)

YELLOW_CROSS_ALG = ("F", "R", "U", "R'", "U'", "F'")
YELLOW_FACE_ALG = ("R", "U", "R'", "U", "R", "U2", "R'")
CORNER_CYCLE_ALG = ("R'", "F", "R'", "B2", "R", "F'", "R'", "B2", "R2")
EDGE_CYCLE_ALG = ("R", "U'", "R", "U", "R", "U", "R", "U'", "R'", "U'", "R2")

_U_TURNS = (("U",), ("U'",), ("U2",))

# Macros are applied in the solving frame each stage is checked in.
STAGE_MACROS: tuple[tuple[tuple[str, ...], ...], ...] = (
    (),
    _U_TURNS + (("R", "U", "R'", "U'"), ("L'", "U'", "L", "U")),
    _U_TURNS
    + (
        ("U", "R", "U'", "R'", "U'", "F'", "U", "F"),
        ("U'", "L'", "U", "L", "U", "F", "U'", "F'"),
    ),
    _U_TURNS + (YELLOW_CROSS_ALG,),
    _U_TURNS + (YELLOW_FACE_ALG,),
    _U_TURNS + (CORNER_CYCLE_ALG,),
    _U_TURNS + (EDGE_CYCLE_ALG,),
)

# Corner slots: facelet indices in (U/D, clockwise neighbour, ...) order.
CORNER_SLOTS = (
    ("URF", (8, 9, 20)),
    ("UFL", (6, 18, 38)),
    ("ULB", (0, 36, 47)),
    ("UBR", (2, 45, 11)),
    ("DFR", (29, 26, 15)),
    ("DLF", (27, 44, 24)),
    ("DBL", (33, 53, 42)),
    ("DRB", (35, 17, 51)),
)

# Face turned by ``X' D' X D`` to pop or seat the corner in each slot.
CORNER_INSERT_FACE = ("R", "F", "L", "B", "R", "F", "L", "B")

# Top-layer edges in U-turn order F, R, B, L.
TOP_EDGES = (
    {"name": "UF", "u": face_index("U", 7), "side": face_index("F", 1), "side_face": "F"},
    {"name": "UR", "u": face_index("U", 5), "side": face_index("R", 1), "side_face": "R"},
    {"name": "UB", "u": face_index("U", 1), "side": face_index("B", 1), "side_face": "B"},
    {"name": "UL", "u": face_index("U", 3), "side": face_index("L", 1), "side_face": "L"},
)
TOP_EDGE_ORDER = ("F", "R", "B", "L")

MIDDLE_EDGES = (
    {"name": "FR", "indices": (face_index("F", 5), face_index("R", 3)), "front": "F", "right": "R"},
    {"name": "FL", "indices": (face_index("F", 3), face_index("L", 5)), "front": "F", "left": "L"},
    {"name": "BR", "indices": (face_index("B", 3), face_index("R", 5)), "front": "B", "left": "R"},
    {"name": "BL", "indices": (face_index("B", 5), face_index("L", 3)), "front": "B", "right": "L"},
)

RIGHT_OF = {"F": "R", "R": "B", "B": "L", "L": "F"}
LEFT_OF = {"F": "L", "L": "B", "B": "R", "R": "F"}


def turn_about_vertical(tokens, times: int = 1) -> tuple[str, ...]:
    """Relabel side faces as if the whole cube were turned a quarter about U-D.

    One step sends F to R, R to B, B to L and L to F; U and D stay put.
    """
    out = tuple(tokens)
    for _ in range(times % 4):
        out = tuple(RIGHT_OF.get(t[0], t[0]) + t[1:] for t in out)
    return out


# CORNER_CYCLE_ALG keeps UFL fixed; each relabel moves the fixed slot to the next one.
CORNER_CYCLES = {
    1: CORNER_CYCLE_ALG,
    0: turn_about_vertical(CORNER_CYCLE_ALG, 1),
    3: turn_about_vertical(CORNER_CYCLE_ALG, 2),
    2: turn_about_vertical(CORNER_CYCLE_ALG, 3),
}

# EDGE_CYCLE_ALG keeps UB fixed; keyed by the side face of the fixed edge.
EDGE_CYCLES = {
    "B": EDGE_CYCLE_ALG,
    "L": turn_about_vertical(EDGE_CYCLE_ALG, 1),
    "F": turn_about_vertical(EDGE_CYCLE_ALG, 2),
    "R": turn_about_vertical(EDGE_CYCLE_ALG, 3),
}


def right_insert(front: str, right: str) -> list[str]:
    return ["U", right, "U'", f"{right}'", "U'", f"{front}'", "U", front]


def left_insert(front: str, left: str) -> list[str]:
    return ["U'", f"{left}'", "U", left, "U", front, "U'", f"{front}'"]


def quarter_turns(face: str, count: int) -> list[str]:
    """Minimal token for ``count`` clockwise quarter turns of ``face`` (0..3)."""
    count %= 4
    if count == 1:
        return [face]
    if count == 2:
        return [f"{face}2"]
    if count == 3:
        return [f"{face}'"]
    return []
