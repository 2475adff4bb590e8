"""Case-based solvers for the four last-layer stages.

Each solver works on the state turned over so the last layer is on top,
applies one fixed algorithm per pass and hands back tokens for the caller's
frame. Passes are capped by a small guard from the config.
"""

from __future__ import annotations

from rubik_facelets.algebra import CubeAlgebra
from rubik_facelets.moves import face_index
from rubik_facelets.state_codec import remap, remap_tokens

from .config import DEFAULT_CONFIG, SolverConfig
from .greedy import apply_moves, corner_matches_slot, corner_solved_at
from .stages import (
    CORNER_CYCLES,
    CORNER_SLOTS,
    EDGE_CYCLES,
    TOP_EDGES,
    YELLOW_CROSS_ALG,
    YELLOW_FACE_ALG,
    quarter_turns,
)
from .types import SearchExhausted

TOP_EDGE_FACELETS = tuple(face_index("U", i) for i in (1, 3, 5, 7))
TOP_CORNER_SLOTS = (0, 1, 2, 3)

# U quarter turns that bring an oriented edge pair to the left-right line or
# to the back-left L.
_PAIR_TURNS = {
    frozenset((3, 5)): 0,
    frozenset((1, 3)): 0,
    frozenset((1, 7)): 1,
    frozenset((3, 7)): 1,
    frozenset((5, 7)): 2,
    frozenset((1, 5)): 3,
}

# Slot the Sune keeps in place while twisting the others.
_SUNE_ANCHOR = 1


def _top_color(frame_ref: str) -> str:
    return frame_ref[face_index("U", 4)]


def _turns_to_slot(slot: int, target: int) -> int:
    # U carries a top corner to the next slot in URF, UFL, ULB, UBR order.
    return (target - slot) % 4


def corner_twist(slot: int, state: str, top: str) -> int:
    """0 when the top colour faces up, else 1 or 2 clockwise steps away."""
    for k, idx in enumerate(CORNER_SLOTS[slot][1]):
        if state[idx] == top:
            return k
    raise SearchExhausted(f"Corner {CORNER_SLOTS[slot][0]} carries no top colour")


def solve_last_layer_cross(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Orient the last-layer edges with ``F R U R' U' F'``.

    Two oriented edges are first turned into a left-right line or a back-left
    L; no oriented edges (a dot) take the algorithm from any angle.
    """
    frame_ref = remap(reference)
    cube = CubeAlgebra(remap(state))
    top = _top_color(frame_ref)
    output: list[str] = []

    guard = 0
    while True:
        current = cube.to_string()
        oriented = [i for i in TOP_EDGE_FACELETS if current[i] == top]
        if len(oriented) == 4:
            break
        guard += 1
        if guard > config.cross_orient_guard:
            raise SearchExhausted("Last-layer cross exceeded its guard")
        if len(oriented) == 2:
            apply_moves(cube, quarter_turns("U", _PAIR_TURNS[frozenset(oriented)]), output)
        apply_moves(cube, list(YELLOW_CROSS_ALG), output)

    return remap_tokens(output)


def solve_last_layer_face(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Orient the last-layer corners with the Sune.

    One oriented corner goes to the front-left. With none oriented, the
    front-left corner is chosen to show the top colour on its left side;
    with two, on its front side.
    """
    frame_ref = remap(reference)
    cube = CubeAlgebra(remap(state))
    top = _top_color(frame_ref)
    output: list[str] = []

    guard = 0
    while True:
        current = cube.to_string()
        twists = [corner_twist(slot, current, top) for slot in TOP_CORNER_SLOTS]
        oriented = [slot for slot, twist in zip(TOP_CORNER_SLOTS, twists) if twist == 0]
        if len(oriented) == 4:
            break
        guard += 1
        if guard > config.last_layer_guard:
            raise SearchExhausted("Last-layer face exceeded its guard")

        if len(oriented) == 1:
            anchor = oriented[0]
        else:
            wanted = 2 if not oriented else 1
            anchor = next(slot for slot, twist in zip(TOP_CORNER_SLOTS, twists) if twist == wanted)
        apply_moves(cube, quarter_turns("U", _turns_to_slot(anchor, _SUNE_ANCHOR)), output)
        apply_moves(cube, list(YELLOW_FACE_ALG), output)

    return remap_tokens(output)


def _placed_corners(state: str, frame_ref: str) -> list[int]:
    return [slot for slot in TOP_CORNER_SLOTS if corner_matches_slot(slot, state, frame_ref)]


def solve_last_layer_corners(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Place the last-layer corners with a three-corner cycle.

    The layer is turned to the angle where exactly one corner sits in its
    slot and the cycle is run around that corner. When no angle leaves a
    single corner placed, one cycle from any angle sets one up.
    """
    frame_ref = remap(reference)
    cube = CubeAlgebra(remap(state))
    output: list[str] = []

    guard = 0
    while not all(corner_solved_at(slot, cube.to_string(), frame_ref) for slot in TOP_CORNER_SLOTS):
        guard += 1
        if guard > config.last_layer_guard:
            raise SearchExhausted("Last-layer corners exceeded their guard")

        placed_by_turn = []
        for turns in range(4):
            trial = cube.copy().apply(quarter_turns("U", turns)).to_string()
            placed_by_turn.append(_placed_corners(trial, frame_ref))

        full = [turns for turns, placed in enumerate(placed_by_turn) if len(placed) == 4]
        if full:
            if full[0] == 0:
                raise SearchExhausted("Last-layer corners are placed but twisted")
            apply_moves(cube, quarter_turns("U", full[0]), output)
            continue

        single = [turns for turns, placed in enumerate(placed_by_turn) if len(placed) == 1]
        if single:
            turns = single[0]
            apply_moves(cube, quarter_turns("U", turns), output)
            apply_moves(cube, list(CORNER_CYCLES[placed_by_turn[turns][0]]), output)
        else:
            apply_moves(cube, list(CORNER_CYCLES[1]), output)

    return remap_tokens(output)


def solve_last_layer_edges(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Place the last-layer edges with a three-edge cycle.

    The cycle is run around the one edge already in place; with no single
    placed edge it runs once from the back to set one up. The layer itself is
    never turned, so the corners stay where the previous stage left them.
    """
    frame_ref = remap(reference)
    cube = CubeAlgebra(remap(state))
    output: list[str] = []

    guard = 0
    while cube.to_string() != frame_ref:
        guard += 1
        if guard > config.last_layer_guard:
            raise SearchExhausted("Last-layer edges exceeded their guard")

        current = cube.to_string()
        placed = [
            edge
            for edge in TOP_EDGES
            if sorted((current[edge["u"]], current[edge["side"]]))
            == sorted((frame_ref[edge["u"]], frame_ref[edge["side"]]))
        ]
        if len(placed) == 4:
            raise SearchExhausted("Last-layer edges are placed but the cube is not solved")
        if len(placed) == 1:
            apply_moves(cube, list(EDGE_CYCLES[placed[0]["side_face"]]), output)
        else:
            apply_moves(cube, list(EDGE_CYCLES["B"]), output)

    return remap_tokens(output)
