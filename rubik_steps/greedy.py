"""Greedy per-slot solvers for the first-layer corners and the middle layer."""

from __future__ import annotations

from rubik_facelets.algebra import CubeAlgebra
from rubik_facelets.goals import solved_up_to
from rubik_facelets.moves import face_index
from rubik_facelets.state_codec import remap, remap_tokens

from .config import DEFAULT_CONFIG, SolverConfig
from .stages import (
    CORNER_INSERT_FACE,
    CORNER_SLOTS,
    LEFT_OF,
    MIDDLE_EDGES,
    RIGHT_OF,
    TOP_EDGE_ORDER,
    TOP_EDGES,
    left_insert,
    quarter_turns,
    right_insert,
)
from .types import SearchExhausted


def apply_moves(cube: CubeAlgebra, moves: list[str], output: list[str]) -> None:
    for move in moves:
        cube.move(move)
        output.append(move)


def corner_colors_at(state: str, slot: int) -> list[str]:
    return [state[i] for i in CORNER_SLOTS[slot][1]]


def corner_solved_at(slot: int, state: str, reference: str) -> bool:
    return all(state[i] == reference[i] for i in CORNER_SLOTS[slot][1])


def corner_matches_slot(slot: int, state: str, reference: str) -> bool:
    """Right cubie in the slot, any twist."""
    return sorted(corner_colors_at(state, slot)) == sorted(corner_colors_at(reference, slot))


def find_corner(state: str, colors: list[str]) -> int | None:
    target = sorted(colors)
    for slot in range(len(CORNER_SLOTS)):
        if sorted(corner_colors_at(state, slot)) == target:
            return slot
    return None


def _corner_insert(face: str) -> list[str]:
    return [f"{face}'", "D'", face, "D"]


def solve_first_layer_corners(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Seat the four top corners in slot order with ``X' D' X D``.

    A corner sitting in the wrong top slot is popped down first; a corner in
    the bottom layer is turned under its slot with the shortest D turn and then
    inserted. Any slot exceeding its guard fails the whole stage.
    """
    cube = CubeAlgebra(state)
    output: list[str] = []

    for target in range(4):
        target_colors = corner_colors_at(reference, target)
        guard = 0
        while not corner_solved_at(target, cube.to_string(), reference):
            guard += 1
            if guard > config.corner_guard:
                raise SearchExhausted(f"Corner slot {CORNER_SLOTS[target][0]} exceeded its guard")
            current = cube.to_string()
            pos = find_corner(current, target_colors)
            if pos is None:
                raise SearchExhausted(f"Corner {''.join(target_colors)} not found")

            if pos < 4:
                apply_moves(cube, _corner_insert(CORNER_INSERT_FACE[pos]), output)
                continue

            # D moves the bottom corners one slot backwards in F, L, B, R order.
            offset = (target - (pos - 4)) % 4
            apply_moves(cube, quarter_turns("D", -offset), output)

            insert = _corner_insert(CORNER_INSERT_FACE[target])
            repeats = 0
            while not corner_solved_at(target, cube.to_string(), reference) and repeats < config.corner_insert_repeats:
                apply_moves(cube, insert, output)
                repeats += 1

    return output


def _edge_solved(indices, state: str, reference: str) -> bool:
    return all(state[i] == reference[i] for i in indices)


def _middle_layer_done(frame_state: str, reference: str) -> bool:
    # The frame is a half turn away from the caller's; remap is its own inverse.
    return solved_up_to(2, remap(frame_state), reference)


def solve_middle_layer(
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Insert the four middle edges, working with the first layer at the bottom.

    Each pass looks for a top edge free of top and bottom colours, turns it
    over its matching centre and inserts it right or left. When none is left
    but a middle slot is still wrong, that edge is pushed out to the top layer.
    """
    frame_state = remap(state)
    frame_ref = remap(reference)
    cube = CubeAlgebra(frame_state)
    output: list[str] = []

    centers = {face: frame_ref[face_index(face, 4)] for face in ("U", "D", "F", "R", "B", "L")}
    neutral = {centers["U"], centers["D"]}
    color_to_face = {centers[face]: face for face in TOP_EDGE_ORDER}
    edge_by_face = {edge["side_face"]: edge for edge in TOP_EDGES}

    guard = 0
    while not _middle_layer_done(cube.to_string(), reference):
        guard += 1
        if guard > config.middle_guard:
            raise SearchExhausted("Middle layer exceeded its guard")

        current = cube.to_string()
        inserted = False
        for edge in TOP_EDGES:
            top_color = current[edge["u"]]
            side_color = current[edge["side"]]
            if top_color in neutral or side_color in neutral:
                continue
            front = color_to_face[side_color]
            # U moves top edges one slot backwards in F, R, B, L order.
            offset = (TOP_EDGE_ORDER.index(front) - TOP_EDGE_ORDER.index(edge["side_face"])) % 4
            align = quarter_turns("U", -offset)
            apply_moves(cube, align, output)

            aligned_top = cube.to_string()[edge_by_face[front]["u"]]
            if aligned_top == centers[RIGHT_OF[front]]:
                apply_moves(cube, right_insert(front, RIGHT_OF[front]), output)
            elif aligned_top == centers[LEFT_OF[front]]:
                apply_moves(cube, left_insert(front, LEFT_OF[front]), output)
            else:
                raise SearchExhausted(f"Edge {top_color}{side_color} has no neighbouring centre")
            apply_moves(cube, quarter_turns("U", offset), output)
            inserted = True
            break

        if inserted:
            continue

        for edge in MIDDLE_EDGES:
            if _edge_solved(edge["indices"], current, frame_ref):
                continue
            if "right" in edge:
                apply_moves(cube, right_insert(edge["front"], edge["right"]), output)
            else:
                apply_moves(cube, left_insert(edge["front"], edge["left"]), output)
            break
        else:
            raise SearchExhausted("No top edge to insert and no middle edge to eject")

    return remap_tokens(output)
