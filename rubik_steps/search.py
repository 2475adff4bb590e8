"""Bounded searches: cross IDDFS, macro BFS, atomic BFS and full-solver prefixes."""

from __future__ import annotations

from collections import deque

from rubik_facelets.algebra import CubeAlgebra, FullSolver, invert_token
from rubik_facelets.goals import (
    CROSS_PAIRS,
    FINAL_STAGE,
    solved_through,
    solved_up_to,
    stage_goal_reached,
)
from rubik_facelets.moves import (
    EDGE_FACELETS,
    MOVE_PERMUTATIONS,
    MOVE_TOKENS,
    STICKER_DESTINATIONS,
    TOKEN_INDEX,
)
from rubik_facelets.state_codec import StateValidationError, remap_tokens

from .config import DEFAULT_CONFIG, SolverConfig
from .stages import STAGE_MACROS
from .types import SearchExhausted

CROSS_EDGE_COUNT = len(CROSS_PAIRS)


def _edge_distance_table(home: int) -> dict[int, int]:
    """Fewest turns that bring the sticker now at each position to ``home``."""
    dist = {home: 0}
    queue = deque([home])
    while queue:
        pos = queue.popleft()
        for perm in MOVE_PERMUTATIONS:
            # The sticker that lands on ``pos`` comes from ``perm[pos]``.
            src = int(perm[pos])
            if src not in dist:
                dist[src] = dist[pos] + 1
                queue.append(src)
    return dist


_CROSS_DISTANCES = tuple(_edge_distance_table(u) for u, _ in CROSS_PAIRS)


def _locate_cross_stickers(state: str, reference: str) -> list[int]:
    """Current position of the top-colour sticker of each cross edge."""
    positions: list[int] = []
    for u_home, side_home in CROSS_PAIRS:
        top, side = reference[u_home], reference[side_home]
        for a, b in EDGE_FACELETS:
            if state[a] == top and state[b] == side:
                positions.append(a)
                break
            if state[b] == top and state[a] == side:
                positions.append(b)
                break
        else:
            raise StateValidationError(f"Cross edge {top}{side} not found in state")
    return positions


class CrossSearch:
    """Iterative deepening over the 18 tokens for the top cross.

    Only the four cross edges matter for the goal, so the search tracks where
    their top-colour stickers sit. A depth is only explored when the remaining
    budget covers ``4 - correct`` and the farthest edge's own distance.
    """

    def __init__(self, state: str, reference: str):
        self.reference = reference
        self.homes = [u for u, _ in CROSS_PAIRS]
        self.positions = _locate_cross_stickers(state, reference)
        self.path: list[str] = []
        self.nodes = 0

    def _correct(self) -> int:
        return sum(1 for pos, home in zip(self.positions, self.homes) if pos == home)

    def _lower_bound(self) -> int:
        farthest = max(_CROSS_DISTANCES[i][pos] for i, pos in enumerate(self.positions))
        return max(CROSS_EDGE_COUNT - self._correct(), farthest)

    def _move(self, token: str) -> None:
        dest = STICKER_DESTINATIONS[TOKEN_INDEX[token]]
        self.positions = [dest[p] for p in self.positions]

    def _dfs(self, depth: int, last_face: str) -> bool:
        self.nodes += 1
        if self._correct() == CROSS_EDGE_COUNT:
            return True
        if depth == 0:
            return False
        if self._lower_bound() > depth:
            return False
        for token in MOVE_TOKENS:
            if token[0] == last_face:
                continue
            self._move(token)
            self.path.append(token)
            if self._dfs(depth - 1, token[0]):
                return True
            self.path.pop()
            self._move(invert_token(token))
        return False

    def at_depth(self, depth: int) -> list[str] | None:
        """Search for a cross within exactly ``depth`` budget; None if there is none."""
        self.path = []
        if self._dfs(depth, ""):
            return list(self.path)
        return None


def find_cross_solution(state: str, reference: str, max_depth: int = 8) -> list[str]:
    search = CrossSearch(state, reference)
    for depth in range(max_depth + 1):
        found = search.at_depth(depth)
        if found is not None:
            return found
    raise SearchExhausted(f"No cross solution within {max_depth} moves")


def _check_budget(expanded: int, config: SolverConfig, label: str) -> None:
    if expanded > config.max_search_nodes:
        raise SearchExhausted(f"{label} exceeded {config.max_search_nodes} expanded states")


def search_with_macros(
    stage: int,
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Breadth-first search over the stage's canned macros.

    Macros are written with the last layer on top; they are relabeled once so
    the search runs directly on the caller's frame.
    """
    if stage_goal_reached(stage, state, reference):
        return []
    macros = [remap_tokens(macro) for macro in STAGE_MACROS[stage]]
    if not macros:
        raise SearchExhausted(f"Stage {stage} has no macros")

    max_depth = config.max_depth(stage)
    queue: deque[tuple[str, list[str], int]] = deque([(state, [], 0)])
    visited = {state: 0}
    expanded = 0

    while queue:
        current, path, depth = queue.popleft()
        if depth >= max_depth:
            continue
        expanded += 1
        _check_budget(expanded, config, "Macro search")
        for macro in macros:
            next_state = CubeAlgebra(current).apply(macro).to_string()
            next_depth = depth + 1
            prev_depth = visited.get(next_state)
            if prev_depth is not None and prev_depth <= next_depth:
                continue
            next_path = path + macro
            if stage_goal_reached(stage, next_state, reference):
                return next_path
            visited[next_state] = next_depth
            queue.append((next_state, next_path, next_depth))

    raise SearchExhausted(f"Macro search for stage {stage} exhausted at depth {max_depth}")


def search_by_moves(
    stage: int,
    state: str,
    reference: str,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Breadth-first search over single tokens with no immediate same-face repeat."""
    if stage_goal_reached(stage, state, reference):
        return []

    max_depth = config.max_depth(stage)
    queue: deque[tuple[str, list[str], str]] = deque([(state, [], "")])
    visited = {state: 0}
    expanded = 0

    while queue:
        current, path, last_face = queue.popleft()
        depth = len(path)
        if depth >= max_depth:
            continue
        expanded += 1
        _check_budget(expanded, config, "Move search")
        for token in MOVE_TOKENS:
            if token[0] == last_face:
                continue
            next_state = CubeAlgebra(current).move(token).to_string()
            next_depth = depth + 1
            prev_depth = visited.get(next_state)
            if prev_depth is not None and prev_depth <= next_depth:
                continue
            next_path = path + [token]
            if stage_goal_reached(stage, next_state, reference):
                return next_path
            visited[next_state] = next_depth
            queue.append((next_state, next_path, token[0]))

    raise SearchExhausted(f"Move search for stage {stage} exhausted at depth {max_depth}")


def find_solver_prefix(
    stage: int,
    state: str,
    reference: str,
    full_solver: FullSolver,
    allow_next_solved: bool = False,
) -> list[str]:
    """Shortest prefix of a full solution that reaches ``stage``.

    Unless ``allow_next_solved`` is set, prefixes that also finish the next
    stage are skipped. Raises ForeignSolverFailure if the full solver fails.
    """
    tokens = full_solver.solve(state)
    cube = CubeAlgebra(state)
    for i, token in enumerate(tokens):
        cube.move(token)
        facelets = cube.to_string()
        if not solved_up_to(stage, facelets, reference):
            continue
        if not allow_next_solved and stage < FINAL_STAGE and solved_through(stage + 1, facelets, reference):
            continue
        return tokens[: i + 1]
    raise SearchExhausted(f"No prefix of the full solution isolates stage {stage}")
