import unittest

from rubik_facelets.algebra import ForeignSolverFailure, apply_tokens, scramble
from rubik_facelets.goals import solved_through, solved_up_to, stage_goal_reached
from rubik_facelets.moves import solved_state
from rubik_facelets.state_codec import remap_tokens
from rubik_steps.config import SolverConfig
from rubik_steps.search import (
    CrossSearch,
    find_cross_solution,
    find_solver_prefix,
    search_by_moves,
    search_with_macros,
)
from rubik_steps.stages import YELLOW_FACE_ALG
from rubik_steps.types import SearchExhausted


class ScriptedSolver:
    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.calls = 0

    def solve(self, state):
        self.calls += 1
        return list(self.tokens)


class FailingSolver:
    def solve(self, state):
        raise ForeignSolverFailure("no solution")


class TestCrossSearch(unittest.TestCase):
    def setUp(self):
        self.ref = solved_state()

    def test_solved_cross_needs_no_moves(self):
        self.assertEqual(find_cross_solution(self.ref, self.ref), [])

    def test_single_turn_is_undone(self):
        state = apply_tokens(self.ref, ["F"])
        self.assertEqual(find_cross_solution(state, self.ref), ["F'"])

    def test_cross_reached_on_shuffles(self):
        for seed in range(3):
            state = apply_tokens(self.ref, scramble(25, seed=seed))
            tokens = find_cross_solution(state, self.ref)
            self.assertLessEqual(len(tokens), 8)
            self.assertTrue(solved_through(0, apply_tokens(state, tokens), self.ref))

    def test_shortest_first(self):
        state = apply_tokens(self.ref, scramble(25, seed=4))
        tokens = find_cross_solution(state, self.ref)
        for depth in range(len(tokens)):
            self.assertIsNone(CrossSearch(state, self.ref).at_depth(depth), msg=f"depth={depth}")

    def test_no_consecutive_same_face(self):
        state = apply_tokens(self.ref, scramble(25, seed=8))
        tokens = find_cross_solution(state, self.ref)
        for prev, nxt in zip(tokens[:-1], tokens[1:]):
            self.assertNotEqual(prev[0], nxt[0])

    def test_exhausted_below_needed_depth(self):
        state = apply_tokens(self.ref, ["F", "R"])
        with self.assertRaises(SearchExhausted):
            find_cross_solution(state, self.ref, max_depth=1)


class TestBreadthFirstSearches(unittest.TestCase):
    def setUp(self):
        self.ref = solved_state()

    def test_macros_reach_last_layer_cross(self):
        # Undo the orientation algorithm from a solved cube; first two layers stay intact.
        state = apply_tokens(self.ref, remap_tokens(["F", "U", "R", "U'", "R'", "F'"]))
        self.assertFalse(solved_through(3, state, self.ref))
        tokens = search_with_macros(3, state, self.ref)
        self.assertTrue(stage_goal_reached(3, apply_tokens(state, tokens), self.ref))

    def test_macros_already_at_goal(self):
        state = apply_tokens(self.ref, remap_tokens(list(YELLOW_FACE_ALG)))
        self.assertTrue(stage_goal_reached(3, state, self.ref))
        self.assertEqual(search_with_macros(3, state, self.ref), [])

    def test_node_budget(self):
        state = apply_tokens(self.ref, ["F", "R"])
        config = SolverConfig(max_search_nodes=1)
        with self.assertRaises(SearchExhausted):
            search_by_moves(0, state, self.ref, config)

    def test_stage_without_macros(self):
        state = apply_tokens(self.ref, ["F"])
        with self.assertRaises(SearchExhausted):
            search_with_macros(0, state, self.ref)

    def test_moves_find_short_cross_fix(self):
        state = apply_tokens(self.ref, ["F", "D"])
        tokens = search_by_moves(0, state, self.ref)
        after = apply_tokens(state, tokens)
        self.assertTrue(stage_goal_reached(0, after, self.ref))
        self.assertLessEqual(len(tokens), 2)

    def test_moves_depth_bound(self):
        state = apply_tokens(self.ref, ["F", "R"])
        config = SolverConfig(stage_max_depths=(1, 10, 10, 6, 7, 7, 7))
        with self.assertRaises(SearchExhausted):
            search_by_moves(0, state, self.ref, config)


class TestSolverPrefix(unittest.TestCase):
    def setUp(self):
        self.ref = solved_state()
        self.state = apply_tokens(self.ref, ["R", "U"])

    def test_overshoot_disallowed(self):
        solver = ScriptedSolver(["U'", "R'"])
        with self.assertRaises(SearchExhausted):
            find_solver_prefix(0, self.state, self.ref, solver)

    def test_overshoot_allowed(self):
        solver = ScriptedSolver(["U'", "R'"])
        tokens = find_solver_prefix(0, self.state, self.ref, solver, allow_next_solved=True)
        self.assertEqual(tokens, ["U'", "R'"])
        self.assertEqual(solver.calls, 1)

    def test_shortest_prefix_returned(self):
        state = apply_tokens(self.ref, ["D", "F"])
        solver = ScriptedSolver(["F'", "D'"])
        tokens = find_solver_prefix(4, state, self.ref, solver)
        self.assertEqual(tokens, ["F'"])
        self.assertTrue(solved_up_to(4, apply_tokens(state, tokens), self.ref))

    def test_foreign_failure_propagates(self):
        with self.assertRaises(ForeignSolverFailure):
            find_solver_prefix(0, self.state, self.ref, FailingSolver())


if __name__ == "__main__":
    unittest.main()
