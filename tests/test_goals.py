import unittest

from rubik_facelets.algebra import apply_tokens
from rubik_facelets.goals import (
    FINAL_STAGE,
    N_STAGES,
    STAGE_FACELETS,
    SolvedReference,
    cross_correct_count,
    first_unsolved_stage,
    solved_through,
    solved_up_to,
    stage_goal_reached,
)
from rubik_facelets.moves import solved_state
from rubik_facelets.state_codec import StateValidationError


class TestStagePredicates(unittest.TestCase):
    def setUp(self):
        self.ref = solved_state()

    def test_reference_satisfies_every_stage(self):
        for stage in range(N_STAGES):
            self.assertTrue(solved_through(stage, self.ref, self.ref))
            self.assertTrue(solved_up_to(stage, self.ref, self.ref))
        self.assertIsNone(first_unsolved_stage(self.ref, self.ref))

    def test_stage_facelet_sizes(self):
        self.assertEqual([len(s) for s in STAGE_FACELETS], [8, 21, 33, 4, 9, 50, 54])

    def test_d_turn_keeps_first_two_layers(self):
        state = apply_tokens(self.ref, ["D"])
        self.assertTrue(solved_up_to(2, state, self.ref))
        self.assertTrue(solved_up_to(4, state, self.ref))
        self.assertFalse(solved_through(5, state, self.ref))
        self.assertEqual(first_unsolved_stage(state, self.ref), 5)

    def test_u_turn_breaks_cross(self):
        state = apply_tokens(self.ref, ["U"])
        self.assertFalse(solved_through(0, state, self.ref))
        self.assertEqual(cross_correct_count(state, self.ref), 0)
        self.assertFalse(solved_up_to(6, state, self.ref))

    def test_r_turn_moves_one_cross_edge(self):
        state = apply_tokens(self.ref, ["R"])
        self.assertEqual(cross_correct_count(state, self.ref), 3)

    def test_stage_goal_excludes_next_stage(self):
        state = apply_tokens(self.ref, ["D"])
        self.assertTrue(stage_goal_reached(4, state, self.ref))
        self.assertFalse(stage_goal_reached(2, state, self.ref))
        self.assertTrue(stage_goal_reached(FINAL_STAGE, self.ref, self.ref))

    def test_invalid_stage(self):
        with self.assertRaises(ValueError):
            solved_through(7, self.ref, self.ref)
        with self.assertRaises(ValueError):
            solved_up_to(-1, self.ref, self.ref)


class TestSolvedReference(unittest.TestCase):
    def tearDown(self):
        SolvedReference.recapture()

    def test_capture_is_write_once(self):
        first = SolvedReference.recapture()
        other = apply_tokens(first, ["R"])
        self.assertEqual(SolvedReference.capture(other), first)
        self.assertEqual(SolvedReference.get(), first)

    def test_recapture_replaces_value(self):
        other = apply_tokens(solved_state(), ["R"])
        self.assertEqual(SolvedReference.recapture(other), other)
        self.assertEqual(SolvedReference.get(), other)

    def test_capture_validates(self):
        SolvedReference._value = None
        with self.assertRaises(StateValidationError):
            SolvedReference.capture("bad")


if __name__ == "__main__":
    unittest.main()
