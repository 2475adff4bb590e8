import unittest

from rubik_facelets.algebra import apply_tokens
from rubik_facelets.moves import solved_state
from rubik_facelets.state_codec import remap_tokens
from rubik_steps.oversolve import COMPLETES_CUBE_NOTICE, COMPLETES_NEXT_NOTICE, check_oversolve
from rubik_steps.stages import EDGE_CYCLE_ALG


class TestCheckOversolve(unittest.TestCase):
    def setUp(self):
        self.ref = solved_state()

    def test_empty_sequence_has_no_notice(self):
        state = apply_tokens(self.ref, ["U"])
        self.assertIsNone(check_oversolve(0, state, [], self.ref))

    def test_sequence_that_finishes_cube(self):
        state = apply_tokens(self.ref, ["U"])
        self.assertEqual(check_oversolve(0, state, ["U'"], self.ref), COMPLETES_CUBE_NOTICE)
        self.assertEqual(check_oversolve(3, state, ("U'",), self.ref), COMPLETES_CUBE_NOTICE)

    def test_final_stage_reports_finished_cube(self):
        state = apply_tokens(self.ref, ["D"])
        self.assertEqual(check_oversolve(6, state, ["D'"], self.ref), COMPLETES_CUBE_NOTICE)

    def test_sequence_that_finishes_next_stage(self):
        # Edges of the last layer stay cycled; everything before them is done.
        target = apply_tokens(self.ref, remap_tokens(list(EDGE_CYCLE_ALG)))
        state = apply_tokens(target, ["D"])
        self.assertEqual(check_oversolve(4, state, ["D'"], self.ref), COMPLETES_NEXT_NOTICE)
        self.assertEqual(check_oversolve(3, state, ["D'"], self.ref), COMPLETES_NEXT_NOTICE)

    def test_sequence_that_only_finishes_its_stage(self):
        state = apply_tokens(self.ref, ["D", "F"])
        self.assertIsNone(check_oversolve(4, state, ["F'"], self.ref))
        self.assertEqual(check_oversolve(0, state, ["F'"], self.ref), COMPLETES_NEXT_NOTICE)


if __name__ == "__main__":
    unittest.main()
