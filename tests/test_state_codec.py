import unittest

from rubik_facelets.algebra import CubeAlgebra, apply_tokens, scramble
from rubik_facelets.moves import MOVE_TOKENS, solved_state
from rubik_facelets.state_codec import (
    StateValidationError,
    array_to_state,
    flat_to_faces,
    parse_algorithm,
    remap,
    remap_token,
    remap_tokens,
    state_to_array,
    validate_state,
)


class TestValidateState(unittest.TestCase):
    def test_solved_state_is_valid(self):
        self.assertEqual(validate_state(solved_state()), solved_state())

    def test_wrong_length(self):
        with self.assertRaises(StateValidationError):
            validate_state(solved_state()[:-1])

    def test_unknown_symbol(self):
        with self.assertRaises(StateValidationError):
            validate_state("X" + solved_state()[1:])

    def test_wrong_counts(self):
        with self.assertRaises(StateValidationError):
            validate_state("R" + solved_state()[1:])

    def test_duplicate_centres(self):
        state = list(solved_state())
        # Swap the R centre with a U edge facelet: counts stay at 9 each.
        state[13], state[1] = state[1], state[13]
        with self.assertRaises(StateValidationError):
            validate_state("".join(state))

    def test_not_a_string(self):
        with self.assertRaises(StateValidationError):
            validate_state(None)

    def test_validation_error_is_value_error(self):
        self.assertTrue(issubclass(StateValidationError, ValueError))


class TestCodecHelpers(unittest.TestCase):
    def test_array_round_trip(self):
        state = apply_tokens(solved_state(), ["R", "U2", "F'"])
        self.assertEqual(array_to_state(state_to_array(state)), state)

    def test_flat_to_faces(self):
        faces = flat_to_faces(solved_state())
        self.assertEqual(list(faces), ["U", "R", "F", "D", "L", "B"])
        self.assertEqual(faces["F"], ["FFF", "FFF", "FFF"])

    def test_parse_algorithm(self):
        self.assertEqual(parse_algorithm("(R U R' U') x F2 Rw D'"), ["R", "U", "R'", "U'", "F2", "D'"])
        self.assertEqual(parse_algorithm(""), [])


class TestRemap(unittest.TestCase):
    def test_involution_on_solved(self):
        self.assertEqual(remap(remap(solved_state())), solved_state())

    def test_involution_on_shuffles(self):
        for seed in range(5):
            state = apply_tokens(solved_state(), scramble(25, seed=seed))
            self.assertEqual(remap(remap(state)), state)

    def test_remap_brings_bottom_face_to_top(self):
        remapped = remap(solved_state())
        self.assertEqual(remapped[0:9], "D" * 9)
        self.assertEqual(remapped[27:36], "U" * 9)
        self.assertEqual(remapped[18:27], "B" * 9)
        self.assertEqual(remapped[9:18], "R" * 9)

    def test_token_relabeling(self):
        self.assertEqual(remap_tokens(["U", "F'", "R2", "D", "B2", "L'"]), ["D", "B'", "R2", "U", "F2", "L'"])
        with self.assertRaises(StateValidationError):
            remap_token("M")

    def test_remap_commutes_with_moves(self):
        state = apply_tokens(solved_state(), scramble(12, seed=7))
        for token in MOVE_TOKENS:
            lhs = remap(CubeAlgebra(state).move(token).to_string())
            rhs = CubeAlgebra(remap(state)).move(remap_token(token)).to_string()
            self.assertEqual(lhs, rhs, msg=token)


if __name__ == "__main__":
    unittest.main()
