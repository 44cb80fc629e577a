from __future__ import annotations

import itertools
import unittest

from lotto.errors import ConfigError, Reason, ValidationError
from lotto.intake import TicketIntakeValidator, TicketSelection, validate_selection
from lotto.rules import GameRules


class SelectionValidationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = TicketIntakeValidator()

    def assertRejected(self, reason: Reason, national_id, numbers) -> ValidationError:
        with self.assertRaises(ValidationError) as ctx:
            self.validator.validate(national_id, numbers)
        self.assertEqual(ctx.exception.reason, reason)
        return ctx.exception

    def test_six_numbers_from_text(self) -> None:
        selection = self.validator.validate("900101-1234567", "1,2,3,4,5,6")
        self.assertIsInstance(selection, TicketSelection)
        self.assertEqual(selection.numbers, frozenset({1, 2, 3, 4, 5, 6}))
        self.assertEqual(selection.national_id, "900101-1234567")

    def test_duplicate_is_rejected_not_collapsed(self) -> None:
        error = self.assertRejected(Reason.DUPLICATE_IN_INPUT, "id-1", "1,1,2,3,4,5")
        self.assertIn("6 numbers", error.message)

    def test_out_of_range(self) -> None:
        self.assertRejected(Reason.OUT_OF_RANGE, "id-1", "1,2,3,4,5,46")
        self.assertRejected(Reason.OUT_OF_RANGE, "id-1", "0,2,3,4,5,6")
        self.assertRejected(Reason.OUT_OF_RANGE, "id-1", "-1,2,3,4,5,6")

    def test_too_few_and_too_many(self) -> None:
        self.assertRejected(Reason.INVALID_CARDINALITY, "id-1", "1,2,3,4,5")
        self.assertRejected(
            Reason.INVALID_CARDINALITY, "id-1", ",".join(str(n) for n in range(1, 12))
        )

    def test_cardinality_bounds_are_inclusive(self) -> None:
        ten = self.validator.validate("id-1", list(range(36, 46)))
        self.assertEqual(len(ten.numbers), 10)
        six = self.validator.validate("id-1", [45, 44, 43, 42, 41, 40])
        self.assertEqual(six.sorted_numbers(), [40, 41, 42, 43, 44, 45])

    def test_result_does_not_depend_on_order(self) -> None:
        base = [3, 17, 22, 30, 41, 45, 9]
        expected = frozenset(base)
        for perm in itertools.islice(itertools.permutations(base), 0, 5040, 97):
            text = ",".join(str(n) for n in perm)
            self.assertEqual(self.validator.validate("id-1", text).numbers, expected)
            self.assertEqual(self.validator.validate("id-1", list(perm)).numbers, expected)

    def test_whitespace_around_tokens_is_accepted(self) -> None:
        selection = self.validator.validate("id-1", " 1, 2 ,3,  4,5 , 6 ")
        self.assertEqual(selection.numbers, frozenset(range(1, 7)))

    def test_numeric_strings_in_list_form(self) -> None:
        selection = self.validator.validate("id-1", ["1", "2", "3", 4, 5, 6])
        self.assertEqual(selection.numbers, frozenset(range(1, 7)))

    def test_malformed_tokens(self) -> None:
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", "1,2,three,4,5,6")
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", "1,2,3,4,5,6,")
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", "1,2,3.5,4,5,6")
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", "1;2;3;4;5;6")
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", [1, 2, 3, 4, 5, True])
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", [1, 2, 3, 4, 5, 6.0])
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", 123456)

    def test_numbers_required(self) -> None:
        self.assertRejected(Reason.NUMBERS_REQUIRED, "id-1", None)
        self.assertRejected(Reason.NUMBERS_REQUIRED, "id-1", "")
        self.assertRejected(Reason.NUMBERS_REQUIRED, "id-1", "   ")
        self.assertRejected(Reason.NUMBERS_REQUIRED, "id-1", [])

    def test_identity_rules(self) -> None:
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, None, "1,2,3,4,5,6")
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, "", "1,2,3,4,5,6")
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, "   ", "1,2,3,4,5,6")
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, "x" * 21, "1,2,3,4,5,6")
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, 12345, "1,2,3,4,5,6")
        self.assertEqual(
            self.validator.validate("x" * 20, "1,2,3,4,5,6").national_id, "x" * 20
        )
        self.assertEqual(
            self.validator.validate("  abc  ", "1,2,3,4,5,6").national_id, "  abc  "
        )
        # padding counts toward the length limit
        self.assertRejected(
            Reason.MISSING_OR_INVALID_IDENTITY, " " + "x" * 20 + " ", "1,2,3,4,5,6"
        )

    def test_checks_run_in_order(self) -> None:
        # identity beats everything else
        self.assertRejected(Reason.MISSING_OR_INVALID_IDENTITY, "", "1,1,99")
        # a malformed token is reported before duplicates
        self.assertRejected(Reason.MALFORMED_TOKEN, "id-1", "1,1,x,2,3,4")
        # duplicates are reported before range
        self.assertRejected(Reason.DUPLICATE_IN_INPUT, "id-1", "99,99,1,2,3,4")
        # range is reported before cardinality
        self.assertRejected(Reason.OUT_OF_RANGE, "id-1", "1,2,99")

    def test_validation_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            validate_selection("id-1", "1,2,3")


class CustomRulesTests(unittest.TestCase):
    def test_custom_rules_are_honoured(self) -> None:
        rules = GameRules(min_picks=5, max_picks=5, lowest=1, highest=69)
        selection = validate_selection("id-1", "1,20,40,60,69", rules=rules)
        self.assertEqual(selection.numbers, frozenset({1, 20, 40, 60, 69}))
        with self.assertRaises(ValidationError) as ctx:
            validate_selection("id-1", "1,2,3,4,5,6", rules=rules)
        self.assertEqual(ctx.exception.reason, Reason.INVALID_CARDINALITY)

    def test_inconsistent_rules_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            GameRules(min_picks=7, max_picks=6)
        with self.assertRaises(ConfigError):
            GameRules(lowest=10, highest=1)
        with self.assertRaises(ConfigError):
            GameRules(min_picks=6, max_picks=10, lowest=1, highest=8)


class DrawNumberValidationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = TicketIntakeValidator()

    def test_order_is_preserved(self) -> None:
        self.assertEqual(
            self.validator.validate_draw([42, 7, 35, 14, 28, 21]), [42, 7, 35, 14, 28, 21]
        )
        self.assertEqual(self.validator.validate_draw("7, 14,21"), [7, 14, 21])

    def test_invalid_draws(self) -> None:
        for numbers in (None, [], [1, 1, 2], [0, 1, 2], [1, 2, 46], "1,x,3"):
            with self.subTest(numbers=numbers):
                with self.assertRaises(ValidationError) as ctx:
                    self.validator.validate_draw(numbers)
                self.assertEqual(ctx.exception.reason, Reason.INVALID_DRAW_NUMBERS)


if __name__ == "__main__":
    unittest.main()
