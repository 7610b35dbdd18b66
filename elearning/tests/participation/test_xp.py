from django.test import SimpleTestCase

from elearning.participation.exceptions import XpCalculationError
from elearning.participation.xp import xp_breakdown


class XpBreakdownTests(SimpleTestCase):
    def test_perfect_attempt_on_small_quiz_with_time_limit(self):
        breakdown = xp_breakdown(
            quiz_total_score=15, quiz_total_time=60, total_score=15, correct_count=2, total_questions=2
        )
        # (50 + 30) * 1.5 * 1.0 + 25
        self.assertEqual(breakdown["total_xp"], 145)
        self.assertEqual(breakdown["score_xp"], 30)
        self.assertEqual(breakdown["performance_multiplier"], 1.5)
        self.assertEqual(breakdown["difficulty_multiplier"], 1.0)
        self.assertEqual(breakdown["time_bonus"], 25)
        self.assertEqual(breakdown["percentage"], 100.0)
        self.assertIn("performance_note", breakdown)
        self.assertNotIn("difficulty_note", breakdown)

    def test_no_time_bonus_without_time_limit(self):
        breakdown = xp_breakdown(
            quiz_total_score=15, quiz_total_time=0, total_score=15, correct_count=2, total_questions=2
        )
        self.assertEqual(breakdown["time_bonus"], 0)
        self.assertEqual(breakdown["total_xp"], 120)
        self.assertNotIn("time_note", breakdown)

    def test_difficulty_tiers(self):
        medium = xp_breakdown(50, 0, 0, 0, 1)
        high = xp_breakdown(100, 0, 0, 0, 1)
        self.assertEqual(medium["difficulty_multiplier"], 1.2)
        self.assertEqual(high["difficulty_multiplier"], 1.4)
        # floor(50 * 1.4) = 70
        self.assertEqual(high["total_xp"], 70)

    def test_performance_tiers_by_correct_ratio(self):
        self.assertEqual(xp_breakdown(10, 0, 0, 8, 10)["performance_multiplier"], 1.3)
        self.assertEqual(xp_breakdown(10, 0, 0, 7, 10)["performance_multiplier"], 1.1)
        self.assertEqual(xp_breakdown(10, 0, 0, 6, 10)["performance_multiplier"], 1.0)

    def test_time_bonus_needs_sixty_percent(self):
        self.assertEqual(xp_breakdown(10, 60, 0, 6, 10)["time_bonus"], 25)
        self.assertEqual(xp_breakdown(10, 60, 0, 5, 10)["time_bonus"], 0)

    def test_result_is_floored(self):
        # (50 + 2) * 1.1 = 57.2
        self.assertEqual(xp_breakdown(10, 0, 1, 7, 10)["total_xp"], 57)

    def test_zero_questions_raise(self):
        with self.assertRaises(XpCalculationError):
            xp_breakdown(10, 0, 0, 0, 0)

    def test_never_below_minimum_and_never_decreasing(self):
        for quiz_total in (0, 15, 60, 120):
            for quiz_time in (0, 300):
                previous = 0
                for correct in range(0, 11):
                    xp = xp_breakdown(quiz_total, quiz_time, correct, correct, 10)["total_xp"]
                    self.assertGreaterEqual(xp, 10)
                    self.assertGreaterEqual(xp, previous)
                    previous = xp
