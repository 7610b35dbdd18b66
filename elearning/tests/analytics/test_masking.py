from django.test import SimpleTestCase

from elearning.analytics.masking import (
    SequentialMaskingStrategy,
    StableMaskingStrategy,
    mask_report,
)


def make_report():
    return {
        "participation_stats": {"total_participations": 3, "average_score": 50},
        "user_performance_matrix": {
            "matrix": [
                {"user_id": 30, "user_name": "Carla Klein", "total_score": 90},
                {"user_id": 10, "user_name": "Anna Alt", "total_score": 50},
                {"user_id": 20, "user_name": "Bernd Braun", "total_score": 10},
            ],
            "questions": [],
        },
        "progress_tracking": {
            "user_details": [
                {"user_id": 10, "user_name": "Anna Alt", "attempts": 1},
                {"user_id": 20, "user_name": "Bernd Braun", "attempts": 1},
                {"user_id": 30, "user_name": "Carla Klein", "attempts": 1},
            ]
        },
    }


class MaskReportTests(SimpleTestCase):
    def test_admin_gets_the_same_object(self):
        report = make_report()
        self.assertIs(mask_report(report, "admin"), report)

    def test_instructor_sees_no_real_names(self):
        report = make_report()
        masked = mask_report(report, "instructor")

        for name in ("Anna Alt", "Bernd Braun", "Carla Klein"):
            self.assertNotIn(name, str(masked))
        # The original report is left untouched
        self.assertEqual(report["user_performance_matrix"]["matrix"][0]["user_name"], "Carla Klein")

    def test_unknown_role_is_masked(self):
        for role in ("learner", "guest", None):
            masked = mask_report(make_report(), role)
            self.assertNotIn("Anna Alt", str(masked))

    def test_numbers_and_ids_are_unchanged(self):
        masked = mask_report(make_report(), "instructor")
        self.assertEqual(masked["participation_stats"], make_report()["participation_stats"])
        self.assertEqual(
            [row["user_id"] for row in masked["user_performance_matrix"]["matrix"]], [30, 10, 20]
        )

    def test_stable_labels_follow_user_ids_across_sections(self):
        masked = mask_report(make_report(), "instructor")
        matrix = {row["user_id"]: row["user_name"] for row in masked["user_performance_matrix"]["matrix"]}
        details = {row["user_id"]: row["user_name"] for row in masked["progress_tracking"]["user_details"]}

        self.assertEqual(matrix, {10: "Student 1", 20: "Student 2", 30: "Student 3"})
        self.assertEqual(matrix, details)

    def test_sequential_strategy_numbers_in_first_seen_order(self):
        masked = mask_report(make_report(), "instructor", strategy=SequentialMaskingStrategy())
        names = [row["user_name"] for row in masked["user_performance_matrix"]["matrix"]]
        self.assertEqual(names, ["Student 1", "Student 2", "Student 3"])
        self.assertEqual(masked["user_performance_matrix"]["matrix"][0]["user_id"], 30)


class MaskRowsTests(SimpleTestCase):
    def test_unseen_ids_are_appended(self):
        strategy = StableMaskingStrategy([5, 3])
        self.assertEqual(strategy.label_for(3), "Student 1")
        self.assertEqual(strategy.label_for(9), "Student 3")

    def test_strategy_masks_flat_rows_in_place(self):
        rows = [{"user_id": 2, "user_name": "B"}, {"user_id": 1, "user_name": "A"}, {"score": 3}]
        StableMaskingStrategy([1, 2]).mask_rows(rows)
        self.assertEqual([r.get("user_name") for r in rows], ["Student 2", "Student 1", None])
