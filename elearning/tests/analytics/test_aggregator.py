from datetime import datetime, timedelta

from django.test import SimpleTestCase

from elearning.analytics.aggregator import (
    build_report,
    calculate_trends,
    progress_tracking,
    question_difficulty,
    score_distribution,
    time_analysis,
    user_performance_matrix,
)
from elearning.analytics.records import AnswerRecord, ParticipationRecord, QuestionRecord, QuizRecord

QUIZ = QuizRecord(
    id=1,
    title="Hauptstädte",
    total_score=100,
    total_time=600,
    questions=(
        QuestionRecord(id=10, question="Frankreich?", question_type="multiple_choice", score=60),
        QuestionRecord(id=11, question="Antwort?", question_type="identification", score=40),
    ),
)

START = datetime(2025, 7, 1, 9, 0)


def participation(pid, user_id, score, time_taken=None, day=0, answers=()):
    return ParticipationRecord(
        id=pid,
        user_id=user_id,
        user_name=f"User {user_id}",
        total_score=score,
        time_taken=time_taken,
        status="completed",
        completed_at=START + timedelta(days=day, minutes=pid),
        answers=tuple(answers),
    )


class EmptyReportTests(SimpleTestCase):
    def test_empty_history_yields_zeroed_report(self):
        report = build_report(QUIZ, [])

        self.assertEqual(report["participation_stats"]["total_participations"], 0)
        self.assertEqual(report["participation_stats"]["completion_rate"], 0)
        self.assertEqual(report["participation_stats"]["total_possible_score"], 100)
        self.assertEqual(sum(report["score_distribution"].values()), 0)
        self.assertEqual(report["time_analysis"]["allocated_time"], 600)
        self.assertEqual(report["time_analysis"]["median_time"], 0)
        self.assertEqual(report["user_performance_matrix"]["matrix"], [])
        self.assertEqual([q["difficulty_level"] for q in report["question_analytics"]], ["very_hard", "very_hard"])
        self.assertEqual(report["progress_tracking"]["trends"], {"attempts_trend": 0, "score_trend": 0, "completion_trend": 0})


class ScoreDistributionTests(SimpleTestCase):
    def test_bucket_boundaries(self):
        scores = [0, 20, 21, 40, 60, 80, 81, 100]
        distribution = score_distribution(QUIZ, [participation(i, i, s) for i, s in enumerate(scores)])
        self.assertEqual(
            distribution,
            {"0-20%": 2, "21-40%": 2, "41-60%": 1, "61-80%": 1, "81-100%": 2},
        )

    def test_every_participation_lands_in_one_bucket(self):
        records = [participation(i, i, s) for i, s in enumerate([5, 33, 57, 99, 64, 12])]
        self.assertEqual(sum(score_distribution(QUIZ, records).values()), len(records))


class TimeAnalysisTests(SimpleTestCase):
    def test_median_of_even_count_is_mean_of_middle_values(self):
        records = [participation(i, i, 50, time_taken=t) for i, t in enumerate([100, 400, 200, 300])]
        analysis = time_analysis(QUIZ, records)
        self.assertEqual(analysis["median_time"], 250)
        self.assertEqual(analysis["average_time"], 250)
        self.assertEqual(analysis["fastest_time"], 100)
        self.assertEqual(analysis["slowest_time"], 400)
        # (600 - 250) / 600 * 100
        self.assertEqual(analysis["time_efficiency"], 58.33)

    def test_participations_without_time_are_ignored(self):
        records = [participation(1, 1, 50, time_taken=None), participation(2, 2, 50, time_taken=90)]
        self.assertEqual(time_analysis(QUIZ, records)["median_time"], 90)


class QuestionAnalyticsTests(SimpleTestCase):
    def test_difficulty_thresholds(self):
        self.assertEqual(question_difficulty(80), "easy")
        self.assertEqual(question_difficulty(79.99), "medium")
        self.assertEqual(question_difficulty(60), "medium")
        self.assertEqual(question_difficulty(40), "hard")
        self.assertEqual(question_difficulty(39.9), "very_hard")

    def test_answer_distribution_only_for_multiple_choice(self):
        records = [
            participation(1, 1, 60, answers=[AnswerRecord(10, "Paris", True), AnswerRecord(11, "41", False)]),
            participation(2, 2, 0, answers=[AnswerRecord(10, "Lyon", False)]),
        ]
        analytics = build_report(QUIZ, records)["question_analytics"]

        self.assertEqual(analytics[0]["answer_distribution"], {"Paris": 1, "Lyon": 1})
        self.assertEqual(analytics[0]["correct_percentage"], 50)
        self.assertEqual(analytics[1]["answer_distribution"], {})
        self.assertEqual(analytics[1]["total_answers"], 1)


class UserPerformanceMatrixTests(SimpleTestCase):
    def test_rows_sorted_by_score_with_stable_ties(self):
        records = [
            participation(1, 1, 40),
            participation(2, 2, 100),
            participation(3, 3, 40),
        ]
        matrix = user_performance_matrix(QUIZ, records)["matrix"]
        self.assertEqual([row["user_id"] for row in matrix], [2, 1, 3])

    def test_unanswered_questions_are_empty_cells(self):
        records = [participation(1, 1, 60, answers=[AnswerRecord(10, "Paris", True)])]
        row = user_performance_matrix(QUIZ, records)["matrix"][0]
        self.assertEqual(row["questions"][0]["score"], 60)
        self.assertIsNone(row["questions"][1])
        self.assertEqual(row["percentage"], 60.0)


class ProgressTrackingTests(SimpleTestCase):
    def test_single_day_has_no_trend(self):
        records = [participation(1, 1, 50), participation(2, 2, 70)]
        progress = progress_tracking(records)
        self.assertEqual(len(progress["daily_stats"]), 1)
        self.assertEqual(progress["daily_stats"][0]["attempts"], 2)
        self.assertEqual(progress["trends"]["attempts_trend"], 0)

    def test_trend_compares_last_week_with_week_before(self):
        daily = [{"attempts": 1, "average_score": 50, "completion_rate": 100}] * 7
        daily += [{"attempts": 2, "average_score": 75, "completion_rate": 100}] * 7
        trends = calculate_trends(daily)
        self.assertEqual(trends["attempts_trend"], 100.0)
        self.assertEqual(trends["score_trend"], 50.0)
        self.assertEqual(trends["completion_trend"], 0.0)

    def test_short_history_uses_available_days(self):
        daily = [
            {"attempts": 2, "average_score": 40, "completion_rate": 100},
            {"attempts": 3, "average_score": 60, "completion_rate": 100},
        ]
        # Both days fall into the recent window, there is nothing to compare with
        self.assertEqual(calculate_trends(daily)["attempts_trend"], 0)

    def test_user_details(self):
        records = [participation(1, 7, 30, day=0), participation(2, 8, 90, day=1)]
        details = progress_tracking(records)["user_details"]
        self.assertEqual([d["user_id"] for d in details], [7, 8])
        self.assertEqual(details[1]["best_score"], 90)
        self.assertEqual(details[1]["average_score"], 90)
        self.assertEqual(details[1]["attempts"], 1)
