import csv
import io

from django.test import TestCase, override_settings
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.test import APIClient

from elearning.participation.recorder import ParticipationRecorder
from elearning.users.models import Role

from ..fixtures import make_cache, make_capital_quiz, make_user


class AnalyticsViewTests(TestCase):
    def setUp(self):
        make_cache()
        self.client = APIClient()
        self.admin = make_user("chefin", Role.ADMIN)
        self.instructor = make_user("lehrer", Role.INSTRUCTOR)
        self.quiz, self.mc, self.ident = make_capital_quiz(self.instructor)

        recorder = ParticipationRecorder()
        self.anna = make_user("anna", first_name="Anna", last_name="Alt")
        self.bernd = make_user("bernd", first_name="Bernd", last_name="Braun")
        recorder.submit(
            self.anna,
            self.quiz.id,
            [{"question_id": self.mc.id, "answer": "Paris"}, {"question_id": self.ident.id, "answer": "42"}],
            time_taken=50,
        )
        recorder.submit(self.bernd, self.quiz.id, [{"question_id": self.mc.id, "answer": "Lyon"}], time_taken=20)

    def url(self, suffix=""):
        return f"/api/elearning/quizzes/{self.quiz.id}/analytics/{suffix}"

    def test_instructor_gets_masked_report(self):
        self.client.force_authenticate(self.instructor)
        response = self.client.get(self.url())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["analytics"]["participation_stats"]["total_participations"], 2)
        self.assertEqual(body["analytics"]["participation_stats"]["highest_score"], 15)
        self.assertNotIn("Anna Alt", response.content.decode())
        names = [row["user_name"] for row in body["analytics"]["user_performance_matrix"]["matrix"]]
        self.assertEqual(sorted(names), ["Student 1", "Student 2"])

    def test_admin_sees_real_names(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url())
        names = [row["user_name"] for row in response.json()["analytics"]["user_performance_matrix"]["matrix"]]
        self.assertEqual(names, ["Anna Alt", "Bernd Braun"])

    def test_learner_is_forbidden(self):
        self.client.force_authenticate(self.anna)
        self.assertEqual(self.client.get(self.url()).status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_quiz(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get("/api/elearning/quizzes/999999/analytics/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error_code"], "QUIZ_NOT_FOUND")

    def test_realtime_masks_recent_attempts(self):
        self.client.force_authenticate(self.instructor)
        response = self.client.get(self.url("realtime/"))
        body = response.json()
        self.assertEqual(len(body["recent_attempts"]), 2)
        self.assertNotIn("Bernd Braun", response.content.decode())
        self.assertIn("last_updated", body)

    @override_settings(QUIZ_REALTIME_RECENT_LIMIT=2)
    def test_realtime_labels_match_full_report(self):
        carla = make_user("carla", first_name="Carla", last_name="Conrad")
        ParticipationRecorder().submit(carla, self.quiz.id, [{"question_id": self.mc.id, "answer": "Paris"}])
        self.client.force_authenticate(self.instructor)

        matrix = self.client.get(self.url()).json()["analytics"]["user_performance_matrix"]["matrix"]
        full = {row["user_id"]: row["user_name"] for row in matrix}
        recent = self.client.get(self.url("realtime/")).json()["recent_attempts"]

        self.assertEqual(len(recent), 2)
        self.assertEqual([row["user_id"] for row in recent], [carla.id, self.bernd.id])
        for row in recent:
            self.assertEqual(row["user_name"], full[row["user_id"]])
        self.assertEqual(full[carla.id], "Student 3")

    def test_csv_export(self):
        self.client.force_authenticate(self.instructor)
        response = self.client.get(self.url("export/csv/"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("attachment", response["Content-Disposition"])
        content = b"".join(response.streaming_content).decode()
        rows = list(csv.reader(io.StringIO(content)))
        self.assertEqual(rows[0][:3], ["User ID", "User Name", "Total Score"])
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[2][-2:], ["incorrect", "not answered"])
        self.assertNotIn("Anna Alt", content)

    def test_json_export(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url("export/json/"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["participation_stats"]["total_participations"], 2)

    def test_excel_export(self):
        self.client.force_authenticate(self.instructor)
        response = self.client.get(self.url("export/excel/"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(f"quiz_{self.quiz.id}_analytics.xlsx", response["Content-Disposition"])
        sheet = load_workbook(io.BytesIO(response.content)).active
        rows = [[cell.value for cell in row] for row in sheet.iter_rows()]
        self.assertEqual(rows[0][:3], ["User ID", "User Name", "Total Score"])
        self.assertEqual(len(rows), 3)
        self.assertEqual(sorted(row[1] for row in rows[1:]), ["Student 1", "Student 2"])

    def test_unknown_export_format(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(self.url("export/pdf/"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(
        ANALYTICS_EXPORT_SINKS={"excel": "elearning.analytics.exporters.JsonExportSink"}
    )
    def test_sinks_come_from_settings(self):
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(self.url("export/excel/")).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(self.url("export/csv/")).status_code, 501)

    def test_report_is_cached_until_cleared(self):
        self.client.force_authenticate(self.admin)
        self.client.get(self.url())

        carla = make_user("carla")
        # Written behind the recorder's back, so the cached report stays stale
        self.quiz.participations.create(user=carla, total_score=5)
        stale = self.client.get(self.url()).json()
        self.assertEqual(stale["analytics"]["participation_stats"]["total_participations"], 2)

        response = self.client.post(self.url("clear-cache/"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fresh = self.client.get(self.url()).json()
        self.assertEqual(fresh["analytics"]["participation_stats"]["total_participations"], 3)

    def test_compare(self):
        other, _, _ = make_capital_quiz(self.instructor)
        self.client.force_authenticate(self.instructor)

        response = self.client.post(
            "/api/elearning/analytics/compare/", {"quiz_ids": [self.quiz.id, other.id]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["quiz"]["id"] for item in response.json()], [self.quiz.id, other.id])

        too_few = self.client.post("/api/elearning/analytics/compare/", {"quiz_ids": [self.quiz.id]}, format="json")
        self.assertEqual(too_few.status_code, status.HTTP_400_BAD_REQUEST)

        missing = self.client.post(
            "/api/elearning/analytics/compare/", {"quiz_ids": [self.quiz.id, 999999]}, format="json"
        )
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
