from unittest.mock import MagicMock

from factories import DatabaseTestCase

from fastapi.testclient import TestClient

from app.api.exercises import get_catalog
from app.database import get_db
from app.errors import CatalogNotConfiguredError, UpstreamError
from app.main import app
from app.models.enums import DayOfWeek, UserType
from app.utils.utils import create_access_token


class ApiTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        super().tearDown()

    def auth(self, user):
        token = create_access_token(user.id, user.user_type.value)
        return {"Authorization": f"Bearer {token}"}


class TestAuthApi(ApiTestCase):
    def test_register_login_and_profile(self):
        response = self.client.post("/auth/register", json={
            "name": "Ana Silva",
            "email": "ana@example.com",
            "password": "secret123",
            "user_type": "Student",
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["user"]["user_type"], "Student")

        duplicate = self.client.post("/auth/register", json={
            "name": "Ana Again",
            "email": "ANA@example.com",
            "password": "secret123",
            "user_type": "Instructor",
        })
        self.assertEqual(duplicate.status_code, 400)

        login = self.client.post("/auth/login", json={"email": "ana@example.com", "password": "secret123"})
        self.assertEqual(login.status_code, 200)
        token = login.json()["access_token"]

        profile = self.client.get("/users/profile", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(profile.status_code, 200)
        self.assertEqual(profile.json()["email"], "ana@example.com")
        self.assertEqual(profile.json()["total_exercises_count"], 0)

    def test_wrong_password_is_unauthorized(self):
        self.client.post("/auth/register", json={
            "name": "Ana Silva", "email": "ana@example.com", "password": "secret123", "user_type": "Student",
        })

        response = self.client.post("/auth/login", json={"email": "ana@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)

    def test_missing_or_bad_token(self):
        self.assertEqual(self.client.get("/users/profile").status_code, 401)
        response = self.client.get("/users/profile", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(response.status_code, 401)

    def test_token_from_cookie(self):
        student = self.make_student("Ana Silva")
        self.client.cookies.set("access_token", create_access_token(student.id, UserType.STUDENT.value))

        self.assertEqual(self.client.get("/users/profile").json()["id"], student.id)

    def test_null_fields_in_profile_update_are_ignored(self):
        student = self.make_student("Ana Silva", bio="Runner")

        response = self.client.put(
            "/users/profile", json={"name": None, "bio": None, "age": 30}, headers=self.auth(student)
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Ana Silva")
        self.assertEqual(response.json()["bio"], "Runner")
        self.assertEqual(response.json()["age"], 30)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")


class TestRoleGating(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.coach = self.make_instructor("Coach Carter")
        self.student = self.make_student("Ana Silva")

    def test_students_cannot_use_instructor_routes(self):
        for path in ("/instructors/students", "/instructors/statistics", "/instructors/invitations"):
            self.assertEqual(self.client.get(path, headers=self.auth(self.student)).status_code, 403)

    def test_unknown_statistics_period_falls_back_to_month(self):
        response = self.client.get(
            "/instructors/statistics", params={"period": "year"}, headers=self.auth(self.coach)
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["period"], "month")

    def test_instructors_cannot_use_student_routes(self):
        for path in ("/students/profile", "/students/invitations", "/students/workouts"):
            self.assertEqual(self.client.get(path, headers=self.auth(self.coach)).status_code, 403)


class TestInvitationFlowApi(ApiTestCase):
    def test_invite_accept_and_disconnect(self):
        coach = self.make_instructor("Coach Carter")
        student = self.make_student("Ana Silva")

        invite = self.client.post("/instructors/connect", json={"email": "ana.silva@example.com"}, headers=self.auth(coach))
        self.assertEqual(invite.status_code, 200)
        self.assertEqual(invite.json()["status"], "Pending")

        again = self.client.post("/instructors/connect", json={"student_id": student.id}, headers=self.auth(coach))
        self.assertEqual(again.status_code, 400)

        count = self.client.get("/students/invitations/count", headers=self.auth(student))
        self.assertEqual(count.json(), {"count": 1})

        pending = self.client.get("/students/invitations", headers=self.auth(student)).json()
        self.assertEqual(pending[0]["instructor_name"], "Coach Carter")

        invitation_id = pending[0]["invitation_id"]
        accepted = self.client.post(f"/students/invitations/{invitation_id}/accept", headers=self.auth(student))
        self.assertEqual(accepted.status_code, 200)
        self.assertEqual(
            self.client.post(f"/students/invitations/{invitation_id}/accept", headers=self.auth(student)).status_code,
            400,
        )

        students = self.client.get("/instructors/students", headers=self.auth(coach)).json()
        self.assertEqual([s["id"] for s in students], [student.id])
        self.assertEqual(students[0]["active_workout_id"], 0)

        trainer = self.client.get("/students/current-trainer", headers=self.auth(student)).json()
        self.assertEqual(trainer["id"], coach.id)

        removed = self.client.delete(f"/instructors/students/{student.id}", headers=self.auth(coach))
        self.assertEqual(removed.status_code, 200)
        missing = self.client.delete(f"/instructors/students/{student.id}", headers=self.auth(coach))
        self.assertEqual(missing.status_code, 404)

    def test_invite_without_target_is_bad_request(self):
        coach = self.make_instructor("Coach Carter")
        response = self.client.post("/instructors/connect", json={}, headers=self.auth(coach))
        self.assertEqual(response.status_code, 400)


class TestWorkoutApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.coach = self.make_instructor("Coach Carter")
        self.student = self.make_student("Ana Silva")
        self.connect(self.coach, self.student)

    def _create_workout(self):
        response = self.client.post(
            "/workouts", json={"name": "Push Pull", "student_id": self.student.id}, headers=self.auth(self.coach)
        )
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]

    def test_build_and_reorder_workout(self):
        workout_id = self._create_workout()
        day = self.client.post(
            f"/workouts/{workout_id}/days", json={"day_of_week": DayOfWeek.MONDAY}, headers=self.auth(self.coach)
        ).json()
        duplicate = self.client.post(
            f"/workouts/{workout_id}/days", json={"day_of_week": DayOfWeek.MONDAY}, headers=self.auth(self.coach)
        )
        self.assertEqual(duplicate.status_code, 400)

        ids = []
        for name in ("Bench", "Row", "Press"):
            response = self.client.post(
                f"/workouts/{workout_id}/days/{day['id']}/exercises",
                json={"name": name, "sets": "3", "repetitions": "8-12"},
                headers=self.auth(self.coach),
            )
            self.assertEqual(response.status_code, 201)
            ids.append(response.json()["id"])

        reordered = self.client.put(
            f"/workouts/{workout_id}/days/{day['id']}/exercises/reorder",
            json={"exercise_ids": [ids[2], 9999, ids[0], ids[1]]},
            headers=self.auth(self.coach),
        )
        self.assertEqual(reordered.status_code, 200)
        self.assertEqual([(e["name"], e["order"]) for e in reordered.json()], [("Press", 0), ("Bench", 1), ("Row", 2)])

        detail = self.client.get(f"/workouts/{workout_id}", headers=self.auth(self.student)).json()
        self.assertEqual([e["name"] for e in detail["days"][0]["exercises"]], ["Press", "Bench", "Row"])

        summaries = self.client.get("/students/workouts", headers=self.auth(self.student)).json()
        self.assertEqual(summaries[0]["exercises_count"], 3)

    def test_unconnected_instructor_is_forbidden(self):
        workout_id = self._create_workout()
        stranger = self.make_instructor("Stranger Coach")

        self.assertEqual(self.client.get(f"/workouts/{workout_id}", headers=self.auth(stranger)).status_code, 403)
        response = self.client.post(
            "/workouts", json={"name": "Sneaky", "student_id": self.student.id}, headers=self.auth(stranger)
        )
        self.assertEqual(response.status_code, 403)

    def test_students_cannot_edit_workouts(self):
        workout_id = self._create_workout()
        response = self.client.delete(f"/workouts/{workout_id}", headers=self.auth(self.student))
        self.assertEqual(response.status_code, 403)

    def test_missing_workout(self):
        self.assertEqual(self.client.get("/workouts/999", headers=self.auth(self.coach)).status_code, 404)

    def test_student_marks_progress(self):
        workout_id = self._create_workout()
        day = self.client.post(
            f"/workouts/{workout_id}/days", json={"day_of_week": DayOfWeek.FRIDAY}, headers=self.auth(self.coach)
        ).json()
        exercise = self.client.post(
            f"/workouts/{workout_id}/days/{day['id']}/exercises", json={"name": "Squat"}, headers=self.auth(self.coach)
        ).json()

        marked = self.client.post(
            "/students/progress",
            json={"exercise_id": exercise["id"], "status": "Completed", "date": "2024-05-17"},
            headers=self.auth(self.student),
        )
        self.assertEqual(marked.status_code, 200)

        daily = self.client.get("/students/progress/daily", params={"date": "2024-05-17"}, headers=self.auth(self.student))
        self.assertEqual(daily.json()["completion_rate"], 100.0)

        weekly = self.client.get(
            "/students/progress/weekly", params={"week_start": "2024-05-13"}, headers=self.auth(self.student)
        ).json()
        self.assertEqual(weekly["total_completed_exercises"], 1)

        unknown = self.client.post(
            "/students/progress", json={"exercise_id": 999, "status": "Skipped"}, headers=self.auth(self.student)
        )
        self.assertEqual(unknown.status_code, 404)


class TestExerciseCatalogApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.make_student("Ana Silva")
        self.catalog = MagicMock()
        app.dependency_overrides[get_catalog] = lambda: self.catalog

    def test_lists_body_parts(self):
        self.catalog.list_body_parts.return_value = ["back", "chest"]

        response = self.client.get("/exercises/bodyparts", headers=self.auth(self.user))

        self.assertEqual(response.json(), ["back", "chest"])

    def test_upstream_errors(self):
        self.catalog.list_targets.side_effect = UpstreamError("down")
        self.catalog.list_equipments.side_effect = CatalogNotConfiguredError("no key")

        self.assertEqual(self.client.get("/exercises/targets", headers=self.auth(self.user)).status_code, 502)
        self.assertEqual(self.client.get("/exercises/equipments", headers=self.auth(self.user)).status_code, 503)

    def test_unknown_exercise(self):
        self.catalog.get_exercise.return_value = None
        self.assertEqual(self.client.get("/exercises/0000", headers=self.auth(self.user)).status_code, 404)
