from datetime import date

from factories import DatabaseTestCase

from app.crud import exercise_status as crud_status
from app.errors import ErrorKind, is_error
from app.models.enums import DayOfWeek, StatusType, UserType
from app.models.exercise import Exercise
from app.models.exercise_status import ExerciseStatus
from app.models.student_instructor import StudentInstructor
from app.models.user import User
from app.models.workout import Workout, WorkoutDay
from app.schemas.user import StudentProfileUpdate, UserCreate, UserUpdate
from app.services import invitation_service, user_service
from app.utils.utils import decode_access_token, verify_password


class TestRegistration(DatabaseTestCase):
    def _register(self, email="Ana@Example.com", user_type=UserType.STUDENT):
        return user_service.register_user(
            self.db, UserCreate(name=" Ana Silva ", email=email, password="secret123", user_type=user_type)
        )

    def test_register_hashes_password_and_issues_token(self):
        user, token = self._register()

        self.assertEqual(user.email, "ana@example.com")
        self.assertEqual(user.name, "Ana Silva")
        self.assertNotEqual(user.password_hash, "secret123")
        self.assertTrue(verify_password("secret123", user.password_hash))
        self.assertEqual(decode_access_token(token), user.id)

    def test_email_is_unique_ignoring_case(self):
        self._register()
        result = self._register(email="ANA@example.com", user_type=UserType.INSTRUCTOR)

        self.assertTrue(is_error(result))
        self.assertEqual(result.kind, ErrorKind.CONFLICT)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_authenticate(self):
        user, _ = self._register()

        logged_in, token = user_service.authenticate(self.db, "ANA@example.com", "secret123")
        self.assertEqual(logged_in.id, user.id)
        self.assertEqual(decode_access_token(token), user.id)

        self.assertIsNone(user_service.authenticate(self.db, "ana@example.com", "wrong"))
        self.assertIsNone(user_service.authenticate(self.db, "nobody@example.com", "secret123"))


class TestProfiles(DatabaseTestCase):
    def test_password_change_needs_current_password(self):
        user, _ = user_service.register_user(
            self.db, UserCreate(name="Ana", email="ana@example.com", password="secret123", user_type=UserType.STUDENT)
        )

        wrong = user_service.update_user(self.db, user, UserUpdate(current_password="nope", new_password="another1"))
        self.assertEqual(wrong.kind, ErrorKind.INVALID_ARGUMENT)
        missing = user_service.update_user(self.db, user, UserUpdate(new_password="another1"))
        self.assertEqual(missing.kind, ErrorKind.INVALID_ARGUMENT)

        updated = user_service.update_user(
            self.db, user, UserUpdate(current_password="secret123", new_password="another1", bio="Runner")
        )
        self.assertEqual(updated.bio, "Runner")
        self.assertTrue(verify_password("another1", updated.password_hash))

    def test_partial_update_leaves_other_fields(self):
        coach = self.make_instructor("Coach Carter", description="Strength")

        updated = user_service.update_user(self.db, coach, UserUpdate(years_of_experience=7))

        self.assertEqual(updated.years_of_experience, 7)
        self.assertEqual(updated.description, "Strength")

    def test_search_users_pages(self):
        for name in ("Ana Silva", "Ana Souza", "Anabela Lima", "Bruno Costa"):
            self.make_student(name)

        self.assertEqual([u.name for u in user_service.search_users(self.db, "ana", page=1, page_size=2)],
                         ["Ana Silva", "Ana Souza"])
        self.assertEqual([u.name for u in user_service.search_users(self.db, "ana", page=2, page_size=2)],
                         ["Anabela Lima"])
        self.assertEqual(len(user_service.search_users(self.db, "costa@", page=1)), 1)

    def test_student_profile_counts_exercises(self):
        student = self.make_student("Ana Silva")
        workout = self.make_workout(student)
        self.make_exercise(self.make_day(workout, DayOfWeek.MONDAY), "Squat", 0)
        self.make_exercise(self.make_day(workout, DayOfWeek.THURSDAY), "Bench", 0)

        profile = user_service.get_student_profile(self.db, student.id)

        self.assertEqual(profile.total_exercises_count, 2)
        self.assertIsNone(user_service.get_student_profile(self.db, self.make_instructor("Coach").id))

    def test_update_student_profile(self):
        student = self.make_student("Ana Silva", goal="Run a marathon")

        profile = user_service.update_student_profile(
            self.db, student.id, StudentProfileUpdate(name="Ana S.", height=168, weight=61.5, goal="Get stronger")
        )

        self.assertEqual(profile.name, "Ana S.")
        self.assertEqual(profile.height, 168)
        self.assertEqual(profile.weight, 61.5)
        self.assertEqual(profile.goal, "Get stronger")


class TestDeleteAccount(DatabaseTestCase):
    def test_delete_student_removes_everything_it_owns(self):
        coach = self.make_instructor("Coach Carter")
        student = self.make_student("Ana Silva")
        other = self.make_student("Bruno Costa")
        self.connect(coach, student)
        invitation_service.invite(self.db, coach.id, student_id=other.id)

        workout = self.make_workout(student)
        exercise = self.make_exercise(self.make_day(workout, DayOfWeek.MONDAY), "Squat", 0)
        crud_status.upsert_status(self.db, exercise.id, student.id, date(2024, 5, 13), StatusType.COMPLETED)
        other_workout = self.make_workout(other)

        self.assertIsNone(user_service.delete_account(self.db, student.id))

        self.assertIsNone(self.db.get(User, student.id))
        self.assertEqual(self.db.query(Workout).all(), [other_workout])
        self.assertEqual(self.db.query(WorkoutDay).count(), 0)
        self.assertEqual(self.db.query(Exercise).count(), 0)
        self.assertEqual(self.db.query(ExerciseStatus).count(), 0)
        # The coach's invitation to another student survives
        self.assertEqual(self.db.query(StudentInstructor).count(), 1)

    def test_delete_instructor_drops_connections(self):
        coach = self.make_instructor("Coach Carter")
        student = self.make_student("Ana Silva")
        self.connect(coach, student)

        self.assertIsNone(user_service.delete_account(self.db, coach.id))

        self.assertEqual(self.db.query(StudentInstructor).count(), 0)
        self.assertIsNotNone(self.db.get(User, student.id))

    def test_delete_unknown_account(self):
        self.assertEqual(user_service.delete_account(self.db, 999).kind, ErrorKind.NOT_FOUND)
