from datetime import date
from unittest.mock import patch

from factories import DatabaseTestCase

from app.crud import exercise_status as crud_status
from app.errors import ErrorKind, is_error
from app.models.enums import DayOfWeek, StatusType
from app.models.exercise_status import ExerciseStatus
from app.services import progress_service

WEDNESDAY = date(2024, 5, 15)
THURSDAY = date(2024, 5, 16)


class TestMarkExercise(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.student = self.make_student("Ana Silva")
        workout = self.make_workout(self.student)
        day = self.make_day(workout, DayOfWeek.WEDNESDAY)
        self.bench = self.make_exercise(day, "Bench", 0)

    def test_mark_creates_status(self):
        record = progress_service.mark_exercise(self.db, self.student.id, self.bench.id, StatusType.COMPLETED, WEDNESDAY)

        self.assertFalse(is_error(record))
        self.assertEqual(record.status, StatusType.COMPLETED)
        self.assertEqual(record.date, WEDNESDAY)

    def test_marking_again_overwrites(self):
        progress_service.mark_exercise(self.db, self.student.id, self.bench.id, StatusType.COMPLETED, WEDNESDAY)
        progress_service.mark_exercise(self.db, self.student.id, self.bench.id, StatusType.SKIPPED, WEDNESDAY)

        statuses = self.db.query(ExerciseStatus).all()
        self.assertEqual(len(statuses), 1)
        self.assertEqual(statuses[0].status, StatusType.SKIPPED)

    def test_concurrent_first_mark_overwrites_instead_of_failing(self):
        crud_status.upsert_status(self.db, self.bench.id, self.student.id, WEDNESDAY, StatusType.SKIPPED)
        real_get_status = crud_status.get_status
        lookups = []

        def stale_first_lookup(*args):
            lookups.append(args)
            return None if len(lookups) == 1 else real_get_status(*args)

        with patch.object(crud_status, "get_status", side_effect=stale_first_lookup):
            record = progress_service.mark_exercise(
                self.db, self.student.id, self.bench.id, StatusType.COMPLETED, WEDNESDAY
            )

        self.assertEqual(record.status, StatusType.COMPLETED)
        statuses = self.db.query(ExerciseStatus).all()
        self.assertEqual(len(statuses), 1)
        self.assertEqual(statuses[0].status, StatusType.COMPLETED)

    def test_cannot_mark_someone_elses_exercise(self):
        intruder = self.make_student("Bruno Costa")

        result = progress_service.mark_exercise(self.db, intruder.id, self.bench.id, StatusType.COMPLETED, WEDNESDAY)

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(self.db.query(ExerciseStatus).count(), 0)

    def test_cannot_mark_exercise_of_inactive_workout(self):
        old = self.make_workout(self.student, "Old", is_active=False)
        old_exercise = self.make_exercise(self.make_day(old, DayOfWeek.MONDAY), "Curl", 0)

        result = progress_service.mark_exercise(self.db, self.student.id, old_exercise.id, StatusType.COMPLETED, WEDNESDAY)

        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)


class TestProgressStats(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.student = self.make_student("Ana Silva")
        workout = self.make_workout(self.student)
        wednesday = self.make_day(workout, DayOfWeek.WEDNESDAY)
        self.bench = self.make_exercise(wednesday, "Bench", 0)
        self.row = self.make_exercise(wednesday, "Row", 1)
        self.press = self.make_exercise(wednesday, "Press", 2)
        friday = self.make_day(workout, DayOfWeek.FRIDAY)
        self.squat = self.make_exercise(friday, "Squat", 0)

    def _mark(self, exercise, status, on_date=WEDNESDAY):
        progress_service.mark_exercise(self.db, self.student.id, exercise.id, status, on_date)

    def test_daily_stats(self):
        self._mark(self.bench, StatusType.COMPLETED)
        self._mark(self.row, StatusType.SKIPPED)

        stats = progress_service.get_daily_stats(self.db, self.student.id, WEDNESDAY)

        self.assertEqual(stats.completed_exercises, 1)
        self.assertEqual(stats.skipped_exercises, 1)
        self.assertEqual(stats.total_exercises, 3)
        self.assertEqual(stats.completion_rate, 33.33)

    def test_rest_day_has_zero_rate(self):
        stats = progress_service.get_daily_stats(self.db, self.student.id, THURSDAY)

        self.assertEqual(stats.total_exercises, 0)
        self.assertEqual(stats.completion_rate, 0.0)

    def test_weekly_stats(self):
        self._mark(self.bench, StatusType.COMPLETED)
        self._mark(self.row, StatusType.COMPLETED)
        self._mark(self.squat, StatusType.COMPLETED, date(2024, 5, 17))

        week = progress_service.get_current_week_stats(self.db, self.student.id, today=THURSDAY)

        self.assertEqual(week.week_start_date, date(2024, 5, 13))
        self.assertEqual(week.week_end_date, date(2024, 5, 19))
        self.assertEqual(len(week.daily_stats), 7)
        self.assertEqual(week.total_exercises, 4)
        self.assertEqual(week.total_completed_exercises, 3)
        self.assertEqual(week.total_skipped_exercises, 0)
        self.assertEqual(week.weekly_completion_rate, 75.0)

    def test_today_exercises_carry_status(self):
        self._mark(self.row, StatusType.SKIPPED)

        today = progress_service.get_today_exercises(self.db, self.student.id, today=WEDNESDAY)

        self.assertEqual(today.day_of_week, DayOfWeek.WEDNESDAY)
        self.assertEqual([e.name for e in today.exercises], ["Bench", "Row", "Press"])
        self.assertEqual([e.status for e in today.exercises], [None, StatusType.SKIPPED, None])
