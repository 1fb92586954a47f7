import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.crud import exercise_status as crud_status
from app.crud import student_instructor as crud_connection
from app.crud import user as crud_user
from app.crud import workout as crud_workout
from app.models.enums import StatusType, UserType
from app.models.exercise_status import ExerciseStatus
from app.models.user import User
from app.models.workout import Workout
from app.schemas.statistics import (
    CompletionStats,
    InstructorStatistics,
    StudentStats,
    StudentSummary,
    Trend,
    Trends,
    WorkoutStats,
)
from app.utils.utils import utcnow

logger = logging.getLogger(__name__)

PERIODS = ("today", "week", "month")


def completion_rate(completed: int, total: int) -> float:
    """Percentage rounded to 2 decimals; 0 when there is nothing to measure."""
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 2)


def trend(current: float, previous: float) -> Trend:
    return Trend(value=round(current - previous, 2), is_positive=current >= previous)


@dataclass(frozen=True)
class ReportingWindows:
    """Calendar windows around a reporting anchor. Weeks start on Monday."""
    today: date
    start_of_week: date
    start_of_previous_week: date
    start_of_month: date
    start_of_previous_month: date

    @classmethod
    def from_anchor(cls, now: datetime) -> "ReportingWindows":
        today = now.date()
        start_of_week = today - timedelta(days=today.weekday())
        start_of_month = today.replace(day=1)
        start_of_previous_month = (start_of_month - timedelta(days=1)).replace(day=1)
        return cls(
            today=today,
            start_of_week=start_of_week,
            start_of_previous_week=start_of_week - timedelta(days=7),
            start_of_month=start_of_month,
            start_of_previous_month=start_of_previous_month,
        )

    @property
    def tomorrow(self) -> date:
        return self.today + timedelta(days=1)


def _at_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


class StatsService:
    """
    Engagement numbers for instructors: roster growth, workouts handed out
    and how consistently students complete their exercises.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Per-student summaries ---

    def get_student_summary(self, student: User, now: Optional[datetime] = None) -> StudentSummary:
        """
        Active workout plus today's progress. Today's total counts the exercises
        on the active workout's day for the current weekday, 0 if there is none.
        """
        today = (now or utcnow()).date()
        active_workout = crud_workout.get_active_workout_for_student(self.db, student.id)
        completed_today = crud_status.count_statuses_by_type(self.db, student.id, StatusType.COMPLETED, today)

        total_today = 0
        if active_workout is not None:
            todays_day = next((d for d in active_workout.days if d.day_of_week == today.weekday()), None)
            if todays_day is not None:
                total_today = len(todays_day.exercises)

        return StudentSummary(
            id=student.id,
            name=student.name,
            email=student.email,
            age=student.age,
            active_workout_id=active_workout.id if active_workout else 0,
            active_workout_name=active_workout.name if active_workout else "No active workout",
            completed_exercises_today=completed_today,
            total_exercises_today=total_today,
        )

    def get_students(self, instructor_id: int, now: Optional[datetime] = None) -> List[StudentSummary]:
        instructor = crud_user.get_user(self.db, instructor_id)
        if instructor is None or instructor.user_type != UserType.INSTRUCTOR:
            logger.warning(f"Instructor {instructor_id} not found")
            return []
        students = crud_user.get_students_by_instructor(self.db, instructor_id)
        return [self.get_student_summary(s, now) for s in students]

    def get_student_details(
        self, instructor_id: int, student_id: int, now: Optional[datetime] = None
    ) -> Optional[StudentSummary]:
        if not crud_connection.accepted_connection_exists(self.db, student_id, instructor_id):
            logger.warning(f"Connection between instructor {instructor_id} and student {student_id} not found")
            return None
        student = crud_user.get_user(self.db, student_id)
        if student is None:
            logger.warning(f"Student {student_id} not found")
            return None
        return self.get_student_summary(student, now)

    # --- Instructor dashboard ---

    def _count(self, stmt) -> int:
        return self.db.execute(stmt).scalar() or 0

    def _new_students(self, connections, start: date, end: date) -> int:
        """Distinct students whose connection started in [start, end)."""
        return len({
            c.student_id for c in connections
            if c.connected_at is not None and start <= c.connected_at.date() < end
        })

    def _workouts_created(self, student_ids: List[int], start: Optional[date] = None, end: Optional[date] = None) -> int:
        stmt = select(func.count(Workout.id)).where(Workout.student_id.in_(student_ids))
        if start is not None:
            stmt = stmt.where(Workout.created_at >= _at_midnight(start))
        if end is not None:
            stmt = stmt.where(Workout.created_at < _at_midnight(end))
        return self._count(stmt)

    def _completion_rate(self, student_ids: List[int], start: Optional[date] = None, end: Optional[date] = None) -> float:
        """Completed share of all statuses recorded with date in [start, end)."""
        filters = [ExerciseStatus.student_id.in_(student_ids)]
        if start is not None:
            filters.append(ExerciseStatus.date >= start)
        if end is not None:
            filters.append(ExerciseStatus.date < end)

        total = self._count(select(func.count(ExerciseStatus.id)).where(*filters))
        completed = self._count(
            select(func.count(ExerciseStatus.id)).where(*filters, ExerciseStatus.status == StatusType.COMPLETED)
        )
        return completion_rate(completed, total)

    def get_instructor_statistics(
        self, instructor_id: int, period: str = "month", now: Optional[datetime] = None
    ) -> Optional[InstructorStatistics]:
        instructor = crud_user.get_user(self.db, instructor_id)
        if instructor is None or instructor.user_type != UserType.INSTRUCTOR:
            logger.warning(f"Statistics requested for unknown instructor {instructor_id}")
            return None

        now = now or utcnow()
        period = period.lower() if period and period.lower() in PERIODS else "month"
        w = ReportingWindows.from_anchor(now)

        connections = crud_connection.get_accepted_connections_for_instructor(self.db, instructor_id)
        student_ids = sorted({c.student_id for c in connections})

        # 1. Students
        active_students = self._count(
            select(func.count(func.distinct(Workout.student_id))).where(
                Workout.student_id.in_(student_ids),
                Workout.is_active == True,  # noqa: E712
            )
        )
        students = StudentStats(
            total=len(student_ids),
            new_this_week=self._new_students(connections, w.start_of_week, w.tomorrow),
            new_this_month=self._new_students(connections, w.start_of_month, w.tomorrow),
            new_previous_month=self._new_students(connections, w.start_of_previous_month, w.start_of_month),
            active_students=active_students,
        )

        # 2. Workouts
        workouts = WorkoutStats(
            total=self._workouts_created(student_ids),
            this_week=self._workouts_created(student_ids, w.start_of_week, w.tomorrow),
            this_month=self._workouts_created(student_ids, w.start_of_month, w.tomorrow),
            previous_month=self._workouts_created(student_ids, w.start_of_previous_month, w.start_of_month),
        )

        # 3. Completion rates
        completion = CompletionStats(
            today=self._completion_rate(student_ids, w.today, w.tomorrow),
            this_week=self._completion_rate(student_ids, w.start_of_week, w.tomorrow),
            previous_week=self._completion_rate(student_ids, w.start_of_previous_week, w.start_of_week),
            this_month=self._completion_rate(student_ids, w.start_of_month, w.tomorrow),
            previous_month=self._completion_rate(student_ids, w.start_of_previous_month, w.start_of_month),
            overall=self._completion_rate(student_ids),
        )
        headline = {"today": completion.today, "week": completion.this_week, "month": completion.this_month}[period]

        # 4. Month-over-month trends
        trends = Trends(
            students=trend(students.new_this_month, students.new_previous_month),
            completion_rate=trend(completion.this_month, completion.previous_month),
            workouts=trend(workouts.this_month, workouts.previous_month),
        )

        summaries = [
            self.get_student_summary(student, now)
            for student in crud_user.get_students_by_instructor(self.db, instructor_id)
        ]

        return InstructorStatistics(
            period=period,
            completion_rate=headline,
            students=students,
            workouts=workouts,
            completion=completion,
            trends=trends,
            student_summaries=summaries,
        )
