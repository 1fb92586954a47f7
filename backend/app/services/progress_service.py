import logging
from datetime import date, timedelta
from typing import Optional, Union

from sqlalchemy.orm import Session

from app.crud import exercise as crud_exercise
from app.crud import exercise_status as crud_status
from app.errors import ServiceError
from app.models.enums import StatusType
from app.models.exercise_status import ExerciseStatus
from app.schemas.progress import DailyStats, TodayExercises, WeeklyStats
from app.schemas.workout import ExerciseDetail
from app.services.stats_service import completion_rate
from app.utils.utils import utcnow

logger = logging.getLogger(__name__)


def mark_exercise(
    db: Session,
    student_id: int,
    exercise_id: int,
    status: StatusType,
    on_date: Optional[date] = None,
) -> Union[ExerciseStatus, ServiceError]:
    """Record the student's outcome for an exercise of their active workout. Re-marking overwrites."""
    if not crud_exercise.exercise_belongs_to_active_workout(db, exercise_id, student_id):
        logger.warning(f"Student {student_id} tried to mark exercise {exercise_id} outside their active workout")
        return ServiceError.not_found("Exercise not found in your active workout.")

    on_date = on_date or utcnow().date()
    record = crud_status.upsert_status(db, exercise_id, student_id, on_date, status)
    logger.info(f"Student {student_id} marked exercise {exercise_id} as {status.value} on {on_date}")
    return record


def get_daily_stats(db: Session, student_id: int, on_date: date) -> DailyStats:
    """
    Progress over the exercises scheduled for that weekday on the active workout.
    Statuses left on exercises that are no longer scheduled do not count.
    """
    scheduled = crud_exercise.get_exercises_for_student_on_day(db, student_id, on_date.weekday())
    scheduled_ids = {e.id for e in scheduled}
    statuses = [
        s for s in crud_status.get_statuses_by_student_and_date(db, student_id, on_date)
        if s.exercise_id in scheduled_ids
    ]

    completed = sum(1 for s in statuses if s.status == StatusType.COMPLETED)
    skipped = sum(1 for s in statuses if s.status == StatusType.SKIPPED)
    return DailyStats(
        date=on_date,
        completed_exercises=completed,
        skipped_exercises=skipped,
        total_exercises=len(scheduled),
        completion_rate=completion_rate(completed, len(scheduled)),
    )


def get_weekly_stats(db: Session, student_id: int, week_start: date) -> WeeklyStats:
    daily = [get_daily_stats(db, student_id, week_start + timedelta(days=i)) for i in range(7)]
    completed = sum(d.completed_exercises for d in daily)
    total = sum(d.total_exercises for d in daily)
    return WeeklyStats(
        week_start_date=week_start,
        week_end_date=week_start + timedelta(days=6),
        daily_stats=daily,
        total_completed_exercises=completed,
        total_skipped_exercises=sum(d.skipped_exercises for d in daily),
        total_exercises=total,
        weekly_completion_rate=completion_rate(completed, total),
    )


def get_current_week_stats(db: Session, student_id: int, today: Optional[date] = None) -> WeeklyStats:
    today = today or utcnow().date()
    return get_weekly_stats(db, student_id, today - timedelta(days=today.weekday()))


def get_today_exercises(db: Session, student_id: int, today: Optional[date] = None) -> TodayExercises:
    today = today or utcnow().date()
    statuses = {s.exercise_id: s.status for s in crud_status.get_statuses_by_student_and_date(db, student_id, today)}

    exercises = []
    for exercise in crud_exercise.get_exercises_for_student_on_day(db, student_id, today.weekday()):
        detail = ExerciseDetail.model_validate(exercise)
        detail.status = statuses.get(exercise.id)
        exercises.append(detail)

    return TodayExercises(date=today, day_of_week=today.weekday(), exercises=exercises)
