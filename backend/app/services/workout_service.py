import logging
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import exercise as crud_exercise
from app.crud import student_instructor as crud_connection
from app.crud import user as crud_user
from app.crud import workout as crud_workout
from app.errors import ServiceError
from app.models.enums import DayOfWeek, UserType
from app.models.exercise import Exercise
from app.models.user import User
from app.models.workout import Workout, WorkoutDay
from app.schemas.workout import ExerciseCreate, ExerciseUpdate, WorkoutSummary
from app.utils.utils import utcnow

logger = logging.getLogger(__name__)

"""
Workout Service
---------------
Rules of the workout aggregate (Workout -> WorkoutDay -> Exercise):
1. One WorkoutDay per weekday inside a workout.
2. Exercise order inside a day is always 0..N-1 without gaps or duplicates.
3. A student has at most one active workout; activating one deactivates the others.
"""


def _deactivate_other_workouts(db: Session, student_id: int, keep_workout_id: int) -> None:
    for workout in crud_workout.get_workouts_by_student(db, student_id):
        if workout.id != keep_workout_id and workout.is_active:
            workout.is_active = False
            logger.info(f"Deactivated workout {workout.id} of student {student_id}")
    db.commit()


def create_workout(
    db: Session, student_id: int, name: str, now: Optional[datetime] = None
) -> Union[Workout, ServiceError]:
    student = crud_user.get_user(db, student_id)
    if student is None or student.user_type != UserType.STUDENT:
        logger.warning(f"Cannot create workout: user {student_id} is not a student")
        return ServiceError.invalid_argument("Student not found.")

    workout = crud_workout.create_workout(db, student_id, name.strip(), now or utcnow())
    _deactivate_other_workouts(db, student_id, workout.id)
    logger.info(f"Created workout {workout.id} '{workout.name}' for student {student_id}")
    return workout


def update_workout(
    db: Session, workout_id: int, name: Optional[str] = None, is_active: Optional[bool] = None
) -> Union[Workout, ServiceError]:
    workout = crud_workout.get_workout(db, workout_id)
    if workout is None:
        return ServiceError.not_found("Workout not found.")

    update_data = {}
    if name is not None and name.strip():
        update_data["name"] = name.strip()
    if is_active is not None:
        update_data["is_active"] = is_active

    workout = crud_workout.update_workout(db, workout, update_data)
    if is_active:
        _deactivate_other_workouts(db, workout.student_id, workout.id)
    return workout


def delete_workout(db: Session, workout_id: int) -> Optional[ServiceError]:
    workout = crud_workout.get_workout(db, workout_id)
    if workout is None:
        return ServiceError.not_found("Workout not found.")
    crud_workout.delete_workout(db, workout)
    logger.info(f"Deleted workout {workout_id}")
    return None


def add_day(db: Session, workout_id: int, day_of_week: DayOfWeek) -> Union[WorkoutDay, ServiceError]:
    workout = crud_workout.get_workout(db, workout_id)
    if workout is None:
        return ServiceError.not_found("Workout not found.")

    if crud_workout.get_workout_day_by_day_of_week(db, workout_id, day_of_week) is not None:
        logger.warning(f"Workout {workout_id} already has a day for {DayOfWeek(day_of_week).name}")
        return ServiceError.conflict("This day of the week already exists in the workout.")

    try:
        return crud_workout.create_workout_day(db, workout_id, day_of_week)
    except IntegrityError:
        db.rollback()
        return ServiceError.conflict("This day of the week already exists in the workout.")


def get_day(db: Session, workout_id: int, workout_day_id: int) -> Optional[WorkoutDay]:
    """The day, only if it belongs to the given workout."""
    day = crud_workout.get_workout_day(db, workout_day_id)
    if day is None or day.workout_id != workout_id:
        return None
    return day


def delete_day(db: Session, workout_id: int, workout_day_id: int) -> Optional[ServiceError]:
    day = get_day(db, workout_id, workout_day_id)
    if day is None:
        return ServiceError.not_found("Workout day not found.")
    crud_workout.delete_workout_day(db, day)
    return None


def add_exercise(db: Session, workout_day_id: int, exercise_in: ExerciseCreate) -> Union[Exercise, ServiceError]:
    day = crud_workout.get_workout_day(db, workout_day_id)
    if day is None:
        return ServiceError.not_found("Workout day not found.")

    order = crud_exercise.get_next_order(db, workout_day_id)
    return crud_exercise.create_exercise(db, workout_day_id, order, **exercise_in.model_dump())


def get_exercise_in_day(db: Session, workout_day_id: int, exercise_id: int) -> Optional[Exercise]:
    exercise = crud_exercise.get_exercise(db, exercise_id)
    if exercise is None or exercise.workout_day_id != workout_day_id:
        return None
    return exercise


def update_exercise(db: Session, exercise_id: int, partial: ExerciseUpdate) -> Union[Exercise, ServiceError]:
    exercise = crud_exercise.get_exercise(db, exercise_id)
    if exercise is None:
        return ServiceError.not_found("Exercise not found.")

    # Only fields present in the request body are applied
    update_data = partial.model_dump(exclude_unset=True)
    return crud_exercise.update_exercise(db, exercise, update_data)


def delete_exercise(db: Session, exercise_id: int) -> Optional[ServiceError]:
    exercise = crud_exercise.get_exercise(db, exercise_id)
    if exercise is None:
        return ServiceError.not_found("Exercise not found.")

    workout_day_id = exercise.workout_day_id
    crud_exercise.delete_exercise(db, exercise)
    # Close the gap left in the day's order
    crud_exercise.apply_order(db, crud_exercise.get_exercises_by_workout_day(db, workout_day_id))
    return None


def reorder_exercises(db: Session, workout_day_id: int, ordered_ids: List[int]) -> List[Exercise]:
    """
    Rewrite the order of a day's exercises following ordered_ids.
    Ids that are not exercises of this day are skipped without consuming a
    position; exercises missing from the list keep their relative order after
    the listed ones.
    """
    current = crud_exercise.get_exercises_by_workout_day(db, workout_day_id)
    by_id = {exercise.id: exercise for exercise in current}

    listed = []
    seen = set()
    for exercise_id in ordered_ids:
        if exercise_id in by_id and exercise_id not in seen:
            listed.append(by_id[exercise_id])
            seen.add(exercise_id)
    remaining = [exercise for exercise in current if exercise.id not in seen]

    final = listed + remaining
    crud_exercise.apply_order(db, final)
    return final


def get_active_workout_for_student(db: Session, student_id: int) -> Optional[Workout]:
    return crud_workout.get_active_workout_for_student(db, student_id)


def get_workout_detail(db: Session, workout_id: int) -> Optional[Workout]:
    return crud_workout.get_workout_with_days_and_exercises(db, workout_id)


def summarize(workout: Workout) -> WorkoutSummary:
    return WorkoutSummary(
        id=workout.id,
        student_id=workout.student_id,
        name=workout.name,
        created_at=workout.created_at,
        is_active=workout.is_active,
        days_count=len(workout.days),
        exercises_count=sum(len(day.exercises) for day in workout.days),
    )


def list_workouts_for_student(db: Session, student_id: int) -> List[WorkoutSummary]:
    return [summarize(w) for w in crud_workout.get_workouts_by_student(db, student_id)]


def count_exercises_for_student(db: Session, student_id: int) -> int:
    return sum(s.exercises_count for s in list_workouts_for_student(db, student_id))


def can_access_student(db: Session, user: User, student_id: int) -> bool:
    """Students see their own workouts; instructors see those of their connected students."""
    if user.user_type == UserType.STUDENT:
        return user.id == student_id
    return crud_connection.accepted_connection_exists(db, student_id, user.id)
