from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.exercise import Exercise
from app.models.workout import Workout, WorkoutDay


def get_exercise(db: Session, exercise_id: int) -> Optional[Exercise]:
    return db.query(Exercise).filter(Exercise.id == exercise_id).first()


def get_exercises_by_workout_day(db: Session, workout_day_id: int) -> List[Exercise]:
    return (
        db.query(Exercise)
        .filter(Exercise.workout_day_id == workout_day_id)
        .order_by(Exercise.order)
        .all()
    )


def get_next_order(db: Session, workout_day_id: int) -> int:
    current_max = (
        db.query(func.max(Exercise.order))
        .filter(Exercise.workout_day_id == workout_day_id)
        .scalar()
    )
    return 0 if current_max is None else current_max + 1


def create_exercise(db: Session, workout_day_id: int, order: int, **fields) -> Exercise:
    exercise = Exercise(workout_day_id=workout_day_id, order=order, **fields)
    db.add(exercise)
    db.commit()
    db.refresh(exercise)
    return exercise


def update_exercise(db: Session, exercise: Exercise, update_data: dict) -> Exercise:
    for field, value in update_data.items():
        setattr(exercise, field, value)
    db.commit()
    db.refresh(exercise)
    return exercise


def delete_exercise(db: Session, exercise: Exercise) -> None:
    db.delete(exercise)
    db.commit()


def apply_order(db: Session, exercises: List[Exercise]) -> None:
    """Persist order = position in the given list."""
    for index, exercise in enumerate(exercises):
        exercise.order = index
    db.commit()


def get_exercises_for_student_on_day(db: Session, student_id: int, day_of_week: int) -> List[Exercise]:
    """Exercises scheduled on the given weekday across the student's active workouts."""
    return (
        db.query(Exercise)
        .join(WorkoutDay, Exercise.workout_day_id == WorkoutDay.id)
        .join(Workout, WorkoutDay.workout_id == Workout.id)
        .filter(
            Workout.student_id == student_id,
            Workout.is_active == True,  # noqa: E712
            WorkoutDay.day_of_week == int(day_of_week),
        )
        .order_by(Exercise.order)
        .all()
    )


def exercise_belongs_to_active_workout(db: Session, exercise_id: int, student_id: int) -> bool:
    return (
        db.query(Exercise.id)
        .join(WorkoutDay, Exercise.workout_day_id == WorkoutDay.id)
        .join(Workout, WorkoutDay.workout_id == Workout.id)
        .filter(
            Exercise.id == exercise_id,
            Workout.student_id == student_id,
            Workout.is_active == True,  # noqa: E712
        )
        .first()
        is not None
    )
