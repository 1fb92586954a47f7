from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.workout import Workout, WorkoutDay

"""
Workout CRUD
------------
Pure Database Access Object for workouts and their days.
Aggregate rules (duplicate days, ordering) live in app.services.workout_service.
"""

_with_days_and_exercises = selectinload(Workout.days).selectinload(WorkoutDay.exercises)


def get_workout(db: Session, workout_id: int) -> Optional[Workout]:
    return db.query(Workout).filter(Workout.id == workout_id).first()


def get_workout_with_days_and_exercises(db: Session, workout_id: int) -> Optional[Workout]:
    return (
        db.query(Workout)
        .options(_with_days_and_exercises)
        .filter(Workout.id == workout_id)
        .first()
    )


def get_workouts_by_student(db: Session, student_id: int) -> List[Workout]:
    return (
        db.query(Workout)
        .options(_with_days_and_exercises)
        .filter(Workout.student_id == student_id)
        .order_by(Workout.created_at.desc(), Workout.id.desc())
        .all()
    )


def get_active_workout_for_student(db: Session, student_id: int) -> Optional[Workout]:
    """Most recently created active workout of the student."""
    return (
        db.query(Workout)
        .options(_with_days_and_exercises)
        .filter(Workout.student_id == student_id, Workout.is_active == True)  # noqa: E712
        .order_by(Workout.created_at.desc(), Workout.id.desc())
        .first()
    )


def create_workout(db: Session, student_id: int, name: str, created_at: datetime) -> Workout:
    workout = Workout(student_id=student_id, name=name, created_at=created_at, is_active=True)
    db.add(workout)
    db.commit()
    db.refresh(workout)
    return workout


def update_workout(db: Session, workout: Workout, update_data: dict) -> Workout:
    for field, value in update_data.items():
        setattr(workout, field, value)
    db.commit()
    db.refresh(workout)
    return workout


def delete_workout(db: Session, workout: Workout) -> None:
    db.delete(workout)
    db.commit()


def get_workout_day(db: Session, workout_day_id: int) -> Optional[WorkoutDay]:
    return db.query(WorkoutDay).filter(WorkoutDay.id == workout_day_id).first()



def get_workout_day_by_day_of_week(db: Session, workout_id: int, day_of_week: int) -> Optional[WorkoutDay]:
    return (
        db.query(WorkoutDay)
        .filter(WorkoutDay.workout_id == workout_id, WorkoutDay.day_of_week == int(day_of_week))
        .first()
    )


def create_workout_day(db: Session, workout_id: int, day_of_week: int) -> WorkoutDay:
    day = WorkoutDay(workout_id=workout_id, day_of_week=int(day_of_week))
    db.add(day)
    db.commit()
    db.refresh(day)
    return day


def delete_workout_day(db: Session, day: WorkoutDay) -> None:
    db.delete(day)
    db.commit()
