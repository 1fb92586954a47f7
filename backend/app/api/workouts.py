from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.api.auth import get_current_user, raise_for_error, require_role
from app.database import get_db
from app.errors import is_error
from app.models.enums import UserType
from app.models.user import User
from app.models.workout import Workout, WorkoutDay
from app.schemas.invitation import MessageResponse
from app.schemas.workout import (
    ExerciseCreate,
    ExerciseDetail,
    ExerciseUpdate,
    ReorderExercisesRequest,
    WorkoutCreate,
    WorkoutDayCreate,
    WorkoutDayDetail,
    WorkoutDetail,
    WorkoutSummary,
    WorkoutUpdate,
)
from app.services import workout_service

router = APIRouter(prefix="/workouts", tags=["workouts"])

require_instructor = require_role(UserType.INSTRUCTOR)


def _forbidden():
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not have access to this student's workouts")


def _get_workout(db: Session, workout_id: int, user: User) -> Workout:
    workout = workout_service.get_workout_detail(db, workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")
    if not workout_service.can_access_student(db, user, workout.student_id):
        _forbidden()
    return workout


def _get_day(db: Session, workout_id: int, day_id: int, user: User) -> WorkoutDay:
    _get_workout(db, workout_id, user)
    day = workout_service.get_day(db, workout_id, day_id)
    if day is None:
        raise HTTPException(status_code=404, detail="Workout day not found")
    return day


# --- Workouts ---

@router.get("/student/{student_id}", response_model=List[WorkoutSummary])
def list_student_workouts(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not workout_service.can_access_student(db, current_user, student_id):
        _forbidden()
    return workout_service.list_workouts_for_student(db, student_id)


@router.get("/{workout_id}", response_model=WorkoutDetail)
def read_workout(workout_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_workout(db, workout_id, current_user)


@router.post("", response_model=WorkoutDetail, status_code=status.HTTP_201_CREATED)
def create_workout(workout_in: WorkoutCreate, db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    if not workout_service.can_access_student(db, current_user, workout_in.student_id):
        _forbidden()
    result = workout_service.create_workout(db, workout_in.student_id, workout_in.name)
    if is_error(result):
        raise_for_error(result)
    return workout_service.get_workout_detail(db, result.id)


@router.put("/{workout_id}", response_model=WorkoutDetail)
def update_workout(
    workout_id: int,
    workout_in: WorkoutUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    _get_workout(db, workout_id, current_user)
    result = workout_service.update_workout(db, workout_id, name=workout_in.name, is_active=workout_in.is_active)
    if is_error(result):
        raise_for_error(result)
    return workout_service.get_workout_detail(db, workout_id)


@router.delete("/{workout_id}", response_model=MessageResponse)
def delete_workout(workout_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    _get_workout(db, workout_id, current_user)
    error = workout_service.delete_workout(db, workout_id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Workout deleted successfully")


# --- Days ---

@router.post("/{workout_id}/days", response_model=WorkoutDayDetail, status_code=status.HTTP_201_CREATED)
def add_day(
    workout_id: int,
    day_in: WorkoutDayCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    _get_workout(db, workout_id, current_user)
    result = workout_service.add_day(db, workout_id, day_in.day_of_week)
    if is_error(result):
        raise_for_error(result)
    return result


@router.delete("/{workout_id}/days/{day_id}", response_model=MessageResponse)
def delete_day(workout_id: int, day_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    _get_workout(db, workout_id, current_user)
    error = workout_service.delete_day(db, workout_id, day_id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Workout day deleted successfully")


# --- Exercises ---

@router.post("/{workout_id}/days/{day_id}/exercises", response_model=ExerciseDetail, status_code=status.HTTP_201_CREATED)
def add_exercise(
    workout_id: int,
    day_id: int,
    exercise_in: ExerciseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    day = _get_day(db, workout_id, day_id, current_user)
    result = workout_service.add_exercise(db, day.id, exercise_in)
    if is_error(result):
        raise_for_error(result)
    return result


# Declared before /{exercise_id} so "reorder" is not read as an id
@router.put("/{workout_id}/days/{day_id}/exercises/reorder", response_model=List[ExerciseDetail])
def reorder_exercises(
    workout_id: int,
    day_id: int,
    request: ReorderExercisesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    day = _get_day(db, workout_id, day_id, current_user)
    return workout_service.reorder_exercises(db, day.id, request.exercise_ids)


@router.put("/{workout_id}/days/{day_id}/exercises/{exercise_id}", response_model=ExerciseDetail)
def update_exercise(
    workout_id: int,
    day_id: int,
    exercise_id: int,
    exercise_in: ExerciseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    day = _get_day(db, workout_id, day_id, current_user)
    if workout_service.get_exercise_in_day(db, day.id, exercise_id) is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    result = workout_service.update_exercise(db, exercise_id, exercise_in)
    if is_error(result):
        raise_for_error(result)
    return result


@router.delete("/{workout_id}/days/{day_id}/exercises/{exercise_id}", response_model=MessageResponse)
def delete_exercise(
    workout_id: int,
    day_id: int,
    exercise_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    day = _get_day(db, workout_id, day_id, current_user)
    if workout_service.get_exercise_in_day(db, day.id, exercise_id) is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    error = workout_service.delete_exercise(db, exercise_id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Exercise deleted successfully")
