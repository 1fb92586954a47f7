from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.models.enums import DayOfWeek, StatusType


class WorkoutCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    student_id: int


class WorkoutUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    is_active: Optional[bool] = None


class WorkoutDayCreate(BaseModel):
    day_of_week: DayOfWeek


class ExerciseCreate(BaseModel):
    exercise_db_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=150)
    body_part: Optional[str] = None
    equipment: Optional[str] = None
    gif_url: Optional[str] = None
    sets: Optional[str] = None
    repetitions: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    rest_seconds: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


# Partial update: fields left out of the request body stay unchanged
class ExerciseUpdate(BaseModel):
    sets: Optional[str] = None
    repetitions: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    rest_seconds: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class ReorderExercisesRequest(BaseModel):
    exercise_ids: List[int]


class ExerciseDetail(BaseModel):
    id: int
    workout_day_id: int
    exercise_db_id: Optional[str] = None
    name: str
    body_part: Optional[str] = None
    equipment: Optional[str] = None
    gif_url: Optional[str] = None
    sets: Optional[str] = None
    repetitions: Optional[str] = None
    weight: Optional[float] = None
    rest_seconds: Optional[int] = None
    order: int
    notes: Optional[str] = None
    status: Optional[StatusType] = None  # Today's status, filled for student views

    class Config:
        from_attributes = True


class WorkoutDayDetail(BaseModel):
    id: int
    workout_id: int
    day_of_week: DayOfWeek
    exercises: List[ExerciseDetail] = []

    class Config:
        from_attributes = True


class WorkoutDetail(BaseModel):
    id: int
    student_id: int
    name: str
    created_at: datetime
    is_active: bool
    days: List[WorkoutDayDetail] = []

    class Config:
        from_attributes = True


class WorkoutSummary(BaseModel):
    id: int
    student_id: int
    name: str
    created_at: datetime
    is_active: bool
    days_count: int
    exercises_count: int
