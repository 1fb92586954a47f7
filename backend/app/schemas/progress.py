from pydantic import BaseModel
from datetime import date as DateType
from typing import List, Optional

from app.models.enums import StatusType
from app.schemas.workout import ExerciseDetail


class MarkExerciseRequest(BaseModel):
    exercise_id: int
    status: StatusType
    date: Optional[DateType] = None  # Defaults to today


class ExerciseStatusResponse(BaseModel):
    id: int
    exercise_id: int
    student_id: int
    date: DateType
    status: StatusType

    class Config:
        from_attributes = True


class DailyStats(BaseModel):
    date: DateType
    completed_exercises: int
    skipped_exercises: int
    total_exercises: int
    completion_rate: float


class WeeklyStats(BaseModel):
    week_start_date: DateType
    week_end_date: DateType
    daily_stats: List[DailyStats]
    total_completed_exercises: int
    total_skipped_exercises: int
    total_exercises: int
    weekly_completion_rate: float


class TodayExercises(BaseModel):
    date: DateType
    day_of_week: int
    exercises: List[ExerciseDetail]
