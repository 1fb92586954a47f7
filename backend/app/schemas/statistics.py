from pydantic import BaseModel
from typing import List, Optional


class StudentSummary(BaseModel):
    id: int
    name: str
    email: str
    age: Optional[int] = None
    active_workout_id: int = 0  # 0 when the student has no active workout
    active_workout_name: str = "No active workout"
    completed_exercises_today: int = 0
    total_exercises_today: int = 0


class Trend(BaseModel):
    value: float
    is_positive: bool


class StudentStats(BaseModel):
    total: int
    new_this_week: int
    new_this_month: int
    new_previous_month: int
    active_students: int


class WorkoutStats(BaseModel):
    total: int
    this_week: int
    this_month: int
    previous_month: int


class CompletionStats(BaseModel):
    today: float
    this_week: float
    previous_week: float
    this_month: float
    previous_month: float
    overall: float


class Trends(BaseModel):
    students: Trend
    completion_rate: Trend
    workouts: Trend


class InstructorStatistics(BaseModel):
    period: str
    completion_rate: float  # Headline rate for the requested period
    students: StudentStats
    workouts: WorkoutStats
    completion: CompletionStats
    trends: Trends
    student_summaries: List[StudentSummary] = []
