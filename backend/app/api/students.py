from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.auth import raise_for_error, require_role
from app.database import get_db
from app.errors import is_error
from app.models.enums import UserType
from app.models.user import User
from app.schemas.invitation import MessageResponse, PendingInvitation, PendingInvitationCount
from app.schemas.progress import DailyStats, ExerciseStatusResponse, MarkExerciseRequest, TodayExercises, WeeklyStats
from app.schemas.user import InstructorSummary, StudentProfileUpdate, UserResponse
from app.schemas.workout import WorkoutDetail, WorkoutSummary
from app.services import invitation_service, progress_service, user_service, workout_service
from app.utils.utils import utcnow

router = APIRouter(prefix="/students", tags=["students"])

require_student = require_role(UserType.STUDENT)


# --- Profile ---

@router.get("/profile", response_model=UserResponse)
def read_profile(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return user_service.get_student_profile(db, current_user.id)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    profile: StudentProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    result = user_service.update_student_profile(db, current_user.id, profile)
    if is_error(result):
        raise_for_error(result)
    return result


@router.delete("/account", response_model=MessageResponse)
def delete_account(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    error = user_service.delete_account(db, current_user.id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Account deleted successfully")


# --- Instructors & invitations ---

@router.get("/instructors", response_model=List[InstructorSummary])
def list_instructors(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return invitation_service.list_instructors_for_student(db, current_user.id)


@router.get("/instructors/{instructor_id}", response_model=InstructorSummary)
def read_instructor(instructor_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    instructor = invitation_service.get_instructor_for_student(db, current_user.id, instructor_id)
    if instructor is None:
        raise HTTPException(status_code=404, detail="Instructor not found or not connected to this student")
    return instructor


@router.get("/current-trainer", response_model=Optional[InstructorSummary])
def read_current_trainer(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return invitation_service.get_current_instructor(db, current_user.id)


@router.get("/invitations", response_model=List[PendingInvitation])
def list_invitations(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return invitation_service.list_pending_for_student(db, current_user.id)


@router.get("/invitations/count", response_model=PendingInvitationCount)
def count_invitations(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return PendingInvitationCount(count=invitation_service.count_pending_for_student(db, current_user.id))


@router.post("/invitations/{invitation_id}/accept", response_model=MessageResponse)
def accept_invitation(invitation_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    if not invitation_service.accept_invitation(db, invitation_id, current_user.id):
        raise HTTPException(status_code=400, detail="Invitation not found or already answered")
    return MessageResponse(message="Invitation accepted")


@router.post("/invitations/{invitation_id}/reject", response_model=MessageResponse)
def reject_invitation(invitation_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    if not invitation_service.reject_invitation(db, invitation_id, current_user.id):
        raise HTTPException(status_code=400, detail="Invitation not found or already answered")
    return MessageResponse(message="Invitation rejected")


# --- Workouts & progress ---

@router.get("/workouts", response_model=List[WorkoutSummary])
def list_workouts(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return workout_service.list_workouts_for_student(db, current_user.id)


@router.get("/workouts/active", response_model=WorkoutDetail)
def read_active_workout(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    workout = workout_service.get_active_workout_for_student(db, current_user.id)
    if workout is None:
        raise HTTPException(status_code=404, detail="No active workout")
    return workout


@router.get("/exercises/today", response_model=TodayExercises)
def read_today_exercises(db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return progress_service.get_today_exercises(db, current_user.id)


@router.post("/progress", response_model=ExerciseStatusResponse)
def mark_exercise(request: MarkExerciseRequest, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    result = progress_service.mark_exercise(db, current_user.id, request.exercise_id, request.status, request.date)
    if is_error(result):
        raise_for_error(result)
    return result


@router.get("/progress/daily", response_model=DailyStats)
def read_daily_progress(
    on_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    return progress_service.get_daily_stats(db, current_user.id, on_date or utcnow().date())


@router.get("/progress/weekly", response_model=WeeklyStats)
def read_weekly_progress(
    week_start: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student)
):
    if week_start is None:
        return progress_service.get_current_week_stats(db, current_user.id)
    return progress_service.get_weekly_stats(db, current_user.id, week_start)
