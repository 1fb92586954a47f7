from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.api.auth import raise_for_error, require_role
from app.database import get_db
from app.errors import is_error
from app.models.enums import UserType
from app.models.user import User
from app.schemas.invitation import ConnectStudentRequest, InstructorInvitation, InvitationResponse, MessageResponse
from app.schemas.statistics import InstructorStatistics, StudentSummary
from app.services import invitation_service, user_service
from app.services.stats_service import StatsService

router = APIRouter(prefix="/instructors", tags=["instructors"])

require_instructor = require_role(UserType.INSTRUCTOR)


@router.get("/students", response_model=List[StudentSummary])
def list_students(db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    return StatsService(db).get_students(current_user.id)


@router.get("/students/{student_id}", response_model=StudentSummary)
def read_student(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    summary = StatsService(db).get_student_details(current_user.id, student_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Student not found or not connected to this instructor")
    return summary


# POST - Invite a student by id or email
@router.post("/connect", response_model=InvitationResponse)
def connect_student(
    request: ConnectStudentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    result = invitation_service.invite(db, current_user.id, student_id=request.student_id, email=request.email)
    if is_error(result):
        raise_for_error(result)
    return result


@router.delete("/students/{student_id}", response_model=MessageResponse)
def disconnect_student(student_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    error = invitation_service.disconnect(db, current_user.id, student_id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Student disconnected successfully")


@router.get("/statistics", response_model=InstructorStatistics)
def read_statistics(
    period: str = Query("month"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_instructor)
):
    statistics = StatsService(db).get_instructor_statistics(current_user.id, period)
    if statistics is None:
        raise HTTPException(status_code=404, detail="Instructor not found")
    return statistics


@router.get("/invitations", response_model=List[InstructorInvitation])
def list_invitations(db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    return invitation_service.list_for_instructor(db, current_user.id)


@router.delete("/account", response_model=MessageResponse)
def delete_account(db: Session = Depends(get_db), current_user: User = Depends(require_instructor)):
    error = user_service.delete_account(db, current_user.id)
    if error:
        raise_for_error(error)
    return MessageResponse(message="Account deleted successfully")
