from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models.enums import InvitationStatus
from app.schemas.user import EMAIL_REGX


class ConnectStudentRequest(BaseModel):
    """Either student_id or email identifies the student; student_id wins when both are given."""
    student_id: Optional[int] = None
    email: Optional[str] = Field(None, pattern=EMAIL_REGX)


class InvitationResponse(BaseModel):
    id: int
    student_id: int
    instructor_id: int
    status: InvitationStatus
    invited_at: datetime
    responded_at: Optional[datetime] = None
    connected_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Instructor-side audit row
class InstructorInvitation(InvitationResponse):
    student_name: str = ""
    student_email: str = ""


# Student-side inbox row
class PendingInvitation(BaseModel):
    invitation_id: int
    instructor_id: int
    instructor_name: str
    instructor_email: str
    instructor_description: str = ""
    instructor_student_count: int = 0
    invited_at: datetime


class PendingInvitationCount(BaseModel):
    count: int


class MessageResponse(BaseModel):
    message: str
