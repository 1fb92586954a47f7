import logging
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import student_instructor as crud_connection
from app.crud import user as crud_user
from app.errors import ServiceError
from app.models.enums import InvitationStatus, UserType
from app.models.student_instructor import StudentInstructor
from app.models.user import User
from app.schemas.invitation import InstructorInvitation, PendingInvitation
from app.schemas.user import InstructorSummary
from app.utils.utils import utcnow

logger = logging.getLogger(__name__)

"""
Invitation Service
------------------
Lifecycle of the instructor-student relationship:

    PENDING --accept--> ACCEPTED --disconnect--> (row deleted)
    PENDING --reject--> REJECTED

Instructors invite, only the addressed student answers. A rejected
invitation is history and never blocks a new invite.
"""


def _resolve_student(db: Session, student_id: Optional[int], email: Optional[str]) -> Optional[User]:
    if student_id is not None:
        return crud_user.get_user(db, student_id)
    return crud_user.get_user_by_email(db, email)


def invite(
    db: Session,
    instructor_id: int,
    student_id: Optional[int] = None,
    email: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Union[StudentInstructor, ServiceError]:
    """
    Open an invitation from the instructor to a student found by id or email.
    Inviting an already connected student is a no-op success and returns the
    existing connection.
    """
    if student_id is None and not (email and email.strip()):
        logger.warning("Invite without student_id or email")
        return ServiceError.invalid_argument("Provide either a student id or an email.")

    instructor = crud_user.get_user(db, instructor_id)
    if instructor is None or instructor.user_type != UserType.INSTRUCTOR:
        logger.warning(f"Instructor {instructor_id} not found")
        return ServiceError.not_found("Instructor not found.")

    student = _resolve_student(db, student_id, email)
    if student is None or student.user_type != UserType.STUDENT:
        logger.warning(f"Student not found or not a student. student_id={student_id} email={email}")
        return ServiceError.not_found("Student not found.")

    accepted = crud_connection.get_connection(db, student.id, instructor_id, InvitationStatus.ACCEPTED)
    if accepted is not None:
        logger.info(f"Instructor {instructor_id} and student {student.id} are already connected")
        return accepted

    if crud_connection.pending_invitation_exists(db, student.id, instructor_id):
        logger.warning(f"Instructor {instructor_id} already has a pending invitation for student {student.id}")
        return ServiceError.conflict("An invitation is already pending for this student.")

    try:
        invitation = crud_connection.create_invitation(db, student.id, instructor_id, now or utcnow())
    except IntegrityError:
        # Lost a race against an identical invite
        logger.warning(f"Concurrent invitation detected for instructor {instructor_id} and student {student.id}")
        return ServiceError.conflict("An invitation is already pending for this student.")

    logger.info(f"Instructor {instructor_id} invited student {student.id} (invitation {invitation.id})")
    return invitation


def accept_invitation(db: Session, invitation_id: int, student_id: int, now: Optional[datetime] = None) -> bool:
    logger.info(f"Student {student_id} attempting to accept invitation {invitation_id}")
    accepted = crud_connection.accept_invitation(db, invitation_id, student_id, now or utcnow())
    if accepted:
        logger.info(f"Student {student_id} accepted invitation {invitation_id}")
    else:
        logger.warning(f"Student {student_id} failed to accept invitation {invitation_id}")
    return accepted


def reject_invitation(db: Session, invitation_id: int, student_id: int, now: Optional[datetime] = None) -> bool:
    logger.info(f"Student {student_id} attempting to reject invitation {invitation_id}")
    rejected = crud_connection.reject_invitation(db, invitation_id, student_id, now or utcnow())
    if rejected:
        logger.info(f"Student {student_id} rejected invitation {invitation_id}")
    else:
        logger.warning(f"Student {student_id} failed to reject invitation {invitation_id}")
    return rejected


def disconnect(db: Session, instructor_id: int, student_id: int) -> Optional[ServiceError]:
    """Remove an accepted connection. Returns None on success."""
    if not crud_connection.remove_connection(db, student_id, instructor_id):
        logger.warning(f"No accepted connection between instructor {instructor_id} and student {student_id}")
        return ServiceError.not_found("Student not found or not connected to this instructor.")

    logger.info(f"Connection removed between instructor {instructor_id} and student {student_id}")
    return None


def instructor_summary(db: Session, instructor: User) -> InstructorSummary:
    return InstructorSummary(
        id=instructor.id,
        name=instructor.name,
        email=instructor.email,
        description=instructor.description or "",
        student_count=crud_connection.count_accepted_students(db, instructor.id),
    )


def list_pending_for_student(db: Session, student_id: int) -> List[PendingInvitation]:
    result = []
    for invitation in crud_connection.get_pending_invitations_for_student(db, student_id):
        instructor = crud_user.get_user(db, invitation.instructor_id)
        summary = instructor_summary(db, instructor) if instructor else None
        result.append(PendingInvitation(
            invitation_id=invitation.id,
            instructor_id=invitation.instructor_id,
            instructor_name=summary.name if summary else "Unknown",
            instructor_email=summary.email if summary else "",
            instructor_description=summary.description if summary else "",
            instructor_student_count=summary.student_count if summary else 0,
            invited_at=invitation.invited_at,
        ))
    return result


def count_pending_for_student(db: Session, student_id: int) -> int:
    return len(crud_connection.get_pending_invitations_for_student(db, student_id))


def list_for_instructor(db: Session, instructor_id: int) -> List[InstructorInvitation]:
    """Every invitation the instructor ever sent, any status, newest first."""
    result = []
    for invitation in crud_connection.get_invitations_for_instructor(db, instructor_id):
        student = crud_user.get_user(db, invitation.student_id)
        row = InstructorInvitation.model_validate(invitation)
        row.student_name = student.name if student else ""
        row.student_email = student.email if student else ""
        result.append(row)
    return result


def list_instructors_for_student(db: Session, student_id: int) -> List[InstructorSummary]:
    return [instructor_summary(db, i) for i in crud_user.get_instructors_by_student(db, student_id)]


def get_instructor_for_student(db: Session, student_id: int, instructor_id: int) -> Optional[InstructorSummary]:
    """Details of one instructor, visible only through an accepted connection."""
    if not crud_connection.accepted_connection_exists(db, student_id, instructor_id):
        logger.warning(f"No accepted connection between student {student_id} and instructor {instructor_id}")
        return None

    instructor = crud_user.get_user(db, instructor_id)
    if instructor is None:
        logger.warning(f"Instructor {instructor_id} not found")
        return None
    return instructor_summary(db, instructor)


def get_current_instructor(db: Session, student_id: int) -> Optional[InstructorSummary]:
    """The most recently connected instructor, or None."""
    instructors = crud_user.get_instructors_by_student(db, student_id)
    if not instructors:
        logger.info(f"No instructor found for student {student_id}")
        return None
    return instructor_summary(db, instructors[0])
