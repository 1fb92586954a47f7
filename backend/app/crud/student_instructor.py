from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.student_instructor import StudentInstructor
from app.models.enums import InvitationStatus

"""
Student-Instructor CRUD
-----------------------
Database access for the connection ledger. The invitation rules live in
app.services.invitation_service; accept/reject are kept here as single
check-and-set writes against one row.
"""


def get_invitation(db: Session, invitation_id: int) -> Optional[StudentInstructor]:
    return db.query(StudentInstructor).filter(StudentInstructor.id == invitation_id).first()


def get_connection(
    db: Session, student_id: int, instructor_id: int, status: Optional[InvitationStatus] = None
) -> Optional[StudentInstructor]:
    query = db.query(StudentInstructor).filter(
        StudentInstructor.student_id == student_id,
        StudentInstructor.instructor_id == instructor_id,
    )
    if status is not None:
        query = query.filter(StudentInstructor.status == status)
    return query.order_by(StudentInstructor.invited_at.desc()).first()


def accepted_connection_exists(db: Session, student_id: int, instructor_id: int) -> bool:
    return get_connection(db, student_id, instructor_id, InvitationStatus.ACCEPTED) is not None


def pending_invitation_exists(db: Session, student_id: int, instructor_id: int) -> bool:
    return get_connection(db, student_id, instructor_id, InvitationStatus.PENDING) is not None


def create_invitation(db: Session, student_id: int, instructor_id: int, invited_at: datetime) -> StudentInstructor:
    """Raises IntegrityError when a concurrent request already opened an invitation for the pair."""
    invitation = StudentInstructor(
        student_id=student_id,
        instructor_id=instructor_id,
        status=InvitationStatus.PENDING,
        invited_at=invited_at,
    )
    db.add(invitation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(invitation)
    return invitation


def _answer_invitation(
    db: Session, invitation_id: int, student_id: int, new_status: InvitationStatus, now: datetime
) -> bool:
    invitation = get_invitation(db, invitation_id)
    if (
        invitation is None
        or invitation.student_id != student_id
        or invitation.status != InvitationStatus.PENDING
    ):
        return False

    invitation.status = new_status
    invitation.responded_at = now
    if new_status == InvitationStatus.ACCEPTED:
        invitation.connected_at = now
    try:
        db.commit()
    except IntegrityError:
        # A concurrent accept already connected this pair
        db.rollback()
        return False
    return True


def accept_invitation(db: Session, invitation_id: int, student_id: int, now: datetime) -> bool:
    return _answer_invitation(db, invitation_id, student_id, InvitationStatus.ACCEPTED, now)


def reject_invitation(db: Session, invitation_id: int, student_id: int, now: datetime) -> bool:
    return _answer_invitation(db, invitation_id, student_id, InvitationStatus.REJECTED, now)


def remove_connection(db: Session, student_id: int, instructor_id: int) -> bool:
    connection = get_connection(db, student_id, instructor_id, InvitationStatus.ACCEPTED)
    if connection is None:
        return False
    db.delete(connection)
    db.commit()
    return True


def get_pending_invitations_for_student(db: Session, student_id: int) -> List[StudentInstructor]:
    return (
        db.query(StudentInstructor)
        .filter(
            StudentInstructor.student_id == student_id,
            StudentInstructor.status == InvitationStatus.PENDING,
        )
        .order_by(StudentInstructor.invited_at.desc(), StudentInstructor.id.desc())
        .all()
    )


def get_invitations_for_instructor(db: Session, instructor_id: int) -> List[StudentInstructor]:
    return (
        db.query(StudentInstructor)
        .filter(StudentInstructor.instructor_id == instructor_id)
        .order_by(StudentInstructor.invited_at.desc(), StudentInstructor.id.desc())
        .all()
    )


def get_accepted_connections_for_instructor(db: Session, instructor_id: int) -> List[StudentInstructor]:
    return (
        db.query(StudentInstructor)
        .filter(
            StudentInstructor.instructor_id == instructor_id,
            StudentInstructor.status == InvitationStatus.ACCEPTED,
        )
        .all()
    )


def count_accepted_students(db: Session, instructor_id: int) -> int:
    return (
        db.query(func.count(StudentInstructor.id))
        .filter(
            StudentInstructor.instructor_id == instructor_id,
            StudentInstructor.status == InvitationStatus.ACCEPTED,
        )
        .scalar()
        or 0
    )
