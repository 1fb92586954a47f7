from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.exercise_status import ExerciseStatus
from app.models.enums import StatusType


def get_status(db: Session, exercise_id: int, student_id: int, on_date: date) -> Optional[ExerciseStatus]:
    return (
        db.query(ExerciseStatus)
        .filter(
            ExerciseStatus.exercise_id == exercise_id,
            ExerciseStatus.student_id == student_id,
            ExerciseStatus.date == on_date,
        )
        .first()
    )


def upsert_status(db: Session, exercise_id: int, student_id: int, on_date: date, status: StatusType) -> ExerciseStatus:
    """One status per (exercise, student, date); marking again overwrites it."""
    record = get_status(db, exercise_id, student_id, on_date)
    if record is None:
        db.add(ExerciseStatus(exercise_id=exercise_id, student_id=student_id, date=on_date, status=status))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent mark inserted the row first
            db.rollback()
        record = get_status(db, exercise_id, student_id, on_date)
    if record.status != status:
        record.status = status
        db.commit()
    db.refresh(record)
    return record


def get_statuses_by_student_and_date(db: Session, student_id: int, on_date: date) -> List[ExerciseStatus]:
    return (
        db.query(ExerciseStatus)
        .filter(ExerciseStatus.student_id == student_id, ExerciseStatus.date == on_date)
        .all()
    )


def count_statuses_by_type(db: Session, student_id: int, status: StatusType, on_date: date) -> int:
    return (
        db.query(ExerciseStatus)
        .filter(
            ExerciseStatus.student_id == student_id,
            ExerciseStatus.status == status,
            ExerciseStatus.date == on_date,
        )
        .count()
    )
