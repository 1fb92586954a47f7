from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.student_instructor import StudentInstructor
from app.models.exercise_status import ExerciseStatus
from app.models.workout import Workout
from app.models.enums import InvitationStatus


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def email_exists(db: Session, email: str) -> bool:
    return get_user_by_email(db, email) is not None


def search_users(db: Session, query: str, skip: int = 0, limit: int = 10) -> List[User]:
    pattern = f"%{query}%"
    return (
        db.query(User)
        .filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        .order_by(User.name)
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_user(db: Session, **fields) -> User:
    db_user = User(**fields)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user: User, update_data: dict) -> User:
    for field, value in update_data.items():
        setattr(db_user, field, value)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_students_by_instructor(db: Session, instructor_id: int) -> List[User]:
    return (
        db.query(User)
        .join(StudentInstructor, StudentInstructor.student_id == User.id)
        .filter(
            StudentInstructor.instructor_id == instructor_id,
            StudentInstructor.status == InvitationStatus.ACCEPTED,
        )
        .order_by(User.name)
        .all()
    )


def get_instructors_by_student(db: Session, student_id: int) -> List[User]:
    return (
        db.query(User)
        .join(StudentInstructor, StudentInstructor.instructor_id == User.id)
        .filter(
            StudentInstructor.student_id == student_id,
            StudentInstructor.status == InvitationStatus.ACCEPTED,
        )
        .order_by(StudentInstructor.connected_at.desc())
        .all()
    )


def delete_user(db: Session, user_id: int) -> bool:
    """
    Delete a user and everything that references it.
    Children go first: the foreign keys pointing at users are RESTRICT.
    """
    db_user = get_user(db, user_id)
    if not db_user:
        return False

    # 1. Relationship records, as student or as instructor
    db.query(StudentInstructor).filter(
        or_(StudentInstructor.student_id == user_id, StudentInstructor.instructor_id == user_id)
    ).delete(synchronize_session=False)

    # 2. Exercise statuses recorded by the user
    db.query(ExerciseStatus).filter(ExerciseStatus.student_id == user_id).delete(synchronize_session=False)

    # 3. Workouts owned by the user (days, exercises and their statuses cascade through the ORM)
    for workout in db.query(Workout).filter(Workout.student_id == user_id).all():
        db.delete(workout)
    db.flush()

    # 4. The user itself
    db.delete(db_user)
    db.commit()
    return True
