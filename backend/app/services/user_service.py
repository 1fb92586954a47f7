import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import user as crud_user
from app.errors import ServiceError
from app.models.enums import UserType
from app.models.user import User
from app.schemas.user import StudentProfileUpdate, UserCreate, UserResponse, UserUpdate
from app.services import workout_service
from app.utils.utils import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.user_type.value)


def register_user(db: Session, user_in: UserCreate) -> Union[Tuple[User, str], ServiceError]:
    """Create the account and log it in. Returns (user, access_token)."""
    if crud_user.email_exists(db, user_in.email):
        logger.warning(f"Registration refused, email already in use: {user_in.email}")
        return ServiceError.conflict("Email already registered.")

    fields = user_in.model_dump(exclude={"password"})
    fields["name"] = fields["name"].strip()
    try:
        user = crud_user.create_user(db, password_hash=hash_password(user_in.password), **fields)
    except IntegrityError:
        db.rollback()
        return ServiceError.conflict("Email already registered.")

    logger.info(f"Registered {user.user_type.value} {user.id}")
    return user, issue_token(user)


def authenticate(db: Session, email: str, password: str) -> Optional[Tuple[User, str]]:
    """(user, access_token) for valid credentials, None otherwise."""
    user = crud_user.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        return None
    return user, issue_token(user)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return crud_user.get_user(db, user_id)


def update_user(db: Session, user: User, user_in: UserUpdate) -> Union[User, ServiceError]:
    update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
    current_password = update_data.pop("current_password", None)
    new_password = update_data.pop("new_password", None)

    if new_password:
        if not current_password or not verify_password(current_password, user.password_hash):
            logger.warning(f"User {user.id} gave a wrong current password")
            return ServiceError.invalid_argument("Current password is incorrect.")
        update_data["password_hash"] = hash_password(new_password)

    if update_data.get("name"):
        update_data["name"] = update_data["name"].strip()
    return crud_user.update_user(db, user, update_data)


def search_users(db: Session, query: str, page: int = 1, page_size: int = 10) -> List[User]:
    page = max(page, 1)
    page_size = min(max(page_size, 1), 100)
    return crud_user.search_users(db, query.strip(), skip=(page - 1) * page_size, limit=page_size)


def get_student_profile(db: Session, student_id: int) -> Optional[UserResponse]:
    student = crud_user.get_user(db, student_id)
    if student is None or student.user_type != UserType.STUDENT:
        return None
    profile = UserResponse.model_validate(student)
    profile.total_exercises_count = workout_service.count_exercises_for_student(db, student_id)
    return profile


def update_student_profile(
    db: Session, student_id: int, profile_in: StudentProfileUpdate
) -> Union[UserResponse, ServiceError]:
    student = crud_user.get_user(db, student_id)
    if student is None or student.user_type != UserType.STUDENT:
        return ServiceError.not_found("Student not found.")

    update_data = profile_in.model_dump()
    update_data["name"] = update_data["name"].strip()
    crud_user.update_user(db, student, update_data)
    logger.info(f"Student {student_id} updated their profile")
    return get_student_profile(db, student_id)


def delete_account(db: Session, user_id: int) -> Optional[ServiceError]:
    if not crud_user.delete_user(db, user_id):
        return ServiceError.not_found("User not found.")
    logger.info(f"Deleted account {user_id}")
    return None
