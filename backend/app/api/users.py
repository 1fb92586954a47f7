from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.api.auth import get_current_user, raise_for_error
from app.database import get_db
from app.errors import is_error
from app.models.user import User
from app.schemas.user import UserResponse, UserUpdate
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


def _profile(db: Session, user: User) -> UserResponse:
    if user.is_student:
        return user_service.get_student_profile(db, user.id)
    return UserResponse.model_validate(user)


# GET - Get current user
@router.get("/profile", response_model=UserResponse)
def read_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _profile(db, current_user)


# PUT - Update current user; changing the password requires the current one
@router.put("/profile", response_model=UserResponse)
def update_profile(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = user_service.update_user(db, current_user, user_update)
    if is_error(result):
        raise_for_error(result)
    return _profile(db, result)


@router.get("/search", response_model=List[UserResponse])
def search_users(
    query: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return user_service.search_users(db, query, page, page_size)


@router.get("/{user_id}", response_model=UserResponse)
def read_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
