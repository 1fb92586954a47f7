from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.api.auth import raise_for_error
from app.database import get_db
from app.errors import is_error
from app.schemas.invitation import MessageResponse
from app.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from app.services import user_service
from config import ACCESS_TOKEN_EXPIRE_MINUTES

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_token_cookie(response: Response, access_token: str):
    # Set cookie for browser-based access
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=False  # Set to True in production (HTTPS)
    )


def _login(response: Response, db: Session, email: str, password: str) -> AuthResponse:
    result = user_service.authenticate(db, email, password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user, access_token = result
    _set_token_cookie(response, access_token)
    return AuthResponse(user=UserResponse.model_validate(user), access_token=access_token)


# POST - Register (Create new user + Login)
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(response: Response, user_in: UserCreate, db: Session = Depends(get_db)):
    result = user_service.register_user(db, user_in)
    if is_error(result):
        raise_for_error(result)

    user, access_token = result
    _set_token_cookie(response, access_token)
    return AuthResponse(user=UserResponse.model_validate(user), access_token=access_token)


@router.post("/login", response_model=AuthResponse)
def login_json(response: Response, login_data: UserLogin, db: Session = Depends(get_db)):
    """
    JSON-based login for API clients.
    """
    return _login(response, db, login_data.email, login_data.password)


@router.post("/token", response_model=AuthResponse)
def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    OAuth2 compatible token login, used by the interactive docs.
    """
    return _login(response, db, form_data.username, form_data.password)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie("access_token")
    return MessageResponse(message="Logged out successfully")
