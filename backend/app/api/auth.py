from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.crud import user as crud_user
from app.database import get_db
from app.errors import ErrorKind, ServiceError
from app.models.enums import UserType
from app.models.user import User
from app.utils.utils import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
}


def raise_for_error(error: ServiceError):
    raise HTTPException(status_code=ERROR_STATUS[error.kind], detail=error.message)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session expired. Please re-login.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    # Browser clients send the cookie set at login instead of the header
    token = token or request.cookies.get("access_token")
    if not token:
        raise credentials_exception

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    # Check if user still exists in DB
    user = crud_user.get_user(db, user_id)
    if user is None:
        raise credentials_exception

    return user


def require_role(role: UserType):
    """Dependency that lets only users of the given role through."""
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.user_type != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {role.value.lower()}s can access this resource.",
            )
        return current_user
    return checker
