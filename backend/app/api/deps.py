from collections.abc import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.session import SessionLocal
from app.models.user import User, UserRole

# Missing credentials are reported by get_current_user as 401, not by FastAPI as 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthorized("Access token required")

    try:
        payload = decode_token(credentials.credentials)
    except ExpiredSignatureError as exc:
        raise _unauthorized("Token expired") from exc
    except JWTError as exc:
        raise _unauthorized("Invalid token") from exc

    user_id = payload.get("sub")
    user = db.get(User, user_id) if user_id else None
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Account deactivated")
    return user


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    allowed_roles = frozenset(roles)
    role_names = ", ".join(role.value for role in roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions: requires one of {role_names}",
            )
        return current_user

    return role_checker


require_lecturer_or_admin = require_roles(UserRole.lecturer, UserRole.admin)
