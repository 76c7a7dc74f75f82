from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.config import settings
from app.exceptions import ForbiddenError, UnauthorizedError
from app.stories.models import UserRole

_bearer = HTTPBearer()


class CurrentUser(BaseModel):
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


def create_access_token(subject: str, role: UserRole) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {"sub": subject, "role": str(role), "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def verify_token(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer),  # noqa: B008
) -> dict:
    try:
        return jwt.decode(credentials.credentials, settings.jwt_secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token") from None


async def get_current_user(claims: dict = Depends(verify_token)) -> CurrentUser:  # noqa: B008
    try:
        return CurrentUser(id=claims["sub"], role=claims.get("role", UserRole.student))
    except (KeyError, PydanticValidationError):
        raise UnauthorizedError("Token is missing a valid subject or role") from None


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:  # noqa: B008
    if not user.is_admin:
        raise ForbiddenError("Admin role required")
    return user
