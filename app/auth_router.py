from fastapi import APIRouter
from pydantic import BaseModel

from app.auth import create_access_token
from app.config import settings
from app.exceptions import UnauthorizedError
from app.stories.models import UserRole

router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest) -> TokenResponse:
    if data.username != settings.auth_username or data.password != settings.auth_password:
        raise UnauthorizedError("Invalid credentials")

    return TokenResponse(access_token=create_access_token(data.username, UserRole.admin))
