from fastapi import APIRouter, Depends
from typing import Optional
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from pydantic import BaseModel, EmailStr, Field, field_validator

from blogsphere.core.config import settings
from blogsphere.core.errors import UnauthorizedError
from blogsphere.core.responses import send_response
from blogsphere.core.security import decode_access_token
from blogsphere.db.session import get_session
from blogsphere.models.user import User
from blogsphere.services.auth import AuthService
from blogsphere.services.user import PASSWORD_MIN_LENGTH

router = APIRouter()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/login", auto_error=False)


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value, info):
        if value != info.data.get("password"):
            raise ValueError("The password field confirmation does not match.")
        return value


class UserLogin(BaseModel):
    email: str
    password: str


def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    return AuthService(session)


@router.post("/register")
def register(user_in: UserCreate, service: AuthService = Depends(get_auth_service)):
    user = service.register_user(user_in.name, user_in.email, user_in.password)
    return send_response(
        {"token": service.issue_token(user), "name": user.name},
        "User register successfully.",
    )


@router.post("/login")
def login(credentials: UserLogin, service: AuthService = Depends(get_auth_service)):
    user = service.authenticate_user(credentials.email, credentials.password)
    if not user:
        raise UnauthorizedError("Unauthorised.", {"error": ["Unauthorised"]})
    return send_response(
        {"token": service.issue_token(user), "name": user.name},
        "User login successfully.",
    )


def _user_from_token(token: Optional[str], service: AuthService) -> Optional[User]:
    if not token:
        return None
    subject = decode_access_token(token)
    if subject is None or not subject.isdigit():
        return None
    return service.get_active_user(int(subject))


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
) -> User:
    user = _user_from_token(token, service)
    if user is None:
        raise UnauthorizedError("Unauthenticated.")
    return user


async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    return _user_from_token(token, service)
