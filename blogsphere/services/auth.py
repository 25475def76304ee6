from typing import Optional
from sqlmodel import Session, select, func

from blogsphere.core.errors import ValidationError
from blogsphere.core.logging import get_logger
from blogsphere.core.security import create_access_token, get_password_hash, verify_password
from blogsphere.models.user import User

logger = get_logger("auth")


class AuthService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Case-insensitive lookup
        return self.session.exec(select(User).where(func.lower(User.email) == email.lower())).first()

    def get_active_user(self, user_id: int) -> Optional[User]:
        user = self.session.get(User, user_id)
        if user is None or user.is_deleted:
            return None
        return user

    def register_user(self, name: str, email: str, password: str) -> User:
        if self.get_user_by_email(email):
            raise ValidationError.for_field("email", "The email has already been taken.")

        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email(email)
        if not user or user.is_deleted:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(data={"sub": str(user.id)})
