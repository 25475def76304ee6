from typing import List, Optional
from sqlmodel import Session, select, func

from blogsphere.core.errors import NotFoundError, ValidationError
from blogsphere.core.timeutils import utcnow
from blogsphere.core.logging import get_logger
from blogsphere.core.security import get_password_hash
from blogsphere.models.user import User
from blogsphere.services.media import PROFILE_PICTURES_DIR, UploadedMedia, validate_image
from blogsphere.services.storage import Storage, discard

logger = get_logger("user")

PASSWORD_MIN_LENGTH = 8


class UserService:
    def __init__(self, session: Session, storage: Storage):
        self.session = session
        self.storage = storage

    def get_all_users(self) -> List[User]:
        return self.session.exec(select(User).where(User.deleted_at.is_(None))).all()

    def get_user_by_id(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if not user or user.is_deleted:
            raise NotFoundError("User not found.")
        return user

    def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        bio: Optional[str] = None,
        profile_picture: Optional[UploadedMedia] = None,
    ) -> User:
        """Partial update: only the arguments that are not None are applied."""
        if email is not None and email.lower() != user.email.lower():
            taken = self.session.exec(
                select(User).where(func.lower(User.email) == email.lower(), User.id != user.id)
            ).first()
            if taken:
                raise ValidationError.for_field("email", "The email has already been taken.")
        if password is not None and len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError.for_field("password", f"The password field must be at least {PASSWORD_MIN_LENGTH} characters.")
        if profile_picture is not None:
            validate_image("profile_picture", profile_picture)

        if name is not None: user.name = name
        if email is not None: user.email = email
        if bio is not None: user.bio = bio
        if password is not None:
            user.password_hash = get_password_hash(password)

        if profile_picture is not None:
            discard(self.storage, user.profile_picture)
            user.profile_picture = self.storage.put(
                PROFILE_PICTURES_DIR,
                profile_picture.content,
                profile_picture.file_name,
                profile_picture.content_type,
            )

        user.updated_at = utcnow()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete_user(self, user: User) -> None:
        """Soft delete: the row stays, the account can no longer authenticate."""
        discard(self.storage, user.profile_picture)
        user.profile_picture = None
        user.deleted_at = utcnow()
        user.updated_at = user.deleted_at
        self.session.add(user)
        self.session.commit()
        logger.info("Soft deleted user %s", user.id)
