from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import EmailStr
from sqlmodel import Session

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User, UserRead
from blogsphere.routers.auth import get_current_user
from blogsphere.services.media import read_upload
from blogsphere.services.storage import Storage, get_storage
from blogsphere.services.user import UserService

router = APIRouter()

def get_user_service(
    session: Session = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> UserService:
    return UserService(session, storage)


@router.get("")
def read_profile(current_user: User = Depends(get_current_user)):
    """
    Get current user.
    """
    return send_response(UserRead.model_validate(current_user), "Profile retrieved successfully.")


@router.post("")
async def update_profile(
    name: Optional[str] = Form(None),
    email: Optional[EmailStr] = Form(None),
    password: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """
    Update the current user. Absent fields are left untouched.
    """
    user = service.update_profile(
        current_user,
        name=name,
        email=email,
        password=password,
        bio=bio,
        profile_picture=await read_upload(profile_picture),
    )
    return send_response(UserRead.model_validate(user), "Profile updated successfully.")


@router.delete("")
def delete_profile(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    service.delete_user(current_user)
    return send_response([], "User profile deleted successfully.")
