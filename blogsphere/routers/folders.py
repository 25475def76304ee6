from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from pydantic import BaseModel

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User
from blogsphere.routers.auth import get_current_user
from blogsphere.services.folder import FolderService

router = APIRouter()

class FolderCreate(BaseModel):
    name: Optional[str] = None
    blog_id: Optional[int] = None

class FolderBlogIn(BaseModel):
    blog_id: Optional[int] = None

def get_folder_service(session: Session = Depends(get_session)) -> FolderService:
    return FolderService(session)


@router.get("")
def list_folders(
    current_user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service)
):
    return send_response(service.list_folders(current_user), "Folders retrieved successfully.")


@router.post("")
def create_folder(
    folder_in: FolderCreate,
    current_user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service)
):
    folder = service.create_folder(current_user, folder_in.name, folder_in.blog_id)
    return send_response(folder, "Folder created successfully.", status.HTTP_201_CREATED)


@router.post("/{folder_id}/add-blog")
def add_blog_to_folder(
    folder_id: int,
    body: FolderBlogIn,
    current_user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service)
):
    folder = service.add_blog(folder_id, body.blog_id, current_user)
    return send_response(folder, "Blog added to folder successfully.")


@router.post("/{folder_id}/remove-blog")
def remove_blog_from_folder(
    folder_id: int,
    body: FolderBlogIn,
    current_user: User = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service)
):
    """
    Removing the last blog of a folder deletes the folder.
    """
    service.remove_blog(folder_id, body.blog_id, current_user)
    return send_response([], "Blog removed from folder successfully.")
