from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User
from blogsphere.routers.auth import get_current_user
from blogsphere.services.blog import BlogService
from blogsphere.services.media import read_upload
from blogsphere.services.storage import Storage, get_storage

router = APIRouter()

def get_blog_service(
    session: Session = Depends(get_session),
    storage: Storage = Depends(get_storage),
) -> BlogService:
    return BlogService(session, storage)


@router.get("/explore")
def explore_blogs(service: BlogService = Depends(get_blog_service)):
    """Public listing of every blog."""
    return send_response(service.list_blogs(), "Blogs retrieved successfully.")


@router.post("/blogs")
async def create_blog(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    logo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    # name/description are optional here so the one-blog check runs first
    blog = service.create_blog(
        current_user,
        name=name,
        description=description,
        image=await read_upload(image),
        logo=await read_upload(logo),
    )
    return send_response(blog, "Blog created successfully.", status.HTTP_201_CREATED)


@router.get("/blogs/{blog_id}")
def read_blog(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    return send_response(service.get_blog(blog_id), "Blog retrieved successfully.")


@router.post("/blogs/{blog_id}")
async def update_blog(
    blog_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    logo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    blog = service.get_blog_for_owner(blog_id, current_user)
    blog = service.update_blog(
        blog,
        name=name,
        description=description,
        image=await read_upload(image),
        logo=await read_upload(logo),
    )
    return send_response(blog, "Blog updated successfully.")


@router.delete("/blogs/{blog_id}")
def delete_blog(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    service: BlogService = Depends(get_blog_service)
):
    blog = service.get_blog_for_owner(blog_id, current_user)
    service.delete_blog(blog)
    return send_response([], "Blog deleted successfully.")
