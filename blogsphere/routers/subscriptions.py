from fastapi import APIRouter, Depends
from sqlmodel import Session

from blogsphere.core.responses import send_response
from blogsphere.db.session import get_session
from blogsphere.models.user import User
from blogsphere.routers.auth import get_current_user
from blogsphere.services.subscription import SubscriptionService

router = APIRouter()

def get_subscription_service(session: Session = Depends(get_session)) -> SubscriptionService:
    return SubscriptionService(session)


@router.get("")
def list_subscriptions(
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    return send_response(service.list_subscriptions(current_user), "Subscribed blogs retrieved successfully.")


@router.post("/{blog_id}")
def subscribe(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    service.subscribe(current_user, blog_id)
    return send_response([], "Successfully subscribed to the blog.")


@router.delete("/{blog_id}")
def unsubscribe(
    blog_id: int,
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    service.unsubscribe(current_user, blog_id)
    return send_response([], "Successfully unsubscribed from the blog and removed from folders.")
