from fastapi import APIRouter, Depends

from parley.api.deps import current_user_id
from parley.models.api_responses import NotificationsResponse
from parley.services.chat_service import ChatService, get_chat_service

router = APIRouter()


@router.get("/get", response_model=NotificationsResponse)
def get_notifications(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """The caller's most recent notifications, newest first."""
    return NotificationsResponse(notifications=service.notifications.get_page(user_id))
