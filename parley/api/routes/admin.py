from fastapi import APIRouter, Depends
import logging

from parley.models.api_responses import EmptyResponse
from parley.services.chat_service import ChatService, get_chat_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.delete("/clear", response_model=EmptyResponse)
def clear(service: ChatService = Depends(get_chat_service)):
    """Reset the workspace to empty. Used by test harnesses."""
    service.clear()
    logger.warning("Workspace cleared over HTTP")
    return EmptyResponse()
