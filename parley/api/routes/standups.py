from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from parley.api.deps import current_user_id
from parley.models.api_responses import (
    EmptyResponse,
    StandupActiveResponse,
    StandupStartResponse,
)
from parley.services.chat_service import ChatService, get_chat_service

router = APIRouter()


class StandupStartRequest(BaseModel):
    channel_id: int
    length: float = Field(..., description="Window length in seconds")


class StandupSendRequest(BaseModel):
    channel_id: int
    message: str


@router.post("/start", response_model=StandupStartResponse)
def start_standup(
    request: StandupStartRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    time_finish = service.standups.start(user_id, request.channel_id, request.length)
    return StandupStartResponse(time_finish=time_finish)


@router.get("/active", response_model=StandupActiveResponse)
def standup_active(
    channel_id: int = Query(...),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.standups.is_active(user_id, channel_id)


@router.post("/send", response_model=EmptyResponse)
def send_to_standup(
    request: StandupSendRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.standups.send(user_id, request.channel_id, request.message)
    return EmptyResponse()
