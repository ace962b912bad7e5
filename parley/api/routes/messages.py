"""
Message API Routes

Sending, deferred sending, editing, reacts, pins, shares and search.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
import logging

from parley.api.deps import current_user_id
from parley.errors import InvalidInput
from parley.models.api_responses import (
    EmptyResponse,
    MessageIdResponse,
    SearchResponse,
    SharedMessageIdResponse,
)
from parley.models.chat import ContainerRef
from parley.services.chat_service import ChatService, get_chat_service

logger = logging.getLogger(__name__)
router = APIRouter()


class ChannelMessageRequest(BaseModel):
    channel_id: int
    message: str


class DmMessageRequest(BaseModel):
    dm_id: int
    message: str


class ChannelSendLaterRequest(ChannelMessageRequest):
    time_sent: float = Field(..., description="Epoch seconds to deliver at")


class DmSendLaterRequest(DmMessageRequest):
    time_sent: float = Field(..., description="Epoch seconds to deliver at")


class EditRequest(BaseModel):
    message_id: int
    message: str


class ShareRequest(BaseModel):
    og_message_id: int
    message: str = ""
    channel_id: int = Field(-1, description="Target channel, or -1 when sharing to a DM")
    dm_id: int = Field(-1, description="Target DM, or -1 when sharing to a channel")


class ReactRequest(BaseModel):
    message_id: int
    react_id: int


class PinRequest(BaseModel):
    message_id: int


def share_target(request: ShareRequest) -> ContainerRef:
    """Exactly one of channel_id and dm_id must be -1."""
    if (request.channel_id == -1) == (request.dm_id == -1):
        raise InvalidInput("Exactly one of channel_id and dm_id must be -1")
    if request.channel_id != -1:
        return ContainerRef.channel(request.channel_id)
    return ContainerRef.dm(request.dm_id)


@router.post("/send", response_model=MessageIdResponse)
def send_message(
    request: ChannelMessageRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    message_id = service.messages.send(
        user_id, ContainerRef.channel(request.channel_id), request.message
    )
    return MessageIdResponse(message_id=message_id)


@router.post("/senddm", response_model=MessageIdResponse)
def send_dm_message(
    request: DmMessageRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    message_id = service.messages.send(user_id, ContainerRef.dm(request.dm_id), request.message)
    return MessageIdResponse(message_id=message_id)


@router.post("/sendlater", response_model=MessageIdResponse)
def send_later(
    request: ChannelSendLaterRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    message_id = service.messages.send_later(
        user_id, ContainerRef.channel(request.channel_id), request.message, request.time_sent
    )
    return MessageIdResponse(message_id=message_id)


@router.post("/sendlaterdm", response_model=MessageIdResponse)
def send_later_dm(
    request: DmSendLaterRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    message_id = service.messages.send_later(
        user_id, ContainerRef.dm(request.dm_id), request.message, request.time_sent
    )
    return MessageIdResponse(message_id=message_id)


@router.put("/edit", response_model=EmptyResponse)
def edit_message(
    request: EditRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.edit(user_id, request.message_id, request.message)
    return EmptyResponse()


@router.delete("/remove", response_model=EmptyResponse)
def remove_message(
    message_id: int = Query(...),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.remove(user_id, message_id)
    return EmptyResponse()


@router.post("/share", response_model=SharedMessageIdResponse)
def share_message(
    request: ShareRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    shared_id = service.messages.share(
        user_id, request.og_message_id, request.message, share_target(request)
    )
    return SharedMessageIdResponse(shared_message_id=shared_id)


@router.post("/react", response_model=EmptyResponse)
def react(
    request: ReactRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.react(user_id, request.message_id, request.react_id)
    return EmptyResponse()


@router.post("/unreact", response_model=EmptyResponse)
def unreact(
    request: ReactRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.unreact(user_id, request.message_id, request.react_id)
    return EmptyResponse()


@router.post("/pin", response_model=EmptyResponse)
def pin(
    request: PinRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.pin(user_id, request.message_id)
    return EmptyResponse()


@router.post("/unpin", response_model=EmptyResponse)
def unpin(
    request: PinRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.messages.unpin(user_id, request.message_id)
    return EmptyResponse()


search_router = APIRouter()


@search_router.get("/search", response_model=SearchResponse)
def search(
    query_str: str = Query(..., description="Case-insensitive substring to match"),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return SearchResponse(messages=service.messages.search(user_id, query_str))
