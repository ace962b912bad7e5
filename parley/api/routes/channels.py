"""
Channel API Routes
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from parley.api.deps import current_user_id
from parley.models.api_responses import (
    ChannelDetailsResponse,
    ChannelIdResponse,
    ChannelsResponse,
    EmptyResponse,
    MessagePage,
)
from parley.models.chat import ContainerRef
from parley.services.chat_service import ChatService, get_chat_service

router = APIRouter()


class ChannelCreateRequest(BaseModel):
    name: str
    is_public: bool


class ChannelRequest(BaseModel):
    channel_id: int


class ChannelUserRequest(BaseModel):
    channel_id: int
    u_id: int


@router.post("/channels/create", response_model=ChannelIdResponse)
def create_channel(
    request: ChannelCreateRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    channel_id = service.channels.create(user_id, request.name, request.is_public)
    return ChannelIdResponse(channel_id=channel_id)


@router.get("/channels/list", response_model=ChannelsResponse)
def list_channels(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return ChannelsResponse(channels=service.channels.list(user_id))


@router.get("/channels/listall", response_model=ChannelsResponse)
def list_all_channels(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return ChannelsResponse(channels=service.channels.list_all())


@router.get("/channel/details", response_model=ChannelDetailsResponse)
def channel_details(
    channel_id: int = Query(...),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.channels.details(user_id, channel_id)


@router.get("/channel/messages", response_model=MessagePage)
def channel_messages(
    channel_id: int = Query(...),
    start: int = Query(0, description="Offset from the most recent message"),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """
    Page through a channel's history, newest first.

    end is start + 50 while older messages remain, otherwise -1.
    """
    return service.messages.get_page(user_id, ContainerRef.channel(channel_id), start)


@router.post("/channel/join", response_model=EmptyResponse)
def join_channel(
    request: ChannelRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.channels.join(user_id, request.channel_id)
    return EmptyResponse()


@router.post("/channel/invite", response_model=EmptyResponse)
def invite_to_channel(
    request: ChannelUserRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.channels.invite(user_id, request.channel_id, request.u_id)
    return EmptyResponse()


@router.post("/channel/leave", response_model=EmptyResponse)
def leave_channel(
    request: ChannelRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.channels.leave(user_id, request.channel_id)
    return EmptyResponse()


@router.post("/channel/addowner", response_model=EmptyResponse)
def add_owner(
    request: ChannelUserRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.channels.add_owner(user_id, request.channel_id, request.u_id)
    return EmptyResponse()


@router.post("/channel/removeowner", response_model=EmptyResponse)
def remove_owner(
    request: ChannelUserRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.channels.remove_owner(user_id, request.channel_id, request.u_id)
    return EmptyResponse()
