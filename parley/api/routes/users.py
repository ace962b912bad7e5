from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from parley.api.deps import current_user_id
from parley.models.api_responses import (
    EmptyResponse,
    UserResponse,
    UsersResponse,
    UserStatsResponse,
    WorkspaceStatsResponse,
)
from parley.services.chat_service import ChatService, get_chat_service

router = APIRouter()


class SetNameRequest(BaseModel):
    name_first: str
    name_last: str


class SetEmailRequest(BaseModel):
    email: str


class SetHandleRequest(BaseModel):
    handle: str


@router.get("/users/all", response_model=UsersResponse)
def users_all(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return UsersResponse(users=service.users.all())


@router.get("/user/profile", response_model=UserResponse)
def user_profile(
    u_id: int = Query(..., description="Id of the user to look up"),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return UserResponse(user=service.users.profile(u_id))


@router.put("/user/profile/setname", response_model=EmptyResponse)
def set_name(
    request: SetNameRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.users.set_name(user_id, request.name_first, request.name_last)
    return EmptyResponse()


@router.put("/user/profile/setemail", response_model=EmptyResponse)
def set_email(
    request: SetEmailRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.users.set_email(user_id, request.email)
    return EmptyResponse()


@router.put("/user/profile/sethandle", response_model=EmptyResponse)
def set_handle(
    request: SetHandleRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.users.set_handle(user_id, request.handle)
    return EmptyResponse()


@router.get("/user/stats", response_model=UserStatsResponse)
def user_stats(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """The caller's channel, DM and message counters over time."""
    return UserStatsResponse(user_stats=service.stats.user_stats(user_id))


@router.get("/users/stats", response_model=WorkspaceStatsResponse)
def workspace_stats(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return WorkspaceStatsResponse(workspace_stats=service.stats.workspace_stats())
