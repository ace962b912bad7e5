"""
Direct Message API Routes
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List

from parley.api.deps import current_user_id
from parley.models.api_responses import (
    DmDetailsResponse,
    DmIdResponse,
    DmsResponse,
    EmptyResponse,
    MessagePage,
)
from parley.services.chat_service import ChatService, get_chat_service

router = APIRouter()


class DmCreateRequest(BaseModel):
    u_ids: List[int] = []


class DmRequest(BaseModel):
    dm_id: int


@router.post("/create", response_model=DmIdResponse)
def create_dm(
    request: DmCreateRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return DmIdResponse(dm_id=service.dms.create(user_id, request.u_ids))


@router.get("/list", response_model=DmsResponse)
def list_dms(
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return DmsResponse(dms=service.dms.list(user_id))


@router.get("/details", response_model=DmDetailsResponse)
def dm_details(
    dm_id: int = Query(...),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.dms.details(user_id, dm_id)


@router.get("/messages", response_model=MessagePage)
def dm_messages(
    dm_id: int = Query(...),
    start: int = Query(0, description="Offset from the most recent message"),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    return service.dms.messages_page(user_id, dm_id, start)


@router.post("/leave", response_model=EmptyResponse)
def leave_dm(
    request: DmRequest,
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.dms.leave(user_id, request.dm_id)
    return EmptyResponse()


@router.delete("/remove", response_model=EmptyResponse)
def remove_dm(
    dm_id: int = Query(...),
    user_id: int = Depends(current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    service.dms.remove(user_id, dm_id)
    return EmptyResponse()
