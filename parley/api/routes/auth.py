from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel
from typing import Optional
import logging

from parley.models.api_responses import AuthResponse, EmptyResponse
from parley.services.chat_service import ChatService, get_chat_service

logger = logging.getLogger(__name__)
router = APIRouter()


class RegisterRequest(BaseModel):
    email: str
    password: str
    name_first: str
    name_last: str


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/register", response_model=AuthResponse)
def register(
    request: RegisterRequest, service: ChatService = Depends(get_chat_service)
):
    """Create an account and return a session token."""
    return service.auth.register(
        request.email, request.password, request.name_first, request.name_last
    )


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, service: ChatService = Depends(get_chat_service)):
    return service.auth.login(request.email, request.password)


@router.post("/logout", response_model=EmptyResponse)
def logout(
    token: Optional[str] = Header(None),
    service: ChatService = Depends(get_chat_service),
):
    service.auth.logout(token)
    return EmptyResponse()
