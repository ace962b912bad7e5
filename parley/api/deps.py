"""
Shared route dependencies.
"""

from typing import Optional

from fastapi import Depends, Header

from parley.services.chat_service import ChatService, get_chat_service


def current_user_id(
    token: Optional[str] = Header(None),
    service: ChatService = Depends(get_chat_service),
) -> int:
    """Resolve the token header to the requesting user's id."""
    return service.authenticate(token)
