# Shared data models
from parley.models.chat import (
    ContainerKind,
    ContainerRef,
    User,
    Session,
    Channel,
    Dm,
    Message,
    React,
    Notification,
    StandupState,
    ScheduledMessage,
    Workspace,
)
from parley.models.api_responses import MessagePage, MessageView, NotificationView

__all__ = [
    "ContainerKind",
    "ContainerRef",
    "User",
    "Session",
    "Channel",
    "Dm",
    "Message",
    "React",
    "Notification",
    "StandupState",
    "ScheduledMessage",
    "Workspace",
    "MessagePage",
    "MessageView",
    "NotificationView",
]
