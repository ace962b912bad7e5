"""
API Response Models

Pydantic models for consistent API response structures.
Services build these views from the workspace snapshot at read time.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class EmptyResponse(BaseModel):
    """Returned by operations that only mutate state."""

    pass


class AuthResponse(BaseModel):
    token: str = Field(..., description="Session token to send in the token header")
    auth_user_id: int


class UserProfile(BaseModel):
    """Public view of a user, without credentials."""

    user_id: int
    email: str
    name_first: str
    name_last: str
    handle: str


class UserResponse(BaseModel):
    user: UserProfile


class UsersResponse(BaseModel):
    users: List[UserProfile] = Field(default_factory=list)


class ChannelSummary(BaseModel):
    channel_id: int
    name: str


class ChannelsResponse(BaseModel):
    channels: List[ChannelSummary] = Field(default_factory=list)


class ChannelIdResponse(BaseModel):
    channel_id: int


class ChannelDetailsResponse(BaseModel):
    name: str
    is_public: bool
    owner_members: List[UserProfile]
    all_members: List[UserProfile]


class DmSummary(BaseModel):
    dm_id: int
    name: str


class DmsResponse(BaseModel):
    dms: List[DmSummary] = Field(default_factory=list)


class DmIdResponse(BaseModel):
    dm_id: int


class DmDetailsResponse(BaseModel):
    name: str
    members: List[UserProfile]


class ReactView(BaseModel):
    react_id: int
    user_ids: List[int]
    is_this_user_reacted: bool = Field(
        ..., description="Whether the requesting user is among user_ids"
    )


class MessageView(BaseModel):
    message_id: int
    user_id: int
    message: str
    time_sent: float = Field(..., description="Epoch seconds")
    reacts: List[ReactView] = Field(default_factory=list)
    is_pinned: bool = False


class MessagePage(BaseModel):
    """
    One window of a container's history, newest first.
    end is -1 when no older messages remain.
    """

    messages: List[MessageView]
    start: int
    end: int


class MessageIdResponse(BaseModel):
    message_id: int


class SharedMessageIdResponse(BaseModel):
    shared_message_id: int


class SearchResponse(BaseModel):
    messages: List[MessageView] = Field(default_factory=list)


class StandupStartResponse(BaseModel):
    time_finish: float = Field(..., description="Epoch seconds when the standup closes")


class StandupActiveResponse(BaseModel):
    is_active: bool
    time_finish: Optional[float] = None


class NotificationView(BaseModel):
    channel_id: int = Field(..., description="-1 when the notification is from a DM")
    dm_id: int = Field(..., description="-1 when the notification is from a channel")
    notification_message: str


class NotificationsResponse(BaseModel):
    notifications: List[NotificationView] = Field(default_factory=list)


class ChannelsJoinedPoint(BaseModel):
    num_channels_joined: int
    time_stamp: float


class DmsJoinedPoint(BaseModel):
    num_dms_joined: int
    time_stamp: float


class MessagesSentPoint(BaseModel):
    num_messages_sent: int
    time_stamp: float


class UserStatsView(BaseModel):
    channels_joined: List[ChannelsJoinedPoint]
    dms_joined: List[DmsJoinedPoint]
    messages_sent: List[MessagesSentPoint]
    involvement_rate: float = Field(
        ...,
        description="(channels + DMs joined + messages sent) / workspace totals, capped at 1",
    )


class UserStatsResponse(BaseModel):
    user_stats: UserStatsView


class ChannelsExistPoint(BaseModel):
    num_channels_exist: int
    time_stamp: float


class DmsExistPoint(BaseModel):
    num_dms_exist: int
    time_stamp: float


class MessagesExistPoint(BaseModel):
    num_messages_exist: int
    time_stamp: float


class WorkspaceStatsView(BaseModel):
    channels_exist: List[ChannelsExistPoint]
    dms_exist: List[DmsExistPoint]
    messages_exist: List[MessagesExistPoint]
    utilization_rate: float = Field(
        ..., description="Share of users in at least one channel or DM"
    )


class WorkspaceStatsResponse(BaseModel):
    workspace_stats: WorkspaceStatsView
