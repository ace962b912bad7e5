"""
Chat Data Models

Canonical workspace snapshot: users, channels, DMs, messages, notifications.
Membership lists hold user ids only; display fields are resolved at read time.
"""

from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Dict, List, Optional


class ContainerKind(str, Enum):
    """Kind of conversation that owns a message list."""

    CHANNEL = "channel"
    DM = "dm"


class ContainerRef(BaseModel):
    """Reference to either a channel or a DM."""

    model_config = ConfigDict(frozen=True)

    kind: ContainerKind
    id: int

    @classmethod
    def channel(cls, channel_id: int) -> "ContainerRef":
        return cls(kind=ContainerKind.CHANNEL, id=channel_id)

    @classmethod
    def dm(cls, dm_id: int) -> "ContainerRef":
        return cls(kind=ContainerKind.DM, id=dm_id)

    @property
    def is_channel(self) -> bool:
        return self.kind == ContainerKind.CHANNEL

    # Wire format uses -1 for the side that does not apply
    @property
    def channel_id(self) -> int:
        return self.id if self.is_channel else -1

    @property
    def dm_id(self) -> int:
        return -1 if self.is_channel else self.id

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


class Sequence(BaseModel):
    """Monotonic id generator owned by the store."""

    next_value: int = 0

    def take(self) -> int:
        value = self.next_value
        self.next_value += 1
        return value


class User(BaseModel):
    user_id: int
    email: str
    name_first: str
    name_last: str
    handle: str
    global_owner: bool = False
    password_hash: str


class Session(BaseModel):
    token_hash: str
    user_id: int


class React(BaseModel):
    react_id: int
    user_ids: List[int] = []


class Message(BaseModel):
    message_id: int
    user_id: int
    body: str
    time_sent: float  # Epoch seconds
    edited_at: Optional[float] = None
    reacts: List[React] = []
    is_pinned: bool = False


class StandupState(BaseModel):
    """Per-channel standup window and its buffered lines."""

    active: bool = False
    starter_id: Optional[int] = None
    finish_at: Optional[float] = None
    buffer: List[str] = []


class Channel(BaseModel):
    channel_id: int
    name: str
    is_public: bool
    owner_ids: List[int] = []
    member_ids: List[int] = []
    messages: List[Message] = []
    standup: StandupState = Field(default_factory=StandupState)


class Dm(BaseModel):
    dm_id: int
    name: str  # Sorted member handles at creation time, never recomputed
    owner_id: int
    member_ids: List[int] = []
    messages: List[Message] = []


class Notification(BaseModel):
    container: ContainerRef
    text: str


class ScheduledMessage(BaseModel):
    """Message whose id is reserved but which is delivered at send_at."""

    message_id: int
    sender_id: int
    container: ContainerRef
    body: str
    send_at: float


class StatPoint(BaseModel):
    """Value of a counter from time_stamp onwards."""

    count: int
    time_stamp: float  # Epoch seconds


class UserStats(BaseModel):
    """Per-user counter history. Each list starts at 0 on registration."""

    channels_joined: List[StatPoint] = []
    dms_joined: List[StatPoint] = []
    messages_sent: List[StatPoint] = []


class WorkspaceStats(BaseModel):
    """Workspace-wide counter history. Each list starts at 0 with the first user."""

    channels_exist: List[StatPoint] = []
    dms_exist: List[StatPoint] = []
    messages_exist: List[StatPoint] = []


class Workspace(BaseModel):
    """Complete data snapshot persisted between requests."""

    users: List[User] = []
    sessions: List[Session] = []
    channels: List[Channel] = []
    dms: List[Dm] = []
    notifications: Dict[int, List[Notification]] = {}
    scheduled: List[ScheduledMessage] = []
    user_stats: Dict[int, UserStats] = {}
    workspace_stats: WorkspaceStats = Field(default_factory=WorkspaceStats)

    user_ids: Sequence = Field(default_factory=Sequence)
    channel_ids: Sequence = Field(default_factory=Sequence)
    dm_ids: Sequence = Field(default_factory=Sequence)
    message_ids: Sequence = Field(default_factory=Sequence)
