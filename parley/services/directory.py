"""
Directory

Read-side lookups over the workspace: users, channels, DMs, membership and
ownership predicates, token resolution. Linear scans throughout.
"""

import logging
from typing import Optional, Tuple, Union

from parley.errors import NotFound, Unauthenticated
from parley.models.chat import Channel, ContainerRef, Dm, Message, User
from parley.services.datastore import DataStore
from parley.utils.helpers import hash_token

logger = logging.getLogger(__name__)

Container = Union[Channel, Dm]


class Directory:
    def __init__(self, store: DataStore):
        self.store = store

    @property
    def workspace(self):
        return self.store.workspace

    # ── Users ──────────────────────────────────────────────

    def find_user(self, user_id: int) -> Optional[User]:
        return next((u for u in self.workspace.users if u.user_id == user_id), None)

    def find_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.workspace.users if u.email == email), None)

    def find_user_by_handle(self, handle: str) -> Optional[User]:
        return next((u for u in self.workspace.users if u.handle == handle), None)

    def user_exists(self, user_id: int) -> bool:
        return self.find_user(user_id) is not None

    def get_user(self, user_id: int) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} does not exist")
        return user

    def resolve_token(self, token: Optional[str]) -> int:
        """Map a session token to its user id."""
        if not token:
            raise Unauthenticated("Missing token")
        token_hash = hash_token(token)
        session = next(
            (s for s in self.workspace.sessions if s.token_hash == token_hash), None
        )
        if session is None:
            logger.debug("Rejected unknown token")
            raise Unauthenticated("Invalid token")
        return session.user_id

    # ── Channels and DMs ───────────────────────────────────

    def find_channel(self, channel_id: int) -> Optional[Channel]:
        return next(
            (c for c in self.workspace.channels if c.channel_id == channel_id), None
        )

    def find_dm(self, dm_id: int) -> Optional[Dm]:
        return next((d for d in self.workspace.dms if d.dm_id == dm_id), None)

    def channel_exists(self, channel_id: int) -> bool:
        return self.find_channel(channel_id) is not None

    def dm_exists(self, dm_id: int) -> bool:
        return self.find_dm(dm_id) is not None

    def get_channel(self, channel_id: int) -> Channel:
        channel = self.find_channel(channel_id)
        if channel is None:
            raise NotFound(f"Channel {channel_id} does not exist")
        return channel

    def get_dm(self, dm_id: int) -> Dm:
        dm = self.find_dm(dm_id)
        if dm is None:
            raise NotFound(f"DM {dm_id} does not exist")
        return dm

    def find_container(self, ref: ContainerRef) -> Optional[Container]:
        if ref.is_channel:
            return self.find_channel(ref.id)
        return self.find_dm(ref.id)

    def get_container(self, ref: ContainerRef) -> Container:
        if ref.is_channel:
            return self.get_channel(ref.id)
        return self.get_dm(ref.id)

    @staticmethod
    def ref_of(container: Container) -> ContainerRef:
        if isinstance(container, Channel):
            return ContainerRef.channel(container.channel_id)
        return ContainerRef.dm(container.dm_id)

    # ── Predicates ─────────────────────────────────────────

    def is_member(self, user_id: int, ref: ContainerRef) -> bool:
        container = self.find_container(ref)
        return container is not None and user_id in container.member_ids

    def is_owner(self, user_id: int, channel_id: int) -> bool:
        """Channel owner, not counting global permissions."""
        channel = self.find_channel(channel_id)
        return channel is not None and user_id in channel.owner_ids

    def is_global_owner(self, user_id: int) -> bool:
        user = self.find_user(user_id)
        return user is not None and user.global_owner

    def has_channel_owner_permission(self, user_id: int, channel_id: int) -> bool:
        """Channel owners, and global owners who are members of the channel."""
        if self.is_owner(user_id, channel_id):
            return True
        return self.is_global_owner(user_id) and self.is_member(
            user_id, ContainerRef.channel(channel_id)
        )

    def has_owner_permission(self, user_id: int, ref: ContainerRef) -> bool:
        if ref.is_channel:
            return self.has_channel_owner_permission(user_id, ref.id)
        dm = self.find_dm(ref.id)
        return dm is not None and dm.owner_id == user_id

    # ── Messages ───────────────────────────────────────────

    def locate_message(self, message_id: int) -> Optional[Tuple[Container, Message]]:
        """Find a committed message and the channel or DM holding it."""
        for container in [*self.workspace.channels, *self.workspace.dms]:
            for message in container.messages:
                if message.message_id == message_id:
                    return container, message
        return None

    def container_name(self, ref: ContainerRef) -> str:
        return self.get_container(ref).name
