"""
Channel membership and ownership.
"""

import logging
from typing import List

from parley.errors import Forbidden, InvalidInput
from parley.models.api_responses import ChannelDetailsResponse, ChannelSummary
from parley.models.chat import Channel, ContainerRef
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.services.notifications import NotificationFeed
from parley.services.stats import StatsTracker
from parley.services.users import public_profile

logger = logging.getLogger(__name__)

MAX_CHANNEL_NAME_LENGTH = 20


class ChannelService:
    def __init__(
        self,
        store: DataStore,
        directory: Directory,
        feed: NotificationFeed,
        stats: StatsTracker,
    ):
        self.store = store
        self.directory = directory
        self.feed = feed
        self.stats = stats

    def _member_channel(self, user_id: int, channel_id: int) -> Channel:
        channel = self.directory.get_channel(channel_id)
        if user_id not in channel.member_ids:
            raise Forbidden(f"User {user_id} is not a member of channel {channel_id}")
        return channel

    @staticmethod
    def _summary(channel: Channel) -> ChannelSummary:
        return ChannelSummary(channel_id=channel.channel_id, name=channel.name)

    @transactional
    def create(self, user_id: int, name: str, is_public: bool) -> int:
        if not 1 <= len(name) <= MAX_CHANNEL_NAME_LENGTH:
            raise InvalidInput(
                f"Channel name must be between 1 and {MAX_CHANNEL_NAME_LENGTH} characters"
            )
        self.directory.get_user(user_id)

        workspace = self.store.workspace
        channel = Channel(
            channel_id=workspace.channel_ids.take(),
            name=name,
            is_public=is_public,
            owner_ids=[user_id],
            member_ids=[user_id],
        )
        workspace.channels.append(channel)
        self.stats.channels_changed(1)
        self.stats.channel_joined(user_id)
        logger.info(f"User {user_id} created channel {channel.channel_id} ({name})")
        return channel.channel_id

    @transactional
    def list(self, user_id: int) -> List[ChannelSummary]:
        return [
            self._summary(c) for c in self.store.workspace.channels if user_id in c.member_ids
        ]

    @transactional
    def list_all(self) -> List[ChannelSummary]:
        return [self._summary(c) for c in self.store.workspace.channels]

    @transactional
    def details(self, user_id: int, channel_id: int) -> ChannelDetailsResponse:
        channel = self._member_channel(user_id, channel_id)
        return ChannelDetailsResponse(
            name=channel.name,
            is_public=channel.is_public,
            owner_members=[public_profile(self.directory.get_user(i)) for i in channel.owner_ids],
            all_members=[public_profile(self.directory.get_user(i)) for i in channel.member_ids],
        )

    @transactional
    def join(self, user_id: int, channel_id: int) -> None:
        channel = self.directory.get_channel(channel_id)
        if user_id in channel.member_ids:
            raise InvalidInput(f"User {user_id} is already a member of channel {channel_id}")
        if not channel.is_public and not self.directory.is_global_owner(user_id):
            raise Forbidden(f"Channel {channel_id} is private")
        channel.member_ids.append(user_id)
        self.stats.channel_joined(user_id)
        logger.info(f"User {user_id} joined channel {channel_id}")

    @transactional
    def invite(self, user_id: int, channel_id: int, invitee_id: int) -> None:
        """Add a user to a channel and notify them."""
        channel = self.directory.get_channel(channel_id)
        invitee = self.directory.get_user(invitee_id)
        if invitee_id in channel.member_ids:
            raise InvalidInput(f"User {invitee_id} is already a member of channel {channel_id}")
        self._member_channel(user_id, channel_id)

        channel.member_ids.append(invitee_id)
        self.stats.channel_joined(invitee_id)
        inviter = self.directory.get_user(user_id)
        self.feed.record_added(
            invitee.user_id, ContainerRef.channel(channel_id), inviter.handle, channel.name
        )
        logger.info(f"User {user_id} invited user {invitee_id} to channel {channel_id}")

    @transactional
    def leave(self, user_id: int, channel_id: int) -> None:
        channel = self._member_channel(user_id, channel_id)
        if channel.standup.active and channel.standup.starter_id == user_id:
            raise InvalidInput("Cannot leave while your standup is active")

        channel.member_ids.remove(user_id)
        self.stats.channel_joined(user_id, -1)
        if user_id in channel.owner_ids:
            channel.owner_ids.remove(user_id)
        logger.info(f"User {user_id} left channel {channel_id}")

    @transactional
    def add_owner(self, user_id: int, channel_id: int, target_id: int) -> None:
        channel = self.directory.get_channel(channel_id)
        self.directory.get_user(target_id)
        if target_id not in channel.member_ids:
            raise InvalidInput(f"User {target_id} is not a member of channel {channel_id}")
        if target_id in channel.owner_ids:
            raise InvalidInput(f"User {target_id} is already an owner of channel {channel_id}")
        if not self.directory.has_channel_owner_permission(user_id, channel_id):
            raise Forbidden(f"User {user_id} cannot manage owners of channel {channel_id}")

        channel.owner_ids.append(target_id)
        logger.info(f"User {user_id} made user {target_id} an owner of channel {channel_id}")

    @transactional
    def remove_owner(self, user_id: int, channel_id: int, target_id: int) -> None:
        channel = self.directory.get_channel(channel_id)
        self.directory.get_user(target_id)
        if target_id not in channel.owner_ids:
            raise InvalidInput(f"User {target_id} is not an owner of channel {channel_id}")
        if channel.owner_ids == [target_id]:
            raise InvalidInput(f"User {target_id} is the only owner of channel {channel_id}")
        if not self.directory.has_channel_owner_permission(user_id, channel_id):
            raise Forbidden(f"User {user_id} cannot manage owners of channel {channel_id}")

        channel.owner_ids.remove(target_id)
        logger.info(f"User {user_id} removed user {target_id} as owner of channel {channel_id}")
