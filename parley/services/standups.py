"""
Standup Buffer

Per-channel state machine Idle -> Active -> Idle. Lines sent while a standup
is active are buffered and committed as one message, authored by the
starter, when the window closes. Flushing is idempotent.
"""

import logging
from typing import Optional

from parley.errors import Forbidden, InvalidInput
from parley.models.api_responses import StandupActiveResponse
from parley.models.chat import Channel, ContainerRef, StandupState
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.services.messages import MessageStore
from parley.services.scheduler import Scheduler

logger = logging.getLogger(__name__)


class StandupBuffer:
    def __init__(
        self,
        store: DataStore,
        directory: Directory,
        messages: MessageStore,
        scheduler: Optional[Scheduler] = None,
    ):
        self.store = store
        self.directory = directory
        self.messages = messages
        self.scheduler = scheduler
        self.max_length = store.settings.max_message_length

        store.add_reaper(self.expire_due)

    def _member_channel(self, user_id: int, channel_id: int) -> Channel:
        channel = self.directory.get_channel(channel_id)
        if user_id not in channel.member_ids:
            raise Forbidden(f"User {user_id} is not a member of channel {channel_id}")
        return channel

    @transactional
    def start(self, requester_id: int, channel_id: int, length: float) -> float:
        """
        Open a standup window in a channel.

        Args:
            requester_id: Member starting the standup
            channel_id: Target channel
            length: Window length in seconds

        Returns:
            Epoch seconds at which the standup closes

        Raises:
            NotFound: Channel does not exist
            InvalidInput: Negative length, or a standup is already active
            Forbidden: Requester is not a member
        """
        channel = self.directory.get_channel(channel_id)
        if length < 0:
            raise InvalidInput("Standup length cannot be negative")
        if channel.standup.active:
            raise InvalidInput(f"A standup is already active in channel {channel_id}")
        self._member_channel(requester_id, channel_id)

        finish_at = self.store.clock() + length
        channel.standup = StandupState(
            active=True, starter_id=requester_id, finish_at=finish_at
        )
        if self.scheduler is not None:
            self.scheduler.call_at(finish_at, self.store.wake)

        logger.info(f"User {requester_id} started a {length}s standup in channel {channel_id}")
        return finish_at

    @transactional
    def send(self, requester_id: int, channel_id: int, line: str) -> None:
        channel = self.directory.get_channel(channel_id)
        if len(line) > self.max_length:
            raise InvalidInput(f"Standup message must be at most {self.max_length} characters")
        if not channel.standup.active:
            raise InvalidInput(f"No active standup in channel {channel_id}")
        self._member_channel(requester_id, channel_id)

        handle = self.directory.get_user(requester_id).handle
        channel.standup.buffer.append(f"[{handle}]: {line}")

    @transactional
    def is_active(self, requester_id: int, channel_id: int) -> StandupActiveResponse:
        channel = self._member_channel(requester_id, channel_id)
        standup = channel.standup
        return StandupActiveResponse(
            is_active=standup.active,
            time_finish=standup.finish_at if standup.active else None,
        )

    @transactional
    def flush(self, channel_id: int) -> Optional[int]:
        """
        Close a channel's standup and commit its buffer as one message.

        Returns:
            Id of the committed message, or None if nothing was committed
        """
        channel = self.directory.find_channel(channel_id)
        if channel is None or not channel.standup.active:
            return None

        standup = channel.standup
        message_id = None
        if standup.buffer:
            message_id = self.messages.commit(
                ContainerRef.channel(channel_id),
                standup.starter_id,
                "\n".join(standup.buffer),
                time_sent=min(self.store.clock(), standup.finish_at),
            )
        channel.standup = StandupState()
        logger.info(
            f"Standup in channel {channel_id} closed with {len(standup.buffer)} line(s)"
        )
        return message_id

    def expire_due(self, now: float) -> bool:
        """Flush every standup whose window has closed. Store reaper."""
        expired = [
            c.channel_id
            for c in self.store.workspace.channels
            if c.standup.active and c.standup.finish_at is not None and c.standup.finish_at <= now
        ]
        for channel_id in expired:
            self.flush(channel_id)
        return bool(expired)
