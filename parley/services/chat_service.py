"""
Chat Service

Wires the workspace store to every chat component and exposes a single
shared instance to the HTTP layer.

Send flow:
1. Message Store validates and commits the message
2. Handle Tagger resolves @mentions to container members
3. Notification Feed records a tag entry for each tagged member
"""

import logging
import time
from functools import lru_cache
from typing import Callable, Optional

from parley.config import Settings, get_settings
from parley.services.auth import AuthService
from parley.services.channels import ChannelService
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.services.dms import DmService
from parley.services.messages import MessageStore
from parley.services.notifications import NotificationFeed
from parley.services.scheduler import Scheduler
from parley.services.standups import StandupBuffer
from parley.services.stats import StatsTracker
from parley.services.tagger import HandleTagger
from parley.services.users import UserService

logger = logging.getLogger(__name__)


class ChatService:
    """Owns the data store and all chat components."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
        scheduler: Optional[Scheduler] = None,
    ):
        self.store = DataStore(settings, clock)
        self.scheduler = scheduler if scheduler is not None else Scheduler(clock)

        self.directory = Directory(self.store)
        self.tagger = HandleTagger(self.directory)
        self.notifications = NotificationFeed(self.store)
        self.stats = StatsTracker(self.store)
        self.messages = MessageStore(
            self.store,
            self.directory,
            self.tagger,
            self.notifications,
            self.stats,
            self.scheduler,
        )
        self.standups = StandupBuffer(
            self.store, self.directory, self.messages, self.scheduler
        )

        self.auth = AuthService(self.store, self.directory, self.stats)
        self.users = UserService(self.store, self.directory)
        self.channels = ChannelService(
            self.store, self.directory, self.notifications, self.stats
        )
        self.dms = DmService(
            self.store, self.directory, self.notifications, self.messages, self.stats
        )

    @transactional
    def authenticate(self, token: Optional[str]) -> int:
        return self.directory.resolve_token(token)

    def clear(self) -> None:
        """Drop all data and pending timers."""
        self.scheduler.cancel_all()
        self.store.reset()


@lru_cache
def get_chat_service() -> ChatService:
    service = ChatService(get_settings())
    service.store.load()
    logger.info("Chat service ready")
    return service
