"""
Notification Feed

Append-only, per-user feeds of "added", "tagged" and "reacted" entries.
Entries are never rewritten or removed; reads return the newest page first.
"""

import logging
from typing import List, Optional

from parley.models.api_responses import NotificationView
from parley.models.chat import ContainerRef, Notification
from parley.services.datastore import DataStore, transactional

logger = logging.getLogger(__name__)


class NotificationFeed:
    def __init__(self, store: DataStore, page_size: Optional[int] = None):
        self.store = store
        self.page_size = page_size or store.settings.notification_page_size

    def _append(self, recipient_id: int, ref: ContainerRef, text: str) -> None:
        feed = self.store.workspace.notifications.setdefault(recipient_id, [])
        feed.append(Notification(container=ref, text=text))
        logger.debug(f"Notified user {recipient_id}: {text!r}")

    def record_added(
        self, recipient_id: int, ref: ContainerRef, actor_handle: str, container_name: str
    ) -> None:
        self._append(recipient_id, ref, f"{actor_handle} added you to {container_name}")

    def record_tagged(
        self,
        recipient_id: int,
        ref: ContainerRef,
        actor_handle: str,
        container_name: str,
        excerpt: str,
    ) -> None:
        self._append(
            recipient_id, ref, f"{actor_handle} tagged you in {container_name}: {excerpt}"
        )

    def record_reacted(
        self, recipient_id: int, ref: ContainerRef, actor_handle: str, container_name: str
    ) -> None:
        self._append(
            recipient_id, ref, f"{actor_handle} reacted to your message in {container_name}"
        )

    @transactional
    def get_page(self, user_id: int) -> List[NotificationView]:
        """Most recent notifications for a user, newest first."""
        feed = self.store.workspace.notifications.get(user_id, [])
        newest = feed[::-1][: self.page_size]
        return [
            NotificationView(
                channel_id=n.container.channel_id,
                dm_id=n.container.dm_id,
                notification_message=n.text,
            )
            for n in newest
        ]
