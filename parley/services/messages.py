"""
Message Store

Sends, edits and removes messages in channels and DMs, pages history,
delivers deferred messages, and handles reacts, pins, shares and search.

History is stored oldest first. Pages are indexed from the most recent
message and returned newest first.
"""

import logging
from typing import List, Optional, Tuple

from parley.errors import Forbidden, InvalidInput, NotFound
from parley.models.api_responses import MessagePage, MessageView, ReactView
from parley.models.chat import ContainerRef, Message, React, ScheduledMessage
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Container, Directory
from parley.services.notifications import NotificationFeed
from parley.services.scheduler import Scheduler
from parley.services.stats import StatsTracker
from parley.services.tagger import HandleTagger

logger = logging.getLogger(__name__)

VALID_REACT_IDS = {1}


class MessageStore:
    def __init__(
        self,
        store: DataStore,
        directory: Directory,
        tagger: HandleTagger,
        feed: NotificationFeed,
        stats: StatsTracker,
        scheduler: Optional[Scheduler] = None,
    ):
        self.store = store
        self.directory = directory
        self.tagger = tagger
        self.feed = feed
        self.stats = stats
        self.scheduler = scheduler
        settings = store.settings
        self.page_size = settings.message_page_size
        self.max_length = settings.max_message_length

        store.add_reaper(self.deliver_due)

    # ── Helpers ────────────────────────────────────────────

    def _check_body(self, body: str) -> None:
        if not 1 <= len(body) <= self.max_length:
            raise InvalidInput(
                f"Message must be between 1 and {self.max_length} characters"
            )

    def _member_container(self, user_id: int, ref: ContainerRef) -> Container:
        container = self.directory.get_container(ref)
        if user_id not in container.member_ids:
            raise Forbidden(f"User {user_id} is not a member of {ref}")
        return container

    def _visible_message(self, user_id: int, message_id: int) -> Tuple[Container, Message]:
        """A committed message in a channel or DM the user belongs to."""
        located = self.directory.locate_message(message_id)
        if located is None or user_id not in located[0].member_ids:
            raise NotFound(f"Message {message_id} does not exist")
        return located

    def _check_can_modify(self, user_id: int, container: Container, message: Message) -> None:
        ref = self.directory.ref_of(container)
        if message.user_id != user_id and not self.directory.has_owner_permission(user_id, ref):
            raise Forbidden(f"User {user_id} cannot modify message {message.message_id}")

    def _notify_tags(self, actor_id: int, ref: ContainerRef, body: str) -> None:
        tagged = self.tagger.tagged_members(ref, body)
        if not tagged:
            return

        actor = self.directory.get_user(actor_id)
        name = self.directory.container_name(ref)
        preview = self.tagger.excerpt(body)
        for recipient_id in tagged:
            self.feed.record_tagged(recipient_id, ref, actor.handle, name, preview)
        logger.info(f"{actor.handle} tagged {len(tagged)} member(s) in {ref}")

    @staticmethod
    def view(message: Message, user_id: int) -> MessageView:
        return MessageView(
            message_id=message.message_id,
            user_id=message.user_id,
            message=message.body,
            time_sent=message.time_sent,
            reacts=[
                ReactView(
                    react_id=react.react_id,
                    user_ids=list(react.user_ids),
                    is_this_user_reacted=user_id in react.user_ids,
                )
                for react in message.reacts
            ],
            is_pinned=message.is_pinned,
        )

    def commit(
        self,
        ref: ContainerRef,
        author_id: int,
        body: str,
        message_id: Optional[int] = None,
        time_sent: Optional[float] = None,
    ) -> int:
        """Append a message and count it, without validation or tagging."""
        container = self.directory.get_container(ref)
        if message_id is None:
            message_id = self.store.workspace.message_ids.take()
        container.messages.append(
            Message(
                message_id=message_id,
                user_id=author_id,
                body=body,
                time_sent=self.store.clock() if time_sent is None else time_sent,
            )
        )
        self.stats.message_sent(author_id)
        return message_id

    # ── Sending ────────────────────────────────────────────

    @transactional
    def send(self, sender_id: int, ref: ContainerRef, body: str) -> int:
        self.directory.get_container(ref)
        self._check_body(body)
        self._member_container(sender_id, ref)

        message_id = self.commit(ref, sender_id, body)
        self._notify_tags(sender_id, ref, body)
        logger.info(f"User {sender_id} sent message {message_id} to {ref}")
        return message_id

    @transactional
    def send_later(self, sender_id: int, ref: ContainerRef, body: str, send_at: float) -> int:
        """
        Reserve a message id now and deliver the message at send_at.

        Raises:
            NotFound: Container does not exist
            InvalidInput: Bad length, or send_at is in the past
            Forbidden: Sender is not a member
        """
        self.directory.get_container(ref)
        self._check_body(body)
        if send_at < self.store.clock():
            raise InvalidInput("Cannot schedule a message in the past")
        self._member_container(sender_id, ref)

        message_id = self.store.workspace.message_ids.take()
        self.store.workspace.scheduled.append(
            ScheduledMessage(
                message_id=message_id,
                sender_id=sender_id,
                container=ref,
                body=body,
                send_at=send_at,
            )
        )
        if self.scheduler is not None:
            self.scheduler.call_at(send_at, self.store.wake)

        logger.info(f"User {sender_id} scheduled message {message_id} to {ref} at {send_at}")
        return message_id

    def deliver_due(self, now: float) -> bool:
        """Commit every scheduled message whose time has come. Store reaper."""
        workspace = self.store.workspace
        due = sorted(
            (s for s in workspace.scheduled if s.send_at <= now),
            key=lambda s: (s.send_at, s.message_id),
        )
        if not due:
            return False

        due_ids = {s.message_id for s in due}
        workspace.scheduled = [s for s in workspace.scheduled if s.message_id not in due_ids]
        for pending in due:
            if not self.directory.is_member(pending.sender_id, pending.container):
                logger.warning(
                    f"Dropping scheduled message {pending.message_id}: "
                    f"{pending.container} is gone or sender left"
                )
                continue
            self.commit(
                pending.container,
                pending.sender_id,
                pending.body,
                message_id=pending.message_id,
                time_sent=pending.send_at,
            )
            self._notify_tags(pending.sender_id, pending.container, pending.body)
            logger.info(f"Delivered scheduled message {pending.message_id}")
        return True

    # ── Editing ────────────────────────────────────────────

    @transactional
    def edit(self, requester_id: int, message_id: int, new_body: str) -> None:
        """
        Replace a message body. An empty body removes the message.

        Tag notifications are recorded again for the new body; earlier ones stay.
        """
        if len(new_body) > self.max_length:
            raise InvalidInput(f"Message must be at most {self.max_length} characters")
        container, message = self._visible_message(requester_id, message_id)
        self._check_can_modify(requester_id, container, message)

        if new_body == "":
            self._remove(container, message_id)
            return

        message.body = new_body
        message.edited_at = self.store.clock()
        self._notify_tags(requester_id, self.directory.ref_of(container), new_body)
        logger.info(f"User {requester_id} edited message {message_id}")

    @transactional
    def remove(self, requester_id: int, message_id: int) -> None:
        container, message = self._visible_message(requester_id, message_id)
        self._check_can_modify(requester_id, container, message)
        self._remove(container, message_id)

    def _remove(self, container: Container, message_id: int) -> None:
        container.messages = [m for m in container.messages if m.message_id != message_id]
        self.stats.messages_changed(-1)
        logger.info(f"Removed message {message_id} from {self.directory.ref_of(container)}")

    # ── Reading ────────────────────────────────────────────

    @transactional
    def get_page(self, user_id: int, ref: ContainerRef, start: int) -> MessagePage:
        """
        Page through a container's history, most recent first.

        Args:
            user_id: Requesting member
            ref: Channel or DM
            start: Offset from the most recent message

        Returns:
            MessagePage whose end is start + page size, or -1 on the last page
        """
        container = self._member_container(user_id, ref)
        total = len(container.messages)
        if start < 0 or start > total:
            raise InvalidInput(f"Start {start} is outside 0..{total}")

        newest_first = container.messages[::-1]
        window = newest_first[start : start + self.page_size]
        end = start + self.page_size if start + self.page_size < total else -1

        return MessagePage(
            messages=[self.view(m, user_id) for m in window],
            start=start,
            end=end,
        )

    @transactional
    def search(self, user_id: int, query: str) -> List[MessageView]:
        if not 1 <= len(query) <= self.max_length:
            raise InvalidInput(f"Query must be between 1 and {self.max_length} characters")

        needle = query.lower()
        workspace = self.store.workspace
        matches = [
            message
            for container in [*workspace.channels, *workspace.dms]
            if user_id in container.member_ids
            for message in container.messages
            if needle in message.body.lower()
        ]
        matches.sort(key=lambda m: (m.time_sent, m.message_id), reverse=True)
        return [self.view(m, user_id) for m in matches]

    # ── Reacts and pins ────────────────────────────────────

    @transactional
    def react(self, user_id: int, message_id: int, react_id: int) -> None:
        container, message = self._visible_message(user_id, message_id)
        if react_id not in VALID_REACT_IDS:
            raise InvalidInput(f"Unknown react id {react_id}")

        react = next((r for r in message.reacts if r.react_id == react_id), None)
        if react is None:
            react = React(react_id=react_id)
            message.reacts.append(react)
        if user_id in react.user_ids:
            raise InvalidInput(f"User {user_id} already reacted with {react_id}")
        react.user_ids.append(user_id)

        ref = self.directory.ref_of(container)
        if message.user_id in container.member_ids:
            actor = self.directory.get_user(user_id)
            self.feed.record_reacted(message.user_id, ref, actor.handle, container.name)
        logger.info(f"User {user_id} reacted to message {message_id}")

    @transactional
    def unreact(self, user_id: int, message_id: int, react_id: int) -> None:
        _, message = self._visible_message(user_id, message_id)
        if react_id not in VALID_REACT_IDS:
            raise InvalidInput(f"Unknown react id {react_id}")

        react = next((r for r in message.reacts if r.react_id == react_id), None)
        if react is None or user_id not in react.user_ids:
            raise InvalidInput(f"User {user_id} has not reacted with {react_id}")
        react.user_ids.remove(user_id)
        if not react.user_ids:
            message.reacts.remove(react)

    @transactional
    def pin(self, user_id: int, message_id: int) -> None:
        self._set_pinned(user_id, message_id, True)

    @transactional
    def unpin(self, user_id: int, message_id: int) -> None:
        self._set_pinned(user_id, message_id, False)

    def _set_pinned(self, user_id: int, message_id: int, pinned: bool) -> None:
        container, message = self._visible_message(user_id, message_id)
        if message.is_pinned == pinned:
            raise InvalidInput(
                f"Message {message_id} is already {'pinned' if pinned else 'unpinned'}"
            )
        if not self.directory.has_owner_permission(user_id, self.directory.ref_of(container)):
            raise Forbidden(f"User {user_id} cannot pin messages here")
        message.is_pinned = pinned

    # ── Sharing ────────────────────────────────────────────

    @transactional
    def share(self, user_id: int, og_message_id: int, message: str, target: ContainerRef) -> int:
        """
        Share an existing message into a channel or DM, with an optional comment.

        Only the comment is scanned for tags.
        """
        self.directory.get_container(target)
        _, original = self._visible_message(user_id, og_message_id)
        if len(message) > self.max_length:
            raise InvalidInput(f"Message must be at most {self.max_length} characters")
        self._member_container(user_id, target)

        body = f"{original.body}\n\n{message}" if message else original.body
        shared_id = self.commit(target, user_id, body)
        if message:
            self._notify_tags(user_id, target, message)
        logger.info(f"User {user_id} shared message {og_message_id} to {target} as {shared_id}")
        return shared_id
