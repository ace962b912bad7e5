"""
Direct message groups.

A DM's name is its members' handles, sorted and comma-joined, fixed at
creation.
"""

import logging
from typing import List

from parley.errors import Forbidden, InvalidInput
from parley.models.api_responses import DmDetailsResponse, DmSummary, MessagePage
from parley.models.chat import ContainerRef, Dm
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.services.messages import MessageStore
from parley.services.notifications import NotificationFeed
from parley.services.stats import StatsTracker
from parley.services.users import public_profile

logger = logging.getLogger(__name__)


class DmService:
    def __init__(
        self,
        store: DataStore,
        directory: Directory,
        feed: NotificationFeed,
        messages: MessageStore,
        stats: StatsTracker,
    ):
        self.store = store
        self.directory = directory
        self.feed = feed
        self.messages = messages
        self.stats = stats

    def _member_dm(self, user_id: int, dm_id: int) -> Dm:
        dm = self.directory.get_dm(dm_id)
        if user_id not in dm.member_ids:
            raise Forbidden(f"User {user_id} is not a member of DM {dm_id}")
        return dm

    @transactional
    def create(self, user_id: int, user_ids: List[int]) -> int:
        """
        Create a DM owned by user_id with the given invitees.

        Raises:
            InvalidInput: Unknown or duplicate invitees, or the creator
                listed as an invitee
        """
        creator = self.directory.get_user(user_id)
        unknown = [i for i in user_ids if not self.directory.user_exists(i)]
        if unknown:
            raise InvalidInput(f"Unknown user ids in DM: {unknown}")
        invitees = [self.directory.get_user(i) for i in user_ids]
        member_ids = [user_id, *user_ids]
        if len(set(member_ids)) != len(member_ids):
            raise InvalidInput("Duplicate user ids in DM")

        workspace = self.store.workspace
        dm = Dm(
            dm_id=workspace.dm_ids.take(),
            name=", ".join(sorted([creator.handle, *(u.handle for u in invitees)])),
            owner_id=user_id,
            member_ids=member_ids,
        )
        workspace.dms.append(dm)
        self.stats.dms_changed(1)
        for member_id in member_ids:
            self.stats.dm_joined(member_id)

        ref = ContainerRef.dm(dm.dm_id)
        for invitee in invitees:
            self.feed.record_added(invitee.user_id, ref, creator.handle, dm.name)
        logger.info(f"User {user_id} created DM {dm.dm_id} ({dm.name})")
        return dm.dm_id

    @transactional
    def list(self, user_id: int) -> List[DmSummary]:
        return [
            DmSummary(dm_id=d.dm_id, name=d.name)
            for d in self.store.workspace.dms
            if user_id in d.member_ids
        ]

    @transactional
    def details(self, user_id: int, dm_id: int) -> DmDetailsResponse:
        dm = self._member_dm(user_id, dm_id)
        return DmDetailsResponse(
            name=dm.name,
            members=[public_profile(self.directory.get_user(i)) for i in dm.member_ids],
        )

    @transactional
    def leave(self, user_id: int, dm_id: int) -> None:
        dm = self._member_dm(user_id, dm_id)
        dm.member_ids.remove(user_id)
        self.stats.dm_joined(user_id, -1)
        logger.info(f"User {user_id} left DM {dm_id}")

    @transactional
    def remove(self, user_id: int, dm_id: int) -> None:
        dm = self._member_dm(user_id, dm_id)
        if dm.owner_id != user_id:
            raise Forbidden(f"Only the creator can remove DM {dm_id}")

        workspace = self.store.workspace
        workspace.dms = [d for d in workspace.dms if d.dm_id != dm_id]
        self.stats.dms_changed(-1)
        self.stats.messages_changed(-len(dm.messages))
        for member_id in dm.member_ids:
            self.stats.dm_joined(member_id, -1)
        logger.info(f"User {user_id} removed DM {dm_id}")

    def messages_page(self, user_id: int, dm_id: int, start: int) -> MessagePage:
        return self.messages.get_page(user_id, ContainerRef.dm(dm_id), start)
