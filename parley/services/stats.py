"""
Usage Statistics

Time-stamped counters, appended to as users join and leave channels and DMs
and as messages are committed and removed.

Per user:
- channels joined, DMs joined, messages sent (removal does not undo a send)
- involvement rate: the user's three counters over the workspace's, capped at 1

Per workspace:
- channels, DMs and messages that currently exist
- utilization rate: share of users who are in at least one channel or DM
"""

import logging
from typing import List

from parley.models.api_responses import (
    ChannelsExistPoint,
    ChannelsJoinedPoint,
    DmsExistPoint,
    DmsJoinedPoint,
    MessagesExistPoint,
    MessagesSentPoint,
    UserStatsView,
    WorkspaceStatsView,
)
from parley.models.chat import StatPoint, UserStats
from parley.services.datastore import DataStore, transactional

logger = logging.getLogger(__name__)


class StatsTracker:
    def __init__(self, store: DataStore):
        self.store = store

    def _bump(self, series: List[StatPoint], delta: int) -> None:
        current = series[-1].count if series else 0
        series.append(StatPoint(count=current + delta, time_stamp=self.store.clock()))

    def _user(self, user_id: int) -> UserStats:
        return self.store.workspace.user_stats.setdefault(user_id, UserStats())

    # ── Recording ──────────────────────────────────────────

    def track_user(self, user_id: int) -> None:
        """Start a new user's counters at 0, and the workspace's with the first user."""
        stats = self._user(user_id)
        for series in (stats.channels_joined, stats.dms_joined, stats.messages_sent):
            self._bump(series, 0)

        workspace_stats = self.store.workspace.workspace_stats
        for series in (
            workspace_stats.channels_exist,
            workspace_stats.dms_exist,
            workspace_stats.messages_exist,
        ):
            if not series:
                self._bump(series, 0)

    def channel_joined(self, user_id: int, delta: int = 1) -> None:
        self._bump(self._user(user_id).channels_joined, delta)

    def dm_joined(self, user_id: int, delta: int = 1) -> None:
        self._bump(self._user(user_id).dms_joined, delta)

    def message_sent(self, user_id: int) -> None:
        self._bump(self._user(user_id).messages_sent, 1)
        self.messages_changed(1)

    def channels_changed(self, delta: int) -> None:
        self._bump(self.store.workspace.workspace_stats.channels_exist, delta)

    def dms_changed(self, delta: int) -> None:
        self._bump(self.store.workspace.workspace_stats.dms_exist, delta)

    def messages_changed(self, delta: int) -> None:
        if delta:
            self._bump(self.store.workspace.workspace_stats.messages_exist, delta)

    # ── Reading ────────────────────────────────────────────

    def _totals(self) -> int:
        workspace_stats = self.store.workspace.workspace_stats
        return sum(
            series[-1].count if series else 0
            for series in (
                workspace_stats.channels_exist,
                workspace_stats.dms_exist,
                workspace_stats.messages_exist,
            )
        )

    @transactional
    def user_stats(self, user_id: int) -> UserStatsView:
        stats = self._user(user_id)
        mine = sum(
            series[-1].count if series else 0
            for series in (stats.channels_joined, stats.dms_joined, stats.messages_sent)
        )
        total = self._totals()
        # Removed messages leave "sent" untouched, so the ratio can pass 1
        involvement = min(mine / total, 1.0) if total else 0.0

        return UserStatsView(
            channels_joined=[
                ChannelsJoinedPoint(num_channels_joined=p.count, time_stamp=p.time_stamp)
                for p in stats.channels_joined
            ],
            dms_joined=[
                DmsJoinedPoint(num_dms_joined=p.count, time_stamp=p.time_stamp)
                for p in stats.dms_joined
            ],
            messages_sent=[
                MessagesSentPoint(num_messages_sent=p.count, time_stamp=p.time_stamp)
                for p in stats.messages_sent
            ],
            involvement_rate=involvement,
        )

    @transactional
    def workspace_stats(self) -> WorkspaceStatsView:
        workspace = self.store.workspace
        active = {
            user_id
            for container in [*workspace.channels, *workspace.dms]
            for user_id in container.member_ids
        }
        utilization = len(active) / len(workspace.users) if workspace.users else 0.0

        workspace_stats = workspace.workspace_stats
        return WorkspaceStatsView(
            channels_exist=[
                ChannelsExistPoint(num_channels_exist=p.count, time_stamp=p.time_stamp)
                for p in workspace_stats.channels_exist
            ],
            dms_exist=[
                DmsExistPoint(num_dms_exist=p.count, time_stamp=p.time_stamp)
                for p in workspace_stats.dms_exist
            ],
            messages_exist=[
                MessagesExistPoint(num_messages_exist=p.count, time_stamp=p.time_stamp)
                for p in workspace_stats.messages_exist
            ],
            utilization_rate=min(utilization, 1.0),
        )
