"""
Tests for Scheduler timers, including a standup closed by a real timer.
"""

import threading
import time

from parley.models.chat import ContainerRef
from parley.services.chat_service import ChatService
from parley.services.scheduler import Scheduler


def wait_until(condition, timeout: float = 2.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


def test_call_at_fires_callback():
    fired = threading.Event()
    scheduler = Scheduler()
    scheduler.call_at(time.time() + 0.02, fired.set)
    assert fired.wait(2.0)


def test_past_time_fires_immediately():
    fired = threading.Event()
    Scheduler().call_at(time.time() - 10, fired.set)
    assert fired.wait(2.0)


def test_cancel_all_stops_pending_timers():
    fired = threading.Event()
    scheduler = Scheduler()
    scheduler.call_at(time.time() + 0.2, fired.set)
    scheduler.cancel_all()
    assert not fired.wait(0.4)


def test_disabled_scheduler_never_fires():
    fired = threading.Event()
    scheduler = Scheduler(enabled=False)
    scheduler.call_at(time.time(), fired.set)
    assert not fired.wait(0.1)


def test_standup_closed_by_timer_commits_once(settings):
    service = ChatService(settings, time.time, Scheduler(time.time))
    try:
        owner = service.auth.register("owner@example.com", "password", "Olive", "Owner").auth_user_id
        channel_id = service.channels.create(owner, "general", True)
        service.standups.start(owner, channel_id, 0.2)
        service.standups.send(owner, channel_id, "shipped the release")

        # Read the workspace directly so no transaction runs the reapers
        assert wait_until(lambda: not service.store.workspace.channels[0].standup.active)

        channel = service.store.workspace.channels[0]
        assert [m.message for m in channel.messages] == ["[oliveowner]: shipped the release"]

        service.store.wake()
        assert len(service.store.workspace.channels[0].messages) == 1

        page = service.messages.get_page(owner, ContainerRef.channel(channel_id), 0)
        assert len(page.messages) == 1
    finally:
        service.clear()
