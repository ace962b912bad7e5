"""
Tests for DataStore transactions, reapers and JSON persistence.
"""

import pytest

from parley.config import Settings
from parley.errors import InvalidInput
from parley.models.chat import ContainerRef
from parley.services.chat_service import ChatService
from parley.services.datastore import DataStore
from parley.services.scheduler import Scheduler


def test_transaction_rolls_back_on_error(settings):
    store = DataStore(settings)
    with pytest.raises(InvalidInput):
        with store.transaction() as workspace:
            workspace.user_ids.take()
            raise InvalidInput("abort")
    assert store.workspace.user_ids.next_value == 0


def test_nested_transactions_join(settings):
    store = DataStore(settings)
    with store.transaction() as outer:
        with store.transaction() as inner:
            assert inner is outer
            inner.channel_ids.take()
    assert store.workspace.channel_ids.next_value == 1


def test_reapers_run_before_each_transaction(settings, clock):
    store = DataStore(settings, clock)
    seen = []
    store.add_reaper(lambda now: seen.append(now) or False)

    with store.transaction():
        pass
    store.wake()
    assert seen == [clock.now, clock.now]


def test_reset_clears_everything(service, alice, general):
    service.clear()
    assert service.store.workspace.users == []
    assert service.store.workspace.channels == []


def test_persistence_round_trip(tmp_path, clock):
    settings = Settings(persist=True, data_file=str(tmp_path / "workspace.json"), password_hash_rounds=4)
    first = ChatService(settings, clock, Scheduler(clock, enabled=False))
    owner = first.auth.register("owner@example.com", "password", "Owner", "One").auth_user_id
    channel_id = first.channels.create(owner, "general", True)
    first.messages.send(owner, ContainerRef.channel(channel_id), "persist me")
    first.messages.send_later(owner, ContainerRef.channel(channel_id), "later", clock.now + 5)

    second = ChatService(settings, clock, Scheduler(clock, enabled=False))
    second.store.load()
    page = second.messages.get_page(owner, ContainerRef.channel(channel_id), 0)
    assert [m.message for m in page.messages] == ["persist me"]
    assert len(second.store.workspace.scheduled) == 1

    # Id sequences survive, so new ids never collide
    new_id = second.messages.send(owner, ContainerRef.channel(channel_id), "after restart")
    assert new_id == 2

    clock.advance(5)
    page = second.messages.get_page(owner, ContainerRef.channel(channel_id), 0)
    assert [m.message for m in page.messages] == ["later", "after restart", "persist me"]


def test_failed_operation_is_not_saved(tmp_path, clock):
    path = tmp_path / "workspace.json"
    settings = Settings(persist=True, data_file=str(path), password_hash_rounds=4)
    service = ChatService(settings, clock, Scheduler(clock, enabled=False))
    service.auth.register("owner@example.com", "password", "Owner", "One")
    saved = path.read_text(encoding="utf-8")

    with pytest.raises(InvalidInput):
        service.auth.register("bad", "password", "Owner", "Two")
    assert path.read_text(encoding="utf-8") == saved


def test_load_without_file_keeps_empty_workspace(tmp_path):
    settings = Settings(persist=True, data_file=str(tmp_path / "missing.json"), password_hash_rounds=4)
    store = DataStore(settings)
    store.load()
    assert store.workspace.users == []
