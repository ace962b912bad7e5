"""
HTTP tests for the REST surface using FastAPI's TestClient.
"""

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from parley.main import app
from parley.services.chat_service import get_chat_service


@pytest.fixture
def client(service):
    app.dependency_overrides[get_chat_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email, first, last):
    response = client.post(
        "/auth/register",
        json={"email": email, "password": "password", "name_first": first, "name_last": last},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def owner(client):
    return register(client, "owner@example.com", "Olive", "Owner")


@pytest.fixture
def member(client, owner):
    return register(client, "member@example.com", "Max", "Member")


@pytest.fixture
def channel_id(client, owner, member):
    headers = {"token": owner["token"]}
    response = client.post("/channels/create", json={"name": "general", "is_public": True}, headers=headers)
    channel_id = response.json()["channel_id"]
    client.post(
        "/channel/invite",
        json={"channel_id": channel_id, "u_id": member["auth_user_id"]},
        headers=headers,
    )
    return channel_id


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_token_is_rejected(client):
    response = client.get("/channels/list")
    assert response.status_code == 403
    assert response.json()["error"] == "unauthenticated"


def test_invalid_input_maps_to_400(client):
    response = client.post(
        "/auth/register",
        json={"email": "nope", "password": "password", "name_first": "A", "name_last": "B"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"


def test_login_logout(client, owner):
    response = client.post("/auth/login", json={"email": "owner@example.com", "password": "password"})
    token = response.json()["token"]
    assert client.post("/auth/logout", headers={"token": token}).json() == {}
    assert client.get("/users/all", headers={"token": token}).status_code == 403


def test_profile_routes(client, owner):
    headers = {"token": owner["token"]}
    client.put("/user/profile/sethandle", json={"handle": "olive"}, headers=headers)
    response = client.get("/user/profile", params={"u_id": owner["auth_user_id"]}, headers=headers)
    assert response.json()["user"]["handle"] == "olive"


def test_send_tag_and_notifications(client, owner, member, channel_id):
    response = client.post(
        "/message/send",
        json={"channel_id": channel_id, "message": "hi @maxmember"},
        headers={"token": owner["token"]},
    )
    assert response.status_code == 200

    feed = client.get("/notifications/get", headers={"token": member["token"]}).json()
    assert feed["notifications"] == [
        {
            "channel_id": channel_id,
            "dm_id": -1,
            "notification_message": "oliveowner tagged you in general: hi @maxmember",
        },
        {
            "channel_id": channel_id,
            "dm_id": -1,
            "notification_message": "oliveowner added you to general",
        },
    ]


def test_channel_messages_page(client, owner, channel_id):
    headers = {"token": owner["token"]}
    for i in range(3):
        client.post("/message/send", json={"channel_id": channel_id, "message": f"m{i}"}, headers=headers)

    page = client.get(
        "/channel/messages", params={"channel_id": channel_id, "start": 0}, headers=headers
    ).json()
    assert [m["message"] for m in page["messages"]] == ["m2", "m1", "m0"]
    assert (page["start"], page["end"]) == (0, -1)

    response = client.get(
        "/channel/messages", params={"channel_id": channel_id, "start": 4}, headers=headers
    )
    assert response.status_code == 400


def test_non_member_is_forbidden(client, channel_id):
    outsider = register(client, "out@example.com", "Otto", "Outsider")
    response = client.post(
        "/message/send",
        json={"channel_id": channel_id, "message": "hello"},
        headers={"token": outsider["token"]},
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_dm_routes(client, owner, member):
    headers = {"token": owner["token"]}
    dm_id = client.post("/dm/create", json={"u_ids": [member["auth_user_id"]]}, headers=headers).json()["dm_id"]

    client.post("/message/senddm", json={"dm_id": dm_id, "message": "psst"}, headers=headers)
    page = client.get("/dm/messages", params={"dm_id": dm_id, "start": 0}, headers=headers).json()
    assert [m["message"] for m in page["messages"]] == ["psst"]

    details = client.get("/dm/details", params={"dm_id": dm_id}, headers=headers).json()
    assert details["name"] == "maxmember, oliveowner"

    assert client.delete("/dm/remove", params={"dm_id": dm_id}, headers=headers).status_code == 200
    assert client.get("/dm/list", headers=headers).json() == {"dms": []}


def test_edit_remove_react_pin(client, owner, member, channel_id):
    headers = {"token": owner["token"]}
    message_id = client.post(
        "/message/send", json={"channel_id": channel_id, "message": "draft"}, headers=headers
    ).json()["message_id"]

    client.put("/message/edit", json={"message_id": message_id, "message": "final"}, headers=headers)
    client.post("/message/react", json={"message_id": message_id, "react_id": 1}, headers={"token": member["token"]})
    client.post("/message/pin", json={"message_id": message_id}, headers=headers)

    message = client.get(
        "/channel/messages", params={"channel_id": channel_id, "start": 0}, headers=headers
    ).json()["messages"][0]
    assert message["message"] == "final"
    assert message["is_pinned"]
    assert message["reacts"] == [
        {"react_id": 1, "user_ids": [member["auth_user_id"]], "is_this_user_reacted": False}
    ]

    client.delete("/message/remove", params={"message_id": message_id}, headers=headers)
    search = client.get("/search", params={"query_str": "final"}, headers=headers).json()
    assert search["messages"] == []


def test_share_needs_exactly_one_target(client, owner, channel_id):
    headers = {"token": owner["token"]}
    message_id = client.post(
        "/message/send", json={"channel_id": channel_id, "message": "share me"}, headers=headers
    ).json()["message_id"]

    response = client.post(
        "/message/share",
        json={"og_message_id": message_id, "message": "", "channel_id": -1, "dm_id": -1},
        headers=headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/message/share",
        json={"og_message_id": message_id, "message": "again", "channel_id": channel_id, "dm_id": -1},
        headers=headers,
    )
    assert "shared_message_id" in response.json()


def test_sendlater_and_standup(client, clock, owner, channel_id):
    headers = {"token": owner["token"]}
    client.post(
        "/message/sendlater",
        json={"channel_id": channel_id, "message": "later", "time_sent": clock.now + 5},
        headers=headers,
    )
    started = client.post("/standup/start", json={"channel_id": channel_id, "length": 10}, headers=headers).json()
    assert started["time_finish"] == clock.now + 10

    client.post("/standup/send", json={"channel_id": channel_id, "message": "done"}, headers=headers)
    active = client.get("/standup/active", params={"channel_id": channel_id}, headers=headers).json()
    assert active["is_active"]

    clock.advance(10)
    page = client.get(
        "/channel/messages", params={"channel_id": channel_id, "start": 0}, headers=headers
    ).json()
    assert [m["message"] for m in page["messages"]] == ["[oliveowner]: done", "later"]


def test_clear(client, owner):
    assert client.delete("/clear").status_code == 200
    assert client.get("/users/all", headers={"token": owner["token"]}).status_code == 403


def test_stats_routes(client, owner, member, channel_id):
    headers = {"token": member["token"]}
    client.post("/message/send", json={"channel_id": channel_id, "message": "hi"}, headers=headers)

    user_stats = client.get("/user/stats", headers=headers).json()["user_stats"]
    assert [p["num_channels_joined"] for p in user_stats["channels_joined"]] == [0, 1]
    assert [p["num_messages_sent"] for p in user_stats["messages_sent"]] == [0, 1]
    assert [p["num_dms_joined"] for p in user_stats["dms_joined"]] == [0]
    assert user_stats["involvement_rate"] == 1.0

    workspace_stats = client.get("/users/stats", headers=headers).json()["workspace_stats"]
    assert [p["num_channels_exist"] for p in workspace_stats["channels_exist"]] == [0, 1]
    assert [p["num_messages_exist"] for p in workspace_stats["messages_exist"]] == [0, 1]
    assert workspace_stats["utilization_rate"] == 1.0


def test_stats_need_a_token(client):
    assert client.get("/user/stats").status_code == 403
    assert client.get("/users/stats").status_code == 403


def test_chat_handlers_run_in_threadpool():
    """Service calls block on the store lock, so handlers must not run on the event loop."""
    routes = [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path not in ("/", "/health")
    ]
    assert routes
    assert [r.path for r in routes if inspect.iscoroutinefunction(r.endpoint)] == []
