from conftest import random_id


def test_toggle_subscription(client, make_user):
    bob, _, _ = make_user("bob")
    alice, headers, _ = make_user("alice")

    resp = client.post(f"/api/v1/subscriptions/c/{bob['id']}", headers=headers)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["isSubscribed"] is True
    assert data["channel"] == bob["id"]
    assert data["subscriber"] == alice["id"]

    subs = client.get(f"/api/v1/subscriptions/c/{bob['id']}", headers=headers).get_json()["data"]
    assert subs["totalSubscribers"] == 1
    assert subs["subscribers"][0]["username"] == "alice"

    channels = client.get(f"/api/v1/subscriptions/u/{alice['id']}", headers=headers).get_json()["data"]
    assert [c["username"] for c in channels["channels"]] == ["bob"]

    resp = client.post(f"/api/v1/subscriptions/c/{bob['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["isSubscribed"] is False
    subs = client.get(f"/api/v1/subscriptions/c/{bob['id']}", headers=headers).get_json()["data"]
    assert subs["totalSubscribers"] == 0


def test_cannot_subscribe_to_self(client, make_user):
    alice, headers, _ = make_user()
    resp = client.post(f"/api/v1/subscriptions/c/{alice['id']}", headers=headers)
    assert resp.status_code == 400


def test_unknown_channel_and_subscriber(client, make_user):
    _, headers, _ = make_user()
    assert client.post(f"/api/v1/subscriptions/c/{random_id()}", headers=headers).status_code == 404
    assert client.get(f"/api/v1/subscriptions/c/{random_id()}", headers=headers).status_code == 404
    assert client.get(f"/api/v1/subscriptions/u/{random_id()}", headers=headers).status_code == 404
    assert client.get("/api/v1/subscriptions/u/nope", headers=headers).status_code == 400
