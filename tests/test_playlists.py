from conftest import random_id


def _create(client, headers, name="Favourites"):
    resp = client.post("/api/v1/playlist/", json={"name": name, "description": "best of"}, headers=headers)
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_create_and_fetch_playlist(client, make_user):
    user, headers, _ = make_user()
    playlist = _create(client, headers)
    assert playlist["owner"] == user["id"]
    assert playlist["videos"] == []
    assert playlist["totalVideos"] == 0

    resp = client.get(f"/api/v1/playlist/user/{user['id']}", headers=headers)
    assert [p["name"] for p in resp.get_json()["data"]] == ["Favourites"]

    resp = client.get(f"/api/v1/playlist/{playlist['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "Favourites"


def test_add_and_remove_videos(client, make_user, make_video):
    _, headers, _ = make_user()
    first = make_video(headers, title="one")
    second = make_video(headers, title="two")
    playlist = _create(client, headers)

    resp = client.patch(f"/api/v1/playlist/add/{second['id']}/{playlist['id']}", headers=headers)
    assert resp.status_code == 200
    client.patch(f"/api/v1/playlist/add/{first['id']}/{playlist['id']}", headers=headers)

    data = client.get(f"/api/v1/playlist/{playlist['id']}", headers=headers).get_json()["data"]
    assert [v["title"] for v in data["videos"]] == ["two", "one"]
    assert data["totalVideos"] == 2

    resp = client.patch(f"/api/v1/playlist/add/{first['id']}/{playlist['id']}", headers=headers)
    assert resp.status_code == 409

    resp = client.patch(f"/api/v1/playlist/remove/{second['id']}/{playlist['id']}", headers=headers)
    assert resp.status_code == 200
    assert [v["title"] for v in resp.get_json()["data"]["videos"]] == ["one"]

    resp = client.patch(f"/api/v1/playlist/remove/{second['id']}/{playlist['id']}", headers=headers)
    assert resp.status_code == 404

    resp = client.patch(f"/api/v1/playlist/add/{random_id()}/{playlist['id']}", headers=headers)
    assert resp.status_code == 404


def test_only_owner_can_modify(client, make_user, make_video):
    _, headers, _ = make_user()
    _, other_headers, _ = make_user("mallory")
    video = make_video(headers)
    playlist = _create(client, headers)

    assert client.patch(f"/api/v1/playlist/add/{video['id']}/{playlist['id']}", headers=other_headers).status_code == 403
    assert client.patch(f"/api/v1/playlist/{playlist['id']}", json={"name": "x"}, headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/playlist/{playlist['id']}", headers=other_headers).status_code == 403


def test_update_and_delete_playlist(client, make_user):
    _, headers, _ = make_user()
    playlist = _create(client, headers)

    assert client.patch(f"/api/v1/playlist/{playlist['id']}", json={}, headers=headers).status_code == 400
    resp = client.patch(f"/api/v1/playlist/{playlist['id']}", json={"name": "Renamed"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "Renamed"
    assert resp.get_json()["data"]["description"] == "best of"

    assert client.delete(f"/api/v1/playlist/{playlist['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/playlist/{playlist['id']}", headers=headers).status_code == 404


def _unpublish(client, headers, video):
    resp = client.patch(f"/api/v1/videos/toggle/publish/{video['id']}", headers=headers)
    assert resp.get_json()["data"]["isPublished"] is False


def test_cannot_add_someone_elses_unpublished_video(client, make_user, make_video):
    _, bob_headers, _ = make_user("bob")
    _, alice_headers, _ = make_user("alice")
    secret = make_video(bob_headers, title="Secret")
    _unpublish(client, bob_headers, secret)
    playlist = _create(client, alice_headers)

    resp = client.patch(f"/api/v1/playlist/add/{secret['id']}/{playlist['id']}", headers=alice_headers)
    assert resp.status_code == 404
    data = client.get(f"/api/v1/playlist/{playlist['id']}", headers=alice_headers).get_json()["data"]
    assert data["videos"] == []


def test_playlist_hides_videos_unpublished_after_adding(client, make_user, make_video):
    bob, bob_headers, _ = make_user("bob")
    _, alice_headers, _ = make_user("alice")
    video = make_video(bob_headers, title="Soon private")
    playlist = _create(client, alice_headers)
    client.patch(f"/api/v1/playlist/add/{video['id']}/{playlist['id']}", headers=alice_headers)
    _unpublish(client, bob_headers, video)

    data = client.get(f"/api/v1/playlist/{playlist['id']}", headers=alice_headers).get_json()["data"]
    assert data["videos"] == []
    assert data["totalVideos"] == 0

    # the owner of the video still sees it
    data = client.get(f"/api/v1/playlist/{playlist['id']}", headers=bob_headers).get_json()["data"]
    assert [v["title"] for v in data["videos"]] == ["Soon private"]

    listing = client.get(f"/api/v1/playlist/user/{bob['id']}", headers=alice_headers)
    assert listing.status_code == 200


def test_owner_can_add_own_unpublished_video(client, make_user, make_video):
    _, headers, _ = make_user()
    draft = make_video(headers, title="Draft")
    _unpublish(client, headers, draft)
    playlist = _create(client, headers)

    resp = client.patch(f"/api/v1/playlist/add/{draft['id']}/{playlist['id']}", headers=headers)
    assert resp.status_code == 200
    assert [v["title"] for v in resp.get_json()["data"]["videos"]] == ["Draft"]
