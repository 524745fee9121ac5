from conftest import random_id


def test_toggle_video_like(client, make_user, make_video):
    user, headers, _ = make_user()
    video = make_video(headers)

    resp = client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["isLiked"] is True
    assert data["videoId"] == video["id"]
    assert data["likedBy"] == user["id"]
    assert data["commentId"] is None

    liked = client.get("/api/v1/likes/videos", headers=headers).get_json()["data"]
    assert [v["id"] for v in liked["likedVideos"]] == [video["id"]]
    assert liked["likedVideos"][0]["owner"]["username"] == "alice"

    resp = client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["isLiked"] is False
    assert client.get("/api/v1/likes/videos", headers=headers).get_json()["data"]["totalVideos"] == 0


def test_toggle_comment_and_tweet_likes(client, make_user, make_video):
    _, headers, _ = make_user()
    video = make_video(headers)
    comment = client.post(f"/api/v1/comments/{video['id']}", json={"content": "x"}, headers=headers).get_json()["data"]
    tweet = client.post("/api/v1/tweets/", json={"content": "hello"}, headers=headers).get_json()["data"]

    assert client.post(f"/api/v1/likes/toggle/c/{comment['id']}", headers=headers).status_code == 201
    assert client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=headers).status_code == 201
    assert client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=headers).status_code == 200

    # comment and tweet likes are not video likes
    assert client.get("/api/v1/likes/videos", headers=headers).get_json()["data"]["likedVideos"] == []


def test_like_unknown_or_invalid_target(client, make_user):
    _, headers, _ = make_user()
    assert client.post(f"/api/v1/likes/toggle/v/{random_id()}", headers=headers).status_code == 404
    assert client.post(f"/api/v1/likes/toggle/c/{random_id()}", headers=headers).status_code == 404
    resp = client.post("/api/v1/likes/toggle/t/xyz", headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid Tweet ID"


def test_cannot_like_someone_elses_unpublished_video(client, make_user, make_video):
    _, bob_headers, _ = make_user("bob")
    _, alice_headers, _ = make_user("alice")
    video = make_video(bob_headers)
    client.patch(f"/api/v1/videos/toggle/publish/{video['id']}", headers=bob_headers)

    assert client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=alice_headers).status_code == 404
    assert client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=bob_headers).status_code == 201


def test_liked_videos_hide_videos_unpublished_later(client, make_user, make_video):
    _, bob_headers, _ = make_user("bob")
    _, alice_headers, _ = make_user("alice")
    video = make_video(bob_headers)
    client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=alice_headers)
    client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=bob_headers)
    client.patch(f"/api/v1/videos/toggle/publish/{video['id']}", headers=bob_headers)

    liked = client.get("/api/v1/likes/videos", headers=alice_headers).get_json()["data"]
    assert liked["likedVideos"] == []
    liked = client.get("/api/v1/likes/videos", headers=bob_headers).get_json()["data"]
    assert [v["id"] for v in liked["likedVideos"]] == [video["id"]]
