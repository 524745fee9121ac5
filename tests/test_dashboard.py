def test_channel_stats(client, make_user, make_video):
    _, headers, _ = make_user()
    _, fan_headers, _ = make_user("fan")
    me = client.get("/api/v1/users/current-user", headers=headers).get_json()["data"]

    popular = make_video(headers, title="Popular")
    quiet = make_video(headers, title="Quiet")
    client.get(f"/api/v1/videos/{popular['id']}", headers=fan_headers)
    client.get(f"/api/v1/videos/{popular['id']}", headers=fan_headers)
    client.get(f"/api/v1/videos/{quiet['id']}", headers=fan_headers)
    client.post(f"/api/v1/likes/toggle/v/{popular['id']}", headers=fan_headers)
    client.post(f"/api/v1/comments/{quiet['id']}", json={"content": "meh"}, headers=fan_headers)
    client.post(f"/api/v1/subscriptions/c/{me['id']}", headers=fan_headers)

    resp = client.get("/api/v1/dashboard/stats", headers=headers)
    assert resp.status_code == 200
    stats = resp.get_json()["data"]
    assert stats["totalSubscribers"] == 1
    assert stats["totalVideos"] == 2
    assert stats["totalViews"] == 3
    assert stats["totalLikes"] == 1
    assert stats["totalComments"] == 1
    assert stats["highestViewedVideo"]["id"] == popular["id"]


def test_channel_stats_for_empty_channel(client, make_user):
    _, headers, _ = make_user()
    stats = client.get("/api/v1/dashboard/stats", headers=headers).get_json()["data"]
    assert stats["totalVideos"] == 0
    assert stats["totalViews"] == 0
    assert stats["highestViewedVideo"] is None


def test_channel_videos_include_unpublished(client, make_user, make_video):
    _, headers, _ = make_user()
    video = make_video(headers)
    client.patch(f"/api/v1/videos/toggle/publish/{video['id']}", headers=headers)
    client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)
    client.post(f"/api/v1/comments/{video['id']}", json={"content": "a"}, headers=headers)
    client.post(f"/api/v1/comments/{video['id']}", json={"content": "b"}, headers=headers)

    data = client.get("/api/v1/dashboard/videos", headers=headers).get_json()["data"]
    assert data["totalVideos"] == 1
    item = data["videos"][0]
    assert item["isPublished"] is False
    assert item["totalLikes"] == 1
    assert item["totalComments"] == 2
