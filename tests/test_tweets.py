from conftest import random_id


def test_tweet_lifecycle(client, make_user):
    user, headers, _ = make_user()
    _, other_headers, _ = make_user("bob")

    resp = client.post("/api/v1/tweets/", json={"content": "hello world"}, headers=headers)
    assert resp.status_code == 201
    tweet = resp.get_json()["data"]
    assert tweet["owner"]["id"] == user["id"]

    client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=other_headers)
    resp = client.get(f"/api/v1/tweets/user/{user['id']}", headers=other_headers)
    assert resp.status_code == 200
    items = resp.get_json()["data"]
    assert [t["content"] for t in items] == ["hello world"]
    assert items[0]["totalLikes"] == 1

    assert client.patch(f"/api/v1/tweets/{tweet['id']}", json={"content": "x"}, headers=other_headers).status_code == 403
    resp = client.patch(f"/api/v1/tweets/{tweet['id']}", json={"content": "edited"}, headers=headers)
    assert resp.get_json()["data"]["content"] == "edited"

    assert client.delete(f"/api/v1/tweets/{tweet['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/tweets/{tweet['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/tweets/user/{user['id']}", headers=headers).get_json()["data"] == []


def test_tweet_validation(client, make_user):
    _, headers, _ = make_user()
    assert client.post("/api/v1/tweets/", json={"content": ""}, headers=headers).status_code == 400
    assert client.post("/api/v1/tweets/", json={"content": "x" * 281}, headers=headers).status_code == 400
    assert client.get(f"/api/v1/tweets/user/{random_id()}", headers=headers).status_code == 404
    assert client.patch(f"/api/v1/tweets/{random_id()}", json={"content": "x"}, headers=headers).status_code == 404
