from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from utils.security import verify_token


def test_healthcheck(client):
    resp = client.get("/api/v1/healthcheck")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body == {"statusCode": 200, "data": {"status": "ok"}, "message": "OK", "success": True}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["error"] == "NOT_FOUND"
    assert body["success"] is False
    assert body["data"] is None


def test_swagger_spec_is_served(client):
    resp = client.get("/swagger.json")
    assert resp.status_code == 200
    assert "/api/v1/users/login" in resp.get_json()["paths"]


def test_get_config_by_name():
    assert get_config("prod") is ProductionConfig
    assert get_config("testing") is TestingConfig
    assert get_config("dev") is DevelopmentConfig
    assert TestingConfig.COOKIE_SECURE is False


def test_token_secrets_are_long_enough_for_hs256():
    assert len(TestingConfig.ACCESS_TOKEN_SECRET.encode()) >= 32
    assert len(TestingConfig.REFRESH_TOKEN_SECRET.encode()) >= 32


def test_token_round_trip_emits_no_key_length_warning(app, make_user, recwarn):
    _, headers, _ = make_user()
    with app.app_context():
        claims = verify_token(
            headers["Authorization"].split(" ", 1)[1],
            app.config["ACCESS_TOKEN_SECRET"],
            expected_type="access",
        )
    assert claims["username"] == "alice"
    assert not [w for w in recwarn if "InsecureKeyLength" in type(w.message).__name__]
