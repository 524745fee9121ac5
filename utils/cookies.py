from flask import current_app


def _cookie_kwargs():
    return {
        "httponly": True,
        "secure": current_app.config.get("COOKIE_SECURE", True),
        "samesite": "Lax",
        "path": "/",
    }


def set_auth_cookies(resp, access_token: str, refresh_token: str):
    cfg = current_app.config
    kwargs = _cookie_kwargs()
    resp.set_cookie(
        cfg["ACCESS_COOKIE_NAME"],
        access_token,
        max_age=int(cfg["ACCESS_TOKEN_EXPIRES"].total_seconds()),
        **kwargs,
    )
    resp.set_cookie(
        cfg["REFRESH_COOKIE_NAME"],
        refresh_token,
        max_age=int(cfg["REFRESH_TOKEN_EXPIRES"].total_seconds()),
        **kwargs,
    )
    return resp


def clear_auth_cookies(resp):
    kwargs = _cookie_kwargs()
    for name in (current_app.config["ACCESS_COOKIE_NAME"], current_app.config["REFRESH_COOKIE_NAME"]):
        resp.delete_cookie(name, path=kwargs["path"], secure=kwargs["secure"], httponly=True, samesite="Lax")
    return resp
