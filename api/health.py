from flask import Blueprint

from api.responses import api_response

bp = Blueprint("healthcheck", __name__)


@bp.get("/healthcheck")
def healthcheck():
    """
    Health check
    ---
    tags:
      - Healthcheck
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                status:
                  type: string
                  example: ok
    """
    return api_response({"status": "ok"}, "OK")
