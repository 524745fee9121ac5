from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    """Wrap a payload in the uniform success envelope."""
    return jsonify(
        {
            "statusCode": status,
            "data": data,
            "message": message,
            "success": status < 400,
        }
    ), status
