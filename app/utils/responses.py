from flask import jsonify


def ok(data=None, message="success", status=200, **extra):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def error(message, status=400, code=None, **extra):
    payload = {
        "status": "error",
        "message": message,
        "code": code or status
    }
    payload.update(extra)
    return jsonify(payload), status


def validation_error_response(errors):
    return error(
        "Validation failed",
        status=400,
        errors=[
            {
                "field": ".".join(str(p) for p in err.get("loc", ())) or "body",
                "message": err.get("msg", "invalid value"),
            }
            for err in errors
        ],
    )

