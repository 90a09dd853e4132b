"""
Success envelope helpers:
    {"success": true, "data": ..., "metadata": ...}
Errors use the same envelope with success false (see api/errors.py).
"""
from flask import jsonify


def success(data=None, status: int = 200, metadata=None):
    payload = {"success": True, "data": data}
    if metadata is not None:
        payload["metadata"] = metadata
    return jsonify(payload), status


def paginated(result, schema):
    """Serialize a pagination-engine result; the pagination fields become the metadata."""
    return success(schema.dump(result["data"]), metadata=result["pagination"])


def created(resource, message: str):
    return success({"resource": resource, "message": message}, status=201)


def updated(resource, message: str):
    return success({"resource": resource, "message": message})


def deleted(message: str):
    return success({"message": message})


def error_payload(code: str, message: str, details=None):
    return {
        "success": False,
        "data": None,
        "metadata": None,
        "error": {"code": code, "message": message, "details": details},
    }
