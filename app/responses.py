"""JSON response envelope shared by every API blueprint.

Every response body has the shape ``{"success": bool, "message": str}``
plus ``data`` on success or ``errors`` on validation failure.
"""

from flask import jsonify


def ok(message, data=None, status=200):
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message, status=400, errors=None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return jsonify(body), status


def positive_int(data, key, errors):
    """Read ``data[key]`` as a positive int, appending to ``errors`` if not.

    Accepts JSON integers and strings of digits. Floats, bools and
    anything else are rejected rather than truncated.
    """
    value = data.get(key)
    if value is None or value == "":
        errors.append(f"{key} is required.")
        return None
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        errors.append(f"{key} must be a positive integer.")
        return None
    return value


def optional_str(data, key, errors, default=""):
    """Read ``data[key]`` as a string, or ``default`` when absent or null."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        errors.append(f"{key} must be a string.")
        return None
    return value


def required_str(data, key, errors):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        errors.append(f"{key} must be a string.")
        return None
    if not (value or "").strip():
        errors.append(f"{key} is required.")
        return None
    return value
