from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Une erreur est survenue, veuillez réessayer."


def ok(message: str = "", status: int = 200, **payload):
    return jsonify({"success": True, "message": message, **payload}), status


def fail(message: str, status: int, **payload):
    return jsonify({"success": False, "message": message, **payload}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def handle_domain_errors(view):
    """Map domain exceptions of a JSON view onto HTTP responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404)
        except ValidationError as e:
            return fail(str(e), 400)
        except StoreError:
            logger.exception("Store failure in %s", request.path)
            return fail(GENERIC_ERROR_MESSAGE, 503)

    return wrapper
