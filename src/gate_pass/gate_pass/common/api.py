from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    DuplicateRequestError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first: DuplicateRequestError is a ConflictError but answers 400.
_STATUS_BY_ERROR = (
    (DuplicateRequestError, 400),
    (ValidationError, 400),
    (InvalidStateError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid input data")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"message": str(e)}), status_for(e)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e: RequestEntityTooLarge):
        return jsonify({"message": "File size exceeds upload limit"}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
