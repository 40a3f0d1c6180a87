"""Flask glue shared by the feature controllers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from .pagination import Page

logger = logging.getLogger(__name__)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_params() -> Dict[str, str]:
    return request.args.to_dict()


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra: Any):
    payload: Dict[str, Any] = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def paged(page: Page, **extra: Any):
    return ok(page.items, meta=page.meta(), **extra)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        if err.status_code >= 500:
            logger.error("domain error: %s", err.message)
        payload: Dict[str, Any] = {"success": False, "message": err.message}
        if err.errors:
            payload["errors"] = err.errors
        return jsonify(payload), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"success": False, "message": err.description or err.name}), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500
