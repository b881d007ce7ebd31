from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthenticationError, DomainError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime
from .validators import optional_int

logger = logging.getLogger(__name__)


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid Authorization header")
    token = header.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Missing or invalid Authorization header")
    return token


def auth_required(resolver):
    """Decorator factory: resolve the bearer token to an Identity on ``g.identity``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = resolver.resolve(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_identity():
    return g.get("identity")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data(cache=True):
            raise ValidationError("Request body must be valid JSON")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str) -> Optional[int]:
    return optional_int(request.args.get(name), name)


def query_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def body_date(body: dict, name: str) -> Optional[date]:
    value = body.get(name)
    return parse_iso_date(value) if value else None


def body_timestamp(body: dict, name: str) -> Optional[datetime]:
    value = body.get(name)
    return parse_iso_datetime(value) if value else None


def error_payload(err: DomainError) -> dict:
    payload: dict = {"error": err.code, "message": err.message}
    if err.details:
        payload.update(err.details)
    if err.record is not None:
        payload["record"] = err.record.to_dict() if hasattr(err.record, "to_dict") else err.record
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        if err.status_code in (403, 409):
            logger.warning("%s %s -> %s: %s", request.method, request.path, err.status_code, err.message)
        return jsonify(error_payload(err)), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        code = (err.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(err) if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"error": "internal_error", "message": message}), 500
