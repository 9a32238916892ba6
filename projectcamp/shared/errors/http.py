# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, has_request_context, jsonify, request
from werkzeug.exceptions import HTTPException

from projectcamp.shared.logging import logger

from .base import AppError, ErrorKind, internal_error_payload


def _where() -> str:
    if has_request_context():
        return f"{request.method} {request.path}"
    return "<no request>"


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    if error.kind is ErrorKind.STORAGE_UNAVAILABLE:
        logger.error(f"Storage unavailable on {_where()}: {dict(error.context or {})}")
    else:
        logger.warning(
            f"Handled application error {error.kind} on {_where()} "
            f"context={dict(error.context or {})}"
        )
    return jsonify(error.to_dict()), error.status


def respond_to_error(exc: BaseException, *, debug: bool = False) -> tuple[Response, int]:
    """Turn any failure into the JSON error envelope.

    ``debug`` adds the traceback to the log entry, never to the response.
    """
    if isinstance(exc, AppError):
        return handle_app_error(exc)

    if isinstance(exc, HTTPException):
        status = exc.code or int(HTTPStatus.INTERNAL_SERVER_ERROR)
        payload = {
            "statusCode": status,
            "data": None,
            "message": exc.description or exc.name,
            "errors": [],
            "success": False,
        }
        return jsonify(payload), status

    if debug:
        logger.opt(exception=exc).error(f"Unhandled exception on {_where()}")
    else:
        logger.error(f"Error: {type(exc).__name__} on {_where()}")
    return jsonify(internal_error_payload()), int(HTTPStatus.INTERNAL_SERVER_ERROR)


def register_error_handler(app: Flask, *, debug: bool = False) -> None:
    @app.errorhandler(Exception)
    def _handle_any(exc: Exception):
        return respond_to_error(exc, debug=debug)
