"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from typing import Any, Optional

from flask import Flask, jsonify

from vetcare.core.exceptions import VetCareError
from vetcare.schemas.dtos import ErrorResponse

logger = logging.getLogger(__name__)


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def error_response(error: ErrorResponse, status_code: int) -> tuple:
    return jsonify(error.to_dict()), status_code


def register_error_handlers(app: Flask) -> None:
    """Translate tagged domain errors into JSON error bodies."""

    @app.errorhandler(VetCareError)
    def handle_vetcare_error(exc: VetCareError):
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            "Request failed",
            extra={
                "context": {
                    "error": exc.code,
                    "status": exc.http_status,
                    "details": exc.details,
                }
            },
        )
        return error_response(ErrorResponse.from_exception(exc), exc.http_status)

    @app.errorhandler(404)
    def handle_not_found(_exc):
        return error_response(
            ErrorResponse(error="not_found", message="Resource not found"), 404
        )

    @app.errorhandler(500)
    def handle_server_error(_exc):
        return error_response(ErrorResponse.server_error(), 500)

    @app.errorhandler(429)
    def handle_rate_limited(exc):
        return error_response(
            ErrorResponse(
                error="rate_limited",
                message="Too many requests",
                details={"limit": str(getattr(exc, "description", ""))},
            ),
            429,
        )
