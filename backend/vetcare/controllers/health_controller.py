"""
Health controller - liveness endpoint for monitoring.
"""

import logging

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vetcare.core.api_utils import api_response
from vetcare.db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """
    Report whether the app is up and the database answers.

    Status codes:
        200: database reachable
        503: database unreachable

    Note:
        - No authentication required (monitoring endpoint)
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(
            "Health check: database unreachable",
            extra={"context": {"endpoint": "/health", "error": str(e)}},
        )
        return api_response(False, "degraded", {"database": "unavailable"}, 503)
    finally:
        db.close()
    return api_response(True, "healthy", {"database": "ok"})
