"""
Flask application factory for the VetCare clinic core.
"""

import logging
import os
from typing import Any, Dict, Optional

import click
from dotenv import load_dotenv
from flask import Flask
from flask_login import LoginManager

from vetcare.core.config import (
    get_environment,
    get_limiter_storage_uri,
    get_log_level,
    get_log_to_file,
    get_rate_limit_enabled,
    get_secret_key,
    get_sentry_dsn,
    is_testing,
    log_runtime_config,
    validate_secret_key,
)

logger = logging.getLogger(__name__)


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the Flask app: logging, observability, auth, limiter and blueprints."""
    # Only load .env when DATABASE_URL is not already defined by the environment
    if not os.getenv("DATABASE_URL"):
        load_dotenv()

    env = get_environment()
    is_production = env == "production"

    app = Flask(__name__)
    app.config["SECRET_KEY"] = get_secret_key()
    app.json.sort_keys = False
    if is_testing():
        app.config["TESTING"] = True
    if config_overrides:
        app.config.update(config_overrides)

    validate_secret_key(app.config["SECRET_KEY"], env)

    # Configure structured logging (after app creation so we can register hooks)
    from vetcare.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=get_log_level(),
        enable_sql_echo=not is_production and not app.config.get("TESTING"),
        log_to_file=get_log_to_file(),
        use_json_format=is_production,
    )
    log_runtime_config()

    _init_sentry(env)
    _init_metrics(app, env)
    _init_limiter(app)
    _init_login(app)

    from vetcare.controllers import appointment_bp, clinical_bp, health_bp, purchase_bp
    from vetcare.core.api_utils import register_error_handlers

    app.register_blueprint(health_bp)
    app.register_blueprint(appointment_bp)
    app.register_blueprint(clinical_bp)
    app.register_blueprint(purchase_bp)
    register_error_handlers(app)

    _register_cli(app)

    logger.info(
        "Application created",
        extra={"context": {"environment": env, "blueprints": list(app.blueprints)}},
    )
    return app


def _init_sentry(env: str) -> None:
    sentry_dsn = get_sentry_dsn()
    if not sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=env,
        release=os.getenv("GIT_SHA", "unknown"),
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info(
        "Sentry initialized",
        extra={"context": {"environment": env, "traces_sample_rate": 0.1}},
    )


def _init_metrics(app: Flask, env: str) -> None:
    # Expose /metrics for Prometheus; MUST be initialized BEFORE the limiter
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # One registry per app so repeated create_app calls don't collide
    metrics = PrometheusMetrics(app, registry=CollectorRegistry())
    metrics.info(
        "app_info",
        "Application information",
        version=os.getenv("GIT_SHA", "unknown"),
        environment=env,
    )
    logger.info(
        "Prometheus metrics initialized",
        extra={"context": {"metrics_endpoint": "/metrics"}},
    )


def _init_limiter(app: Flask) -> None:
    from vetcare.core.limiter_config import limiter

    enabled = get_rate_limit_enabled()
    app.config["RATELIMIT_STORAGE_URI"] = get_limiter_storage_uri()
    app.config["RATELIMIT_ENABLED"] = enabled
    limiter.init_app(app)
    limiter.enabled = enabled
    if not enabled:
        logger.info(
            "Rate limiting disabled",
            extra={"context": {"test_mode": bool(app.config.get("TESTING"))}},
        )


def _init_login(app: Flask) -> None:
    from vetcare.core.api_utils import error_response
    from vetcare.db.base import Profile
    from vetcare.db.session import SessionLocal
    from vetcare.schemas.dtos import ErrorResponse

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        db = SessionLocal()
        try:
            profile = db.get(Profile, str(user_id))
            if profile is not None:
                db.expunge(profile)
            return profile
        finally:
            db.close()

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response(
            ErrorResponse(error="unauthorized", message="Authentication required"),
            401,
        )


def _register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        from vetcare.db.session import create_tables

        create_tables()
        click.echo("Database tables created.")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Insert demo clinic data (idempotent)."""
        from vetcare.db.seed import seed_demo_data
        from vetcare.db.session import create_tables

        create_tables()
        inserted = seed_demo_data()
        click.echo(f"Demo data ready ({inserted} row(s) inserted).")
