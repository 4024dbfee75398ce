import logging
import os

import click
from flask import Flask, g, jsonify, request
from pydantic import ValidationError

from extensions import db, migrate
from config import DevConfig, ProdConfig
from carease.errors import CareEaseError
from logging_setup import setup_logger


logger = logging.getLogger("app_factory")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CareEaseError)
    def handle_domain_error(e: CareEaseError):
        actor = getattr(g, "actor", None)
        logger.warning(
            f"[{e.__class__.__name__}] {e.message}",
            extra={
                "actor": getattr(actor, "id", None),
                "role": getattr(actor, "role", None),
                "path": request.path,
                "status": e.status_code,
            },
        )
        return jsonify({"msg": e.message}), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        return jsonify({"msg": "Invalid request", "errors": errors}), 400


def register_commands(app: Flask) -> None:
    @app.cli.command("seed")
    def seed_command():
        """Load the sample accounts and records into an empty database."""
        from carease.services.seed import seed_sample_data

        loaded = seed_sample_data(app.extensions["carease"]["repos"])
        print("Sample data loaded." if loaded else "Users already exist, nothing seeded.")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("name")
    @click.password_option()
    def create_admin_command(email, name, password):
        """Create an admin account. Admins cannot sign up over HTTP."""
        from carease.services.auth_service import create_account

        admin = create_account(app.extensions["carease"]["repos"], email, password, name, "admin")
        print(f"Admin {admin.email} created with id {admin.id}.")


def create_app(config_object=None, session_client=None) -> Flask:
    """
    Initialize Flask app with DB, repositories, sessions + configuration.

    `session_client` replaces the Redis connection (tests pass a dict-backed
    double with get / setex / delete).
    """
    app = Flask(__name__)

    if config_object is not None:
        app.config.from_object(config_object)
    elif os.getenv("FLASK_ENV") == "production":
        app.config.from_object(ProdConfig)
    else:
        app.config.from_object(DevConfig)

    if app.config.get("SETUP_LOGGING", True):
        setup_logger(app.config["LOG_DIR"])

    db.init_app(app)
    migrate.init_app(app, db)

    from carease.repositories import build_memory_repositories, build_sql_repositories
    from carease.services.session_store import SessionStore, connect

    if session_client is None:
        session_client = connect(
            host=app.config["REDIS_HOST"],
            port=app.config["REDIS_PORT"],
            db=app.config["REDIS_DB"],
        )

    with app.app_context():
        # Import models so SQLAlchemy registers tables.
        from carease import models  # noqa: F401
        # Ensure tables exist (useful for SQLite/dev). For production, prefer migrations.
        db.create_all()

        if app.config.get("STORAGE_BACKEND") == "memory":
            repos = build_memory_repositories()
        else:
            repos = build_sql_repositories()

        app.extensions["carease"] = {
            "repos": repos,
            "sessions": SessionStore(session_client, ttl_sec=app.config["SESSION_TTL_SEC"]),
        }

        if app.config.get("SEED_SAMPLE_DATA"):
            from carease.services.seed import seed_sample_data
            seed_sample_data(repos)

        # Register HTTP blueprints
        from carease.routes.admin import admin_bp
        from carease.routes.appointments import appointments_bp
        from carease.routes.auth import auth_bp
        from carease.routes.dashboard import dashboard_bp
        from carease.routes.notifications import notifications_bp
        from carease.routes.patients import patients_bp
        from carease.routes.visits import visits_bp

        app.register_blueprint(auth_bp)
        app.register_blueprint(dashboard_bp)
        app.register_blueprint(patients_bp)
        app.register_blueprint(visits_bp)
        app.register_blueprint(appointments_bp)
        app.register_blueprint(admin_bp)
        app.register_blueprint(notifications_bp)

    register_error_handlers(app)
    register_commands(app)
    return app
