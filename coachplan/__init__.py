import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from marshmallow import ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError

from coachplan.config import config
from coachplan.errors import ServiceError
from coachplan.extensions import db, jwt, ma, migrate, scheduler


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)
    logging.getLogger("coachplan").setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaError)
    def handle_schema_error(error):
        return jsonify({"msg": "Invalid input", "errors": error.messages}), 400

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        app.logger.error(f"Database error: {error}")
        return jsonify({"msg": "Database error"}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"msg": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({"msg": "Method not allowed"}), 405


def register_jwt_callbacks():
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"msg": "Token has expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"msg": f"Invalid token: {error}"}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(error):
        return jsonify({"msg": error}), 401


def configure_scheduler(app):
    """Start the hourly job that abandons sessions nobody finished."""
    if not app.config.get("SCHEDULER_ENABLED") or scheduler.running:
        return

    from coachplan.services.sessions import expire_stale_sessions

    def expire_job():
        with app.app_context():
            expire_stale_sessions(app.config["SESSION_MAX_AGE_HOURS"])

    scheduler.init_app(app)
    scheduler.add_job(
        id="expire_stale_sessions",
        func=expire_job,
        trigger="interval",
        hours=1,
        replace_existing=True,
    )
    scheduler.start()
    app.logger.info("Scheduler started")


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])

    configure_logging(app)

    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app, resources={r"/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "Authorization"],
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    }})

    register_error_handlers(app)
    register_jwt_callbacks()

    from coachplan.routes.trainer import trainer_bp
    from coachplan.routes.client import client_bp

    app.register_blueprint(trainer_bp, url_prefix="/trainer")
    app.register_blueprint(client_bp, url_prefix="/client")

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    configure_scheduler(app)
    return app
