"""Application factory."""

import json
import os
import uuid

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from config import Config
from models import db
from routes.admin_users import admin_users_bp
from routes.announcements import announcements_bp
from routes.auth import auth_bp
from routes.buyer_requests import buyer_requests_bp
from routes.messages import messages_bp
from routes.products import products_bp
from routes.ratings import ratings_bp
from utils.access_control import AccessControl

access_control = AccessControl()


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )

    # Errors and request IDs first, so every later hook runs with a request ID.
    _register_error_handlers(app)
    access_control.init_app(app)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(products_bp, url_prefix="/products")
    app.register_blueprint(buyer_requests_bp, url_prefix="/requests")
    app.register_blueprint(messages_bp, url_prefix="/messages")
    app.register_blueprint(ratings_bp, url_prefix="/ratings")
    app.register_blueprint(announcements_bp, url_prefix="/announcements")
    app.register_blueprint(admin_users_bp, url_prefix="/admin/users")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    return app


def _register_error_handlers(app: Flask) -> None:
    """Register JSON envelope error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        if isinstance(error, MethodNotAllowed):
            message = "Method not allowed"
        else:
            message = error.description or getattr(error, "name", "Error")
        payload = {"success": False, "message": message}
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        db.session.rollback()
        response = jsonify({"success": False, "message": "An unexpected error occurred."})
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
