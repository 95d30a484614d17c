import logging
import os
from typing import Type

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from database import db
from routes.admin import admin_bp
from routes.api import api_bp
from seed import seed_database


def create_app(config_object: Type[Config] = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    db.init_app(app)

    with app.app_context():
        db.create_all()
        seed_database()

    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)

    _register_error_handlers(app)
    _register_cors(app)

    return app


def _configure_logging(app: Flask) -> None:
    app.logger.setLevel(logging.INFO)
    logging.getLogger("security").setLevel(logging.INFO)
    if app.config.get("TESTING"):
        return

    log_dir = app.config.get("LOG_DIR") or os.path.join(app.root_path, "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "server.log")
    security_log_path = os.path.join(log_dir, "security.log")

    handler = logging.FileHandler(log_path)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)

    app.logger.addHandler(handler)
    for name in ("ai_engine", "routes", "seed", "sqlalchemy.engine"):
        logging.getLogger(name).addHandler(handler)
    for name in ("ai_engine", "routes", "seed"):
        logging.getLogger(name).setLevel(logging.INFO)

    security_handler = logging.FileHandler(security_log_path)
    security_handler.setFormatter(formatter)
    security_handler.setLevel(logging.INFO)
    logging.getLogger("security").addHandler(security_handler)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def json_error(exc: HTTPException):
        response = jsonify({"error": exc.description})
        response.status_code = exc.code or 500
        valid_methods = getattr(exc, "valid_methods", None)
        if valid_methods:
            response.headers["Allow"] = ", ".join(valid_methods)
        return response


def _register_cors(app: Flask) -> None:
    @app.after_request
    def add_cors_headers(response):
        if request.path.startswith("/api/"):
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        return response


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3001)), debug=False, use_reloader=False)
