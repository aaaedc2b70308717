import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_wtf.csrf import CSRFError, CSRFProtect
from werkzeug.exceptions import HTTPException

from config import CONFIG as GLOBAL_CONFIG
from core.errors import CsrfError, InternalError, TaskError
from core.models import db
from logging_setup import setup_logging
from routes.csrf import bp as csrf_bp
from routes.tasks import bp as tasks_bp

logger = logging.getLogger(__name__)

csrf = CSRFProtect()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def _register_error_handlers(app):
    @app.errorhandler(TaskError)
    def handle_task_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(err):
        logger.warning("rejected request: %s", err.description)
        return jsonify(CsrfError().to_dict()), CsrfError.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception("unhandled error")
        return jsonify(InternalError().to_dict()), InternalError.status_code


def create_app(config=None):
    config = config or GLOBAL_CONFIG
    app = Flask(__name__)
    app.config.update(
        SQLALCHEMY_DATABASE_URI=config.DATABASE_URL,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SECRET_KEY=config.SECRET_KEY,
        WTF_CSRF_HEADERS=[config.CSRF_HEADER],
        # the SPA runs on another origin, so the https referrer check would always fail
        WTF_CSRF_SSL_STRICT=False,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=config.PRODUCTION,
    )

    db.init_app(app)
    csrf.init_app(app)
    CORS(
        app,
        resources={r"/api/*": {"origins": [config.CLIENT_ORIGIN]}},
        supports_credentials=True,
    )

    app.register_blueprint(csrf_bp,  url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api")
    _register_error_handlers(app)

    @app.after_request
    def add_security_headers(response):
        for key, value in SECURITY_HEADERS.items():
            response.headers.setdefault(key, value)
        return response

    with app.app_context():
        db.create_all()
    return app


if __name__ == "__main__":
    setup_logging(GLOBAL_CONFIG.LOG_LEVEL)
    app = create_app()
    logger.info("Task API listening on %s:%s (client origin %s)",
                GLOBAL_CONFIG.HOST, GLOBAL_CONFIG.PORT, GLOBAL_CONFIG.CLIENT_ORIGIN)
    app.run(host=GLOBAL_CONFIG.HOST, port=GLOBAL_CONFIG.PORT, debug=not GLOBAL_CONFIG.PRODUCTION)
