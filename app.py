import os
import logging
from datetime import datetime
from uuid import uuid4

from flask import Flask, request, jsonify, g
from flask_cors import CORS

from config import Config
from src.auth import init_auth
from src.auth.tokens import TokenIssuer
from src.core.errors import AppError
from src.database.db_manager import db, initialize_database
from src.domain.accounts import AccountService
from src.domain.catalog import CatalogService
from src.interfaces.http.routes import users_bp, health_bp
from src.observability import configure_structured_logging, metrics_blueprint


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root (no extra console spam)

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status_code >= 500:
            app.logger.error("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(500)
    def _handle_server_error(exc):
        db.session.rollback()
        return jsonify({"message": "Server error"}), 500


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS', [])
        if origin and origin.strip()
    })
    CORS(app, resources={r"/api/*": {"origins": allowed_origins or "*"}})

    initialize_database(app)

    account_service = AccountService(TokenIssuer.from_config(app.config))
    init_auth(app, account_service)

    # Catalog is optional: without Spotify credentials it reports "unavailable"
    app.extensions['catalog_service'] = CatalogService(
        spotify_client_id=app.config.get('SPOTIPY_CLIENT_ID'),
        spotify_client_secret=app.config.get('SPOTIPY_CLIENT_SECRET'),
        market=app.config.get('CATALOG_MARKET'),
        cache_maxsize=app.config.get('CATALOG_CACHE_MAXSIZE'),
        cache_ttl=app.config.get('CATALOG_CACHE_TTL_SECONDS'),
    )

    register_error_handlers(app)

    app.register_blueprint(users_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    # In debug with the reloader, only the child process configures file logging
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src', 'log')
    if not Config.DEBUG or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(log_dir)
        logger.info("File logging initialized at %s", log_file_path)

    if Config.JWT_SECRET == 'dev-secret-change-me':
        logger.warning("JWT_SECRET/SECRET_KEY not set; using the development signing secret.")

    app = create_app()
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Flask application on port %s...", Config.PORT)
    app.run(debug=Config.DEBUG, host='0.0.0.0', port=Config.PORT, threaded=True)
