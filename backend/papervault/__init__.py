"""Application factory and blueprint registration."""
from __future__ import annotations

from typing import Any

from flask import Flask
from flask_cors import CORS

from .config import BaseConfig
from .db.session import Database
from .errors import register_error_handlers
from .integrations.storage import init_storage
from .integrations.supabase_client import SupabaseExt
from .llm.core import LLMExt
from .logs import configure_logging
from .services.comment_feed import CommentFeed


def create_app(config_class: type[BaseConfig] | None = None, **overrides: Any) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class() if config_class else BaseConfig())
    app.config.update(overrides)
    if not app.config.get("MAX_CONTENT_LENGTH"):
        # Room for the form fields around the largest allowed file.
        app.config["MAX_CONTENT_LENGTH"] = app.config["MAX_UPLOAD_BYTES"] + 1024 * 1024
    CORS(app, resources={r"/api/*": {"origins": app.config["FRONTEND_ORIGIN"]}})
    configure_logging(app)

    # Init extensions
    database = Database()
    database.init_app(app)
    app.extensions["db"] = database
    supabase = SupabaseExt()
    supabase.init_app(app)
    init_storage(app, supabase)
    LLMExt().init_app(app)
    app.extensions["comment_feed"] = CommentFeed()

    _register_blueprints(app)

    # Global error handlers
    register_error_handlers(app)
    return app


def _register_blueprints(app: Flask) -> None:
    from .api.ai.routes import bp as ai_bp
    from .api.auth.routes import bp as auth_bp
    from .api.bookmarks.routes import bp as bookmarks_bp
    from .api.calculator.routes import bp as calculator_bp
    from .api.health.routes import bp as health_bp
    from .api.legacy.routes import bp as legacy_bp
    from .api.papers.routes import bp as papers_bp
    from .api.suggestions.routes import bp as suggestions_bp
    from .api.users.routes import bp as users_bp
    from .docs.routes import bp as docs_bp

    app.register_blueprint(health_bp, url_prefix="/api/health")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(papers_bp, url_prefix="/api/papers")
    app.register_blueprint(bookmarks_bp, url_prefix="/api/bookmarks")
    app.register_blueprint(suggestions_bp, url_prefix="/api/suggestions")
    app.register_blueprint(ai_bp, url_prefix="/api/ai")
    app.register_blueprint(calculator_bp, url_prefix="/api/calculator")
    app.register_blueprint(legacy_bp)
    app.register_blueprint(docs_bp)
