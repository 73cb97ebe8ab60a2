"""Create all tables for a quick dev setup (NOT for production)."""
from __future__ import annotations

from dotenv import load_dotenv
from loguru import logger

from papervault import create_app
from papervault.db.session import current_db


def main() -> None:
    load_dotenv()
    app = create_app()
    with app.app_context():
        db = current_db()
        db.create_all()
        logger.info("tables created on {}", db.engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
