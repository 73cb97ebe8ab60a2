"""Development entry point: ``python main.py`` from the backend directory."""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

from papervault import create_app  # noqa: E402
from papervault.db.session import current_db  # noqa: E402

app = create_app()


if __name__ == "__main__":
    if os.getenv("CREATE_TABLES", "false").lower() == "true":
        with app.app_context():
            current_db().create_all()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)), debug=os.getenv("FLASK_DEBUG") == "1")
