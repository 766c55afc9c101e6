"""Local development entry point.

Usage:
    python run.py

Reads .env, then serves the API on $PORT (default 5001).
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before the app reads its config

from app import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.debug, host="0.0.0.0", port=int(os.environ.get("PORT", 5001)))
