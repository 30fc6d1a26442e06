"""Flask app exposing the product extractor over HTTP.

Run locally:
    python -m web.app

Set DEMO_USER and DEMO_PASS to put every route behind HTTP Basic Auth.
"""

import hmac
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

# Load environment variables from the project .env before reading config
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

from .api import api
from .config import FLASK_DEBUG, FLASK_HOST, FLASK_PORT, JSON_SORT_KEYS

__all__ = ["app", "create_app"]


def _auth_required() -> Response:
    response = jsonify({"error": "Authentication required"})
    response.status_code = 401
    response.headers["WWW-Authenticate"] = 'Basic realm="GodsEye"'
    return response


def check_basic_auth() -> Optional[Response]:
    """Reject the request unless it carries the configured demo credentials.

    Auth is off when DEMO_USER or DEMO_PASS is unset. Credentials are read per
    request so they can be rotated without a restart.
    """
    user, password = os.getenv("DEMO_USER"), os.getenv("DEMO_PASS")
    if not user or not password:
        return None

    auth = request.authorization
    if auth is None or auth.type != "basic":
        return _auth_required()

    user_ok = hmac.compare_digest((auth.username or "").encode(), user.encode())
    pass_ok = hmac.compare_digest((auth.password or "").encode(), password.encode())
    if user_ok and pass_ok:
        return None
    return _auth_required()


def _json_http_error(error: HTTPException) -> Response:
    response = jsonify({"error": error.description})
    response.status_code = error.code or 500
    return response


def create_app() -> Flask:
    """Build the Flask app with the API blueprint and auth guard."""
    flask_app = Flask(__name__)
    flask_app.json.sort_keys = JSON_SORT_KEYS
    flask_app.before_request(check_basic_auth)
    flask_app.register_error_handler(HTTPException, _json_http_error)
    flask_app.register_blueprint(api)
    return flask_app


app = create_app()


if __name__ == "__main__":
    from godseye.logging_config import setup_logging

    setup_logging(level=os.getenv("GODSEYE_LOG_LEVEL", "INFO"))
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
