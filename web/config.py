"""Centralized configuration for the GodsEye web API."""

import os

# Server bind settings; PORT wins over FLASK_PORT on hosting platforms that inject it
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("PORT") or os.getenv("FLASK_PORT") or "5000")
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes")

# Keep ProductInfo keys in their declared order in JSON responses
JSON_SORT_KEYS = False

# Log request details (URL, search query) outside production
LOG_REQUESTS = os.getenv("FLASK_ENV", "production") != "production"
