"""Backend configuration settings"""

import os

# CORS origins allowed to access the API
# These are for local development where the frontend runs on a separate port.
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://localhost:4173,http://127.0.0.1:5173,http://127.0.0.1:4173").split(",")

# Session configuration
SESSION_COOKIE_NAME = "ibd_session"
SESSION_MAX_AGE = int(os.environ.get("SESSION_MAX_AGE", "3600"))  # 1 hour
SESSION_CLEANUP_INTERVAL = 300  # 5 minutes

API_VERSION = "0.1.0"
