"""
Arena Service Configuration
Database, judge service and session settings
"""

import os

# Hosted document store
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "arena_db")

# Code execution judge (Judge0 compatible)
JUDGE_API_URL = os.getenv("JUDGE_API_URL", "http://localhost:2358")
JUDGE_API_KEY = os.getenv("JUDGE_API_KEY", "")

# Judge polling: 10 attempts x 1s per test case
JUDGE_POLL_INTERVAL_SECONDS = float(os.getenv("JUDGE_POLL_INTERVAL_SECONDS", "1"))
JUDGE_MAX_POLL_ATTEMPTS = int(os.getenv("JUDGE_MAX_POLL_ATTEMPTS", "10"))
JUDGE_REQUEST_TIMEOUT_SECONDS = float(os.getenv("JUDGE_REQUEST_TIMEOUT_SECONDS", "30"))

# Sessions
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = "HS256"
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "arena_session")
SESSION_TTL_SECONDS = 2 * 60 * 60

# One-time login links
AUTO_LOGIN_TTL_SECONDS = 5 * 60
AUTO_LOGIN_SERVICE_KEY = os.getenv("AUTO_LOGIN_SERVICE_KEY", "")
DEFAULT_APP_ORIGIN = os.getenv("DEFAULT_APP_ORIGIN", "http://localhost:8080")

# Editor autosave throttle
CODE_AUTOSAVE_MIN_INTERVAL_SECONDS = 5

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
VERSION = os.getenv("VERSION")
