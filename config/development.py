import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = Config.db_config()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

PUSH_ENDPOINT_URL = Config.PUSH_ENDPOINT_URL
PUSH_API_TOKEN = Config.PUSH_API_TOKEN
PUSH_TIMEOUT_SECONDS = Config.PUSH_TIMEOUT_SECONDS
PUSH_MAX_WORKERS = Config.PUSH_MAX_WORKERS
WORKFLOW_MAX_WORKERS = Config.WORKFLOW_MAX_WORKERS

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = False
