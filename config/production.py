import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = Config.db_config()

DEBUG = False

AUTO_INIT_DB = Config.AUTO_INIT_DB

PUSH_ENDPOINT_URL = Config.PUSH_ENDPOINT_URL
PUSH_API_TOKEN = Config.PUSH_API_TOKEN
PUSH_TIMEOUT_SECONDS = Config.PUSH_TIMEOUT_SECONDS
PUSH_MAX_WORKERS = Config.PUSH_MAX_WORKERS
WORKFLOW_MAX_WORKERS = Config.WORKFLOW_MAX_WORKERS

LOG_LEVEL = Config.LOG_LEVEL
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
