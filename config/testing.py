from config.config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = Config.db_config()

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

# No push gateway under test
PUSH_ENDPOINT_URL = ""
PUSH_API_TOKEN = None
PUSH_TIMEOUT_SECONDS = 1.0
PUSH_MAX_WORKERS = 1
WORKFLOW_MAX_WORKERS = 3

LOG_LEVEL = "WARNING"
LOG_JSON = False
