import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "report-workflow-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "report_workflow_db")

    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")

    # Push gateway; empty URL disables delivery (in-app rows are still written)
    PUSH_ENDPOINT_URL = os.environ.get("PUSH_ENDPOINT_URL", "")
    PUSH_API_TOKEN = os.environ.get("PUSH_API_TOKEN") or None
    PUSH_TIMEOUT_SECONDS = float(os.environ.get("PUSH_TIMEOUT_SECONDS", "5"))
    PUSH_MAX_WORKERS = int(os.environ.get("PUSH_MAX_WORKERS", "4"))

    WORKFLOW_MAX_WORKERS = int(os.environ.get("WORKFLOW_MAX_WORKERS", "3"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_JSON = _flag("LOG_JSON", "0")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
