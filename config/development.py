import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workload_db"),
}

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Reject assignments that push a user's summed active workload above 100%.
# Off: over-capacity is only logged and sent as a workload reminder.
ENFORCE_WORKLOAD_CAP = bool(int(os.getenv("ENFORCE_WORKLOAD_CAP", "0")))
TOP_WORKLOAD_LIMIT = int(os.getenv("TOP_WORKLOAD_LIMIT", "10"))
