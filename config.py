import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./recurring.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "EUR")

    # Line-item pricing: "snapshot" (price stored on the template) or "live" (catalog price)
    PRICE_POLICY = data.get("PRICE_POLICY", "snapshot")

    # Collaborators
    INVOICE_SERVICE_URL = data.get("INVOICE_SERVICE_URL", "http://localhost:8001/api")
    CATALOG_SERVICE_URL = data.get("CATALOG_SERVICE_URL", "http://localhost:8002/api")
    COLLABORATOR_TIMEOUT_SECONDS = float(data.get("COLLABORATOR_TIMEOUT_SECONDS", 10.0))
    REMINDER_WEBHOOK_URL = data.get("REMINDER_WEBHOOK_URL", None)

    # Recurring generation worker
    RECURRING_GENERATION_ENABLED = bool(data.get("RECURRING_GENERATION_ENABLED", True))
    RECURRING_GENERATION_INTERVAL_SECONDS = data.get("RECURRING_GENERATION_INTERVAL_SECONDS", 3600)
    RECURRING_REMINDERS_ENABLED = bool(data.get("RECURRING_REMINDERS_ENABLED", True))
