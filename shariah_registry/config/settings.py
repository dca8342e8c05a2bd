"""
Registry configuration.

Database connection, notification channels, pagination and scoring settings.
Every value can be overridden from the environment.
"""

import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database configuration - only used by the PostgreSQL report store
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "database": os.getenv("DB_NAME", "shariah_registry"),
    "user": os.getenv("DB_USER", "registry"),
    "password": os.getenv("DB_PASSWORD", ""),
    "port": int(os.getenv("DB_PORT", 5432))
}

# All registry tables live in one schema and share a prefix
SCHEMA_NAME = os.getenv("DB_SCHEMA", "shariah")
TABLE_PREFIX = "sr_"  # shariah registry prefix

# Rating update notification settings
ALERT_CONFIG = {
    "slack_webhook": os.getenv("SLACK_WEBHOOK_URL"),
    "telegram_bot_token": os.getenv("TELEGRAM_BOT_TOKEN"),
    "telegram_chat_id": os.getenv("TELEGRAM_CHAT_ID"),
}

# Read path limits
PAGINATION_CONFIG = {
    "default_limit": int(os.getenv("REGISTRY_DEFAULT_PAGE_LIMIT", 50)),
    "full_dump_warn_threshold": int(os.getenv("REGISTRY_FULL_DUMP_WARN", 1000)),
}

# Sub-score handling. Strict mode rejects sub-scores above 100;
# the default accepts anything a uint8 can hold.
SCORE_CONFIG = {
    "strict_bounds": _env_flag("REGISTRY_STRICT_SCORES", False),
}

# Service bootstrap for the registry handler
REGISTRY_CONFIG = {
    "admin": os.getenv("REGISTRY_ADMIN"),
    "store": os.getenv("REGISTRY_STORE", "memory"),  # "memory" or "postgres"
    "notify_channels": [
        c.strip() for c in os.getenv("REGISTRY_NOTIFY_CHANNELS", "").split(",") if c.strip()
    ],
}
