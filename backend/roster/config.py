import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


class Settings:
    """Deployment configuration, resolved once when the process starts.

    Every value falls back to a hard-coded default when the hosting
    environment does not provide it.
    """

    def __init__(self):
        self.app_id = os.getenv("APP_ID", "default-app-id")
        self.store_config = _load_store_config(os.getenv("STORE_CONFIG"))
        self.mongodb_uri = self.store_config.get(
            "uri",
            os.getenv("MONGODB_URI", "mongodb://localhost:27017/team_roster"),
        )
        self.database_name: Optional[str] = self.store_config.get("database")
        self.initial_auth_token: Optional[str] = os.getenv("INITIAL_AUTH_TOKEN") or None

        self.secret_key = os.getenv("SECRET_KEY", "testing_secret_key_for_development_only")
        self.session_token_expire_minutes = int(os.getenv("SESSION_TOKEN_EXPIRE_MINUTES", "720"))
        self.status_clear_seconds = float(os.getenv("STATUS_CLEAR_SECONDS", "3"))

        cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:8080")
        self.cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]


def _load_store_config(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    try:
        config = json.loads(raw)
    except ValueError as e:
        logger.warning(f"STORE_CONFIG is not valid JSON, ignoring it: {e}")
        return {}
    if not isinstance(config, dict):
        logger.warning("STORE_CONFIG must be a JSON object, ignoring it")
        return {}
    return config


class CollectionPaths:
    """Collection paths namespaced by the deployment's application id."""

    def __init__(self, app_id: str):
        self.app_id = app_id
        self.users = f"artifacts/{app_id}/public/data/users"
        self.skills = f"artifacts/{app_id}/public/data/skills"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
