import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

REQUIRED_ENV_VARS = {
    "endpoint": "APPWRITE_ENDPOINT",
    "project_id": "APPWRITE_PROJECT_ID",
    "api_key": "APPWRITE_API_KEY",
    "database_id": "APPWRITE_DB_ID",
}


@dataclass(frozen=True)
class StoreConfig:
    """Connection settings for the hosted TablesDB service."""

    endpoint: str
    project_id: str
    api_key: str
    database_id: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StoreConfig":
        """
        Build settings from the process environment.

        Args:
            environ: Mapping to read instead of os.environ (tests)

        Raises:
            ConfigError: If any required variable is unset or blank, or the endpoint is not an http(s) URL
        """
        env = os.environ if environ is None else environ

        values = {}
        missing = []
        for attr, var in REQUIRED_ENV_VARS.items():
            value = (env.get(var) or "").strip()
            if not value:
                missing.append(var)
            values[attr] = value
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        if not values["endpoint"].startswith(("http://", "https://")):
            raise ConfigError(f"APPWRITE_ENDPOINT must be an http(s) URL, got {values['endpoint']!r}")

        return cls(
            endpoint=values["endpoint"].rstrip("/"),
            project_id=values["project_id"],
            api_key=values["api_key"],
            database_id=values["database_id"],
        )
