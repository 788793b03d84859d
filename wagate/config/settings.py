"""Dynaconf settings configuration"""

import os
from pathlib import Path

from dynaconf import Dynaconf, Validator

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


def _port_from_env(_settings, _validator) -> int:
    """Hosting platforms hand the listen port over as a bare PORT variable."""
    return int(os.environ.get("PORT", 3000))


settings = Dynaconf(
    envvar_prefix="WAGATE",
    settings_files=[
        str(CONFIG_DIR / "settings.toml"),
        str(CONFIG_DIR / "settings.local.toml"),
        str(CONFIG_DIR / ".secrets.toml"),
    ],
    environments=True,
    env_switcher="WAGATE_ENV",
    validators=[
        Validator("APP_NAME", default="WhatsApp Gateway"),
        Validator("DEBUG", default=False, cast=bool),
        Validator("LOG_FORMAT", default="pretty", is_in=["pretty", "json"]),
        Validator("HOST", default="0.0.0.0"),
        Validator("PORT", default=_port_from_env, cast=int),
        Validator("SESSION_DIR", default="sessions"),
        Validator("GROUPS_FILE", default="groups.json"),
        Validator("SESSION_ID", default="default"),
        Validator("BAILEYS_SERVICE_URL", default="http://127.0.0.1:3001"),
        Validator("BAILEYS_API_KEY", default="baileys-secret-key"),
        Validator("WEBHOOK_URL", default="http://127.0.0.1:3000/webhook/events"),
        Validator("BROWSER", default=["WhatsApp API", "Chrome", "103.0.5060.114"]),
        Validator("REQUEST_TIMEOUT", default=30.0, cast=float),
        Validator("REFRESH_DELAY_AFTER_CONNECT", default=2.0, cast=float, gte=0),
        Validator("REFRESH_DELAY_AFTER_GROUP_CHANGE", default=1.0, cast=float, gte=0),
        Validator("SIDECAR_RETRY_DELAY", default=5.0, cast=float, gte=0),
    ],
)


def validate_settings():
    """Validate all settings on startup."""
    settings.validators.validate()
