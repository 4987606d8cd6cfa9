import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default=None):
    """env.yaml wins, then the process environment, then the default."""
    if key in data:
        return data[key]
    value = os.environ.get(key)
    if value is None:
        return default
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./workspace_access.db")
    API_PORT = _get("API_PORT", 8000)
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    APP_URL = _get("APP_URL", "http://localhost:5173").rstrip("/")

    # Primary user directory (GoTrue-compatible auth admin API)
    DIRECTORY_URL = _get("DIRECTORY_URL", "http://localhost:9999").rstrip("/")
    DIRECTORY_SERVICE_KEY = _get("DIRECTORY_SERVICE_KEY", "")
    DIRECTORY_JWT_SECRET = _get("DIRECTORY_JWT_SECRET", "dev-secret-key-change-in-production")
    DIRECTORY_JWT_AUDIENCE = _get("DIRECTORY_JWT_AUDIENCE", "authenticated")
    DIRECTORY_TIMEOUT_SECONDS = _get("DIRECTORY_TIMEOUT_SECONDS", 10)

    # External realm (Keycloak admin REST API)
    KEYCLOAK_URL = _get("KEYCLOAK_URL", "http://keycloak:8080").rstrip("/")
    KEYCLOAK_REALM = _get("KEYCLOAK_REALM", "timeline")
    KEYCLOAK_ADMIN_REALM = _get("KEYCLOAK_ADMIN_REALM", "master")
    KEYCLOAK_ADMIN_CLIENT_ID = _get("KEYCLOAK_ADMIN_CLIENT_ID", "admin-cli")
    KEYCLOAK_ADMIN = _get("KEYCLOAK_ADMIN", "")
    KEYCLOAK_ADMIN_PASSWORD = _get("KEYCLOAK_ADMIN_PASSWORD", "")
    KEYCLOAK_APP_CLIENT_ID = _get("KEYCLOAK_APP_CLIENT_ID", "timeline-app")
    KEYCLOAK_TIMEOUT_SECONDS = _get("KEYCLOAK_TIMEOUT_SECONDS", 10)

    # Invites
    INVITE_TTL_DAYS = _get("INVITE_TTL_DAYS", 14)
    SENT_INVITES_WINDOW_DAYS = _get("SENT_INVITES_WINDOW_DAYS", 90)

    # Transactional email (Resend HTTP API)
    RESEND_API_URL = _get("RESEND_API_URL", "https://api.resend.com/emails")
    RESEND_API_KEY = _get("RESEND_API_KEY", "")
    RESEND_FROM = _get("RESEND_FROM", "Workspace <no-reply@example.com>")
    EMAIL_TIMEOUT_SECONDS = _get("EMAIL_TIMEOUT_SECONDS", 10)

    # Reserve super admin
    RESERVE_ADMIN_EMAIL = _get("RESERVE_ADMIN_EMAIL", "").strip().lower()
    RESERVE_ADMIN_PASSWORD = _get("RESERVE_ADMIN_PASSWORD", "")
