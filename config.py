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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./visits.db")
    SQLITE_BUSY_TIMEOUT_SECONDS = data.get("SQLITE_BUSY_TIMEOUT_SECONDS", 30)
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # QR codes
    QR_CODE_PREFIX = data.get("QR_CODE_PREFIX", "SG")
    QR_CODE_LENGTH = int(data.get("QR_CODE_LENGTH", 32))
    QR_CODE_EXPIRY_HOURS = int(data.get("QR_CODE_EXPIRY_HOURS", 24))
    QR_CODE_MAX_RETRIES = int(data.get("QR_CODE_MAX_RETRIES", 5))
    QR_IMAGE_BOX_SIZE = int(data.get("QR_IMAGE_BOX_SIZE", 10))
    QR_IMAGE_BORDER = int(data.get("QR_IMAGE_BORDER", 2))

    # Visits and visitors
    VISIT_EXPIRY_GRACE_HOURS = int(data.get("VISIT_EXPIRY_GRACE_HOURS", 48))
    MAX_VISITORS_PER_VISIT = int(data.get("MAX_VISITORS_PER_VISIT", 10))
    FREQUENT_VISITOR_THRESHOLD = int(data.get("FREQUENT_VISITOR_THRESHOLD", 5))
    DEFAULT_COUNTRY_CODE = str(data.get("DEFAULT_COUNTRY_CODE", "234"))
