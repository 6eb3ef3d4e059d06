"""
Application settings and configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Application
    APP_NAME = "Noticeboard"
    VERSION = "1.0.0"
    DEBUG = os.getenv("DEBUG", "True") == "True"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours
    MASTER_KEY = os.getenv("MASTER_KEY", "change-this-master-key")

    # CORS
    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"
        ).split(",")
        if origin.strip()
    ]

    # Dates in API responses and spreadsheet exports
    TIMEZONE = os.getenv("TIMEZONE", "UTC")

    # Registrations
    ENFORCE_ACCEPTING_RESPONSES = os.getenv("ENFORCE_ACCEPTING_RESPONSES", "True") == "True"
    DEFAULT_GUEST_NAME = "Guest"
    DEFAULT_GUEST_EMAIL = "guest@example.com"

    # File Uploads
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
    UPLOAD_URL_PREFIX = "/uploads"

    # Client session persistence
    SESSION_FILE = os.getenv(
        "SESSION_FILE",
        os.path.join(os.path.expanduser("~"), ".noticeboard", "session.json")
    )

settings = Settings()
