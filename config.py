"""
config.py — Flask configuration classes for the PDF tamper-forensics service.
"""
import os
import secrets

from engine.fingerprint import DEFAULT_KNOWN_TOOLS


class BaseConfig:
    """Base configuration shared by all environments."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_hex(32)
    MAX_UPLOAD_MB = int(os.environ.get("MAX_UPLOAD_MB", 50))
    MAX_CONTENT_LENGTH = MAX_UPLOAD_MB * 1024 * 1024  # bytes
    MAX_ANALYSIS_BYTES = MAX_CONTENT_LENGTH

    DATABASE_URL = os.environ.get(
        "DATABASE_URL", f"sqlite:///{os.path.join(os.path.dirname(__file__), 'data', 'app.db')}"
    )
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    RATE_LIMIT = os.environ.get("RATE_LIMIT", "60 per minute")
    RATELIMIT_ENABLED = True

    # "raw" scans undecoded bytes; "decoded" scans pypdf-decompressed page content
    CONTENT_SOURCE = os.environ.get("CONTENT_SOURCE", "raw")

    # More distinct tools than this in one document escalates provenance
    TOOL_ESCALATION_THRESHOLD = int(os.environ.get("TOOL_ESCALATION_THRESHOLD", 1))

    # Authoring/editing tool fingerprints, matched case-insensitively in metadata values
    KNOWN_TOOLS = list(DEFAULT_KNOWN_TOOLS)

    VERSION = "1.0.0"


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(os.path.dirname(__file__), 'data', 'dev.db')}"
    )


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    RATELIMIT_ENABLED = False


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}


def config_to_dict(cfg) -> dict:
    """Upper-case settings of a config class, as the engine expects them outside Flask."""
    return {key: getattr(cfg, key) for key in dir(cfg) if key.isupper()}
