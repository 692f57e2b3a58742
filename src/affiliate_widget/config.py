"""
Configuration management for the affiliate widget matcher.
"""
import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Process configuration read from the environment."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    DATA_DIR = PROJECT_ROOT / "data"
    SETTINGS_PATH = Path(os.getenv("SETTINGS_PATH", str(DATA_DIR / "settings.json")))
    CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(DATA_DIR / "catalog.json")))

    # API Keys
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")

    # Language model endpoint
    OPENAI_API_URL: str = os.getenv(
        "OPENAI_API_URL", "https://api.openai.com/v1/chat/completions"
    )
    OPENAI_TIMEOUT_S: int = int(os.getenv("OPENAI_TIMEOUT_S", "60"))

    # Flask settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key")
    FLASK_ENV: str = os.getenv("FLASK_ENV", "development")
    FLASK_DEBUG: bool = os.getenv("FLASK_DEBUG", "True").lower() == "true"
    FLASK_HOST: str = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT: int = int(os.getenv("FLASK_PORT", "5000"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def get_cors_origins(cls) -> list[str]:
        """Split the comma separated CORS origin list."""
        origins = [o.strip() for o in cls.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @classmethod
    def validate(cls) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings (empty if valid)
        """
        errors = []

        if not cls.OPENAI_API_KEY:
            errors.append("OPENAI_API_KEY not set; keyword extraction will use fallback products only")

        if not cls.OPENAI_API_URL.startswith("https://"):
            errors.append(f"OPENAI_API_URL should use https: {cls.OPENAI_API_URL}")

        if cls.OPENAI_TIMEOUT_S <= 0:
            errors.append(f"Invalid OPENAI_TIMEOUT_S: {cls.OPENAI_TIMEOUT_S}. Must be positive")

        if not cls.SETTINGS_PATH.exists():
            errors.append(f"Settings file not found: {cls.SETTINGS_PATH} (defaults will be used)")

        if not cls.CATALOG_PATH.exists():
            errors.append(f"Catalog file not found: {cls.CATALOG_PATH}")

        return errors

    @classmethod
    def is_valid(cls) -> bool:
        """Check if configuration is valid."""
        return len(cls.validate()) == 0

    @classmethod
    def get_summary(cls) -> dict:
        """Get configuration summary (safe for logging)."""
        return {
            "flask_env": cls.FLASK_ENV,
            "flask_debug": cls.FLASK_DEBUG,
            "openai_api_configured": cls.OPENAI_API_KEY is not None,
            "openai_api_url": cls.OPENAI_API_URL,
            "openai_timeout_s": cls.OPENAI_TIMEOUT_S,
            "settings_path": str(cls.SETTINGS_PATH),
            "catalog_path": str(cls.CATALOG_PATH),
            "log_level": cls.LOG_LEVEL,
        }
