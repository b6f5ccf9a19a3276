"""
Configuration management for the application.

Loads environment variables and provides centralized config access.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    # Flask settings
    FLASK_ENV: str = os.getenv("FLASK_ENV", "development")
    DEBUG: bool = FLASK_ENV == "development"
    PORT: int = int(os.getenv("PORT", "5000"))

    # Store settings
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")

    # Browser origin allowed by CORS
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:5173")

    # Base URL the Python client talks to
    API_URL: str = os.getenv("API_URL", "http://localhost:5000")

    # Hierarchy settings
    ROOT_FOLDER_NAME: str = os.getenv("ROOT_FOLDER_NAME", "Root Folder")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls):
        """Validate required configuration"""
        errors = []

        if cls.FLASK_ENV == "production" and not cls.DATABASE_URL:
            errors.append("DATABASE_URL is not set")

        if not cls.CLIENT_URL:
            errors.append("CLIENT_URL is not set")

        if not cls.ROOT_FOLDER_NAME.strip():
            errors.append("ROOT_FOLDER_NAME must not be blank")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


# Create config instance
config = Config()
