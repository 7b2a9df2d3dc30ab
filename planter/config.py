"""
Configuration module for Planter backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _get_int(key: str, default: int) -> int:
    """Read an integer env var, falling back to the default on bad input."""
    raw = os.getenv(key, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"⚠️  Warning: {key} is not a valid integer, using default value {default}")
        return default


def _get_float(key: str, default: float) -> float:
    """Read a float env var, falling back to the default on bad input."""
    raw = os.getenv(key, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"⚠️  Warning: {key} is not a valid number, using default value {default}")
        return default


class Settings:
    """Application settings loaded from environment variables."""

    # Supabase Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_PUBLISHABLE_KEY: str = os.getenv("SUPABASE_PUBLISHABLE_KEY", "")
    # service_role key, used only by background jobs (bypasses RLS)
    SUPABASE_SECRET_KEY: str = os.getenv("SUPABASE_SECRET_KEY", "")

    # JWT Verification - Supabase JWT Signing Keys (ES256 with JWKS)
    # Format: https://<project-id>.supabase.co/auth/v1/.well-known/jwks.json
    @property
    def SUPABASE_JWKS_URL(self) -> str:
        """Get the JWKS URL for JWT verification."""
        if not self.SUPABASE_URL:
            return ""
        return f"{self.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    # Completion backend: "yandex" (HTTP JSON protocol) or "gemini" (google-genai SDK)
    COMPLETION_PROVIDER: str = os.getenv("COMPLETION_PROVIDER", "yandex").lower()

    # Yandex GPT API
    YANDEX_GPT_API_KEY: str = os.getenv("YANDEX_GPT_API_KEY", "")
    YANDEX_GPT_MODEL: str = os.getenv("YANDEX_GPT_MODEL", "yandexgpt")
    YANDEX_GPT_URL: str = os.getenv(
        "YANDEX_GPT_URL",
        "https://llm.api.cloud.yandex.net/foundationModels/v1/completion"
    )

    # Google Gemini API
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Completion options shared by both backends
    COMPLETION_TEMPERATURE: float = _get_float("COMPLETION_TEMPERATURE", 0.7)
    COMPLETION_MAX_TOKENS: int = _get_int("COMPLETION_MAX_TOKENS", 2000)
    COMPLETION_TIMEOUT_SECONDS: float = _get_float("COMPLETION_TIMEOUT_SECONDS", 30.0)

    # Watering reminder job (0 disables it)
    WATERING_CHECK_INTERVAL_SECONDS: int = _get_int("WATERING_CHECK_INTERVAL_SECONDS", 3600)

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings
    CORS_ORIGINS: List[str] = os.getenv(
        "CORS_ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8080"
    ).split(",")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing or invalid.
        """
        required_settings = {
            "SUPABASE_URL": cls.SUPABASE_URL,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        if cls.COMPLETION_PROVIDER not in ("yandex", "gemini"):
            raise ValueError(
                f"Unsupported COMPLETION_PROVIDER '{cls.COMPLETION_PROVIDER}'. "
                "Expected 'yandex' or 'gemini'."
            )

    @classmethod
    def completion_configured(cls) -> bool:
        """Check whether the selected completion backend has an API key."""
        if cls.COMPLETION_PROVIDER == "gemini":
            return bool(cls.GOOGLE_API_KEY)
        return bool(cls.YANDEX_GPT_API_KEY)

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"⚠️  Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
