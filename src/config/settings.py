"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

The Firebase service account is read field by field from FIREBASE_* variables
so the raw key file never has to live in the repository. Mock mode swaps
Firestore for an in-memory store so the API runs without credentials.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""
    pass


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Matching is case-insensitive, so FIREBASE_PROJECT_ID fills
    firebase_project_id.
    """

    # API Configuration
    api_title: str = "OBS CMS Backend API"
    api_version: str = "1.0.0"
    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on. Hosting platforms set PORT."
    )

    # Firebase service account
    firebase_type: str = Field(default="service_account")
    firebase_project_id: str = Field(
        default="",
        description="Firebase project ID. Required unless in mock mode."
    )
    firebase_private_key_id: str = Field(default="")
    firebase_private_key: str = Field(
        default="",
        description="PEM private key. Literal \\n sequences are turned into newlines."
    )
    firebase_client_email: str = Field(
        default="",
        description="Service account email. Required unless in mock mode."
    )
    firebase_client_id: str = Field(default="")
    firebase_auth_uri: str = Field(default="https://accounts.google.com/o/oauth2/auth")
    firebase_token_uri: str = Field(default="https://oauth2.googleapis.com/token")
    firebase_auth_provider_x509_cert_url: str = Field(
        default="https://www.googleapis.com/oauth2/v1/certs"
    )
    firebase_client_x509_cert_url: str = Field(default="")

    # Firestore layout
    app_id: str = Field(
        default="default-app-id",
        description="Segment in artifacts/<app_id>/public/data/media. Must match the frontend."
    )
    firestore_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory document store instead of Firestore. Enables local dev without credentials."
    )

    # Simulated processing
    media_processing_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Delay before a queued video is marked complete."
    )
    deferred_task_max_attempts: int = Field(
        default=3,
        ge=1,
        description="How many times the completion update is tried before it is recorded as failed."
    )
    deferred_task_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause between attempts of a failed completion update."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def private_key(self) -> str:
        """
        Private key with real newlines.

        Hosting dashboards store multi-line values with escaped newlines,
        which the PEM parser rejects.
        """
        return self.firebase_private_key.replace("\\n", "\n")

    @property
    def service_account_info(self) -> dict[str, Any]:
        """Service account dict in the layout of a downloaded key file."""
        return {
            "type": self.firebase_type,
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            "private_key": self.private_key,
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }

    def validate_required_fields(self) -> list[str]:
        """
        Return the names of required variables that are not set.

        Separate from Pydantic validation because the requirements
        depend on whether we're in mock mode.
        """
        if self.firestore_mock_mode:
            return []

        missing = []
        if not self.firebase_project_id:
            missing.append("FIREBASE_PROJECT_ID")
        if not self.firebase_private_key:
            missing.append("FIREBASE_PRIVATE_KEY")
        if not self.firebase_client_email:
            missing.append("FIREBASE_CLIENT_EMAIL")
        return missing

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the service account is incomplete."""
        missing = self.validate_required_fields()
        if missing:
            raise ConfigurationError(
                f"Firebase service account environment variables are not set: {', '.join(missing)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, construct Settings directly and hand it to create_app.
    """
    return Settings()
