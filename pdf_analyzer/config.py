"""
Configuration management for the PDF Analyzer Backend.
Handles environment variables and application settings.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from environment
        env_parse_none_str="None",
    )

    # API Configuration
    app_name: str = Field(default="PDF Analyzer Backend")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3002)

    # Azure OpenAI Configuration
    azure_openai_endpoint: str = Field(default="")
    azure_openai_key: str = Field(default="")
    azure_openai_deployment_name: str = Field(default="")
    azure_openai_api_version: str = Field(default="2024-05-01-preview")
    assistant_id: Optional[str] = Field(default=None)
    assistant_name: str = Field(default="PDF Analyzer")
    assistant_instructions: str = Field(
        default=(
            "You are an AI assistant specialized in analyzing PDF documents. "
            "Please provide detailed analysis based on the content of the uploaded PDF."
        )
    )
    default_question: str = Field(
        default="Please analyze this PDF document and provide key insights."
    )

    # File Processing Configuration
    upload_dir: str = Field(default="uploads")
    max_file_size_mb: int = Field(default=50)
    max_chunk_size: int = Field(default=2000, gt=0)

    # Run Polling Configuration
    poll_initial_interval_ms: int = Field(default=10000, gt=0)
    poll_step_ms: int = Field(default=2000, ge=0)
    poll_min_interval_ms: int = Field(default=2000, gt=0)
    poll_timeout_seconds: Optional[float] = Field(default=600.0)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def validate_required_settings() -> None:
    """Validate that all required settings are present."""
    required_settings = [
        ("azure_openai_endpoint", settings.azure_openai_endpoint),
        ("azure_openai_key", settings.azure_openai_key),
        ("azure_openai_deployment_name", settings.azure_openai_deployment_name),
    ]

    missing_settings = []
    for setting_name, setting_value in required_settings:
        if not setting_value:
            missing_settings.append(setting_name.upper())

    if missing_settings:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_settings)}. "
            "Please check your .env file."
        )
