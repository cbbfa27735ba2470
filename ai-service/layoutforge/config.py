"""
Application configuration management using Pydantic Settings.

Covers the generative backend, code generation output and runtime metadata.
"""
import logging
from typing import Literal, Optional, Dict, Any
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load .env first
load_dotenv()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings for the layout and code generation service"""

    # -------------------------
    # APPLICATION METADATA & RUNTIME
    # -------------------------
    app_name: str = "LayoutForge Service"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_directory: str = "logs"
    cors_origins: list[str] = ["*"]

    # -------------------------
    # GENERATIVE BACKEND (OpenAI-compatible)
    # -------------------------
    llm_api_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    llm_model: str = "gemini-2.5-flash"
    llm_api_key: Optional[str] = None
    llm_temperature: float = Field(0.7, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(8192, gt=0)
    llm_min_response_length: int = Field(100, ge=0)

    # -------------------------
    # CODE GENERATION
    # -------------------------
    default_screen_name: str = "GeneratedScreen"
    export_output_dir: str = "./src/app/components"
    min_markup_length: int = Field(10, ge=0)

    # -------------------------
    # VALIDATORS
    # -------------------------
    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return str(v).upper()

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production"]
        if v not in valid_envs:
            logger.warning(f"Invalid environment '{v}', defaulting to 'development'")
            return "development"
        return v

    @field_validator('default_screen_name')
    @classmethod
    def validate_screen_name(cls, v: str) -> str:
        # Becomes both a class name prefix and a file base name
        if not v.isidentifier():
            raise ValueError(f"default_screen_name must be a valid identifier, got '{v}'")
        return v

    @field_validator('export_output_dir')
    @classmethod
    def validate_export_dir(cls, v: str) -> str:
        return v.rstrip("/") or "."

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def llm_config(self) -> Dict[str, Any]:
        return {
            "api_url": self.llm_api_url,
            "model": self.llm_model,
            "api_key": self.llm_api_key,
            "temperature": self.llm_temperature,
            "max_tokens": self.llm_max_tokens,
            "min_response_length": self.llm_min_response_length,
        }

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="APP_",
        validate_default=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    logger.info("Initializing settings...")
    return Settings()


settings = get_settings()
