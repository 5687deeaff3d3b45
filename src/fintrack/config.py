"""Configuration management using pydantic-settings."""

from functools import lru_cache
import json
import logging
from typing import Annotated, Any, Iterable

from pydantic import Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote OCR API
    ocr_api_base_url: str = Field(
        default="https://ocr-api-leitura-financas.onrender.com",
        description="Base URL of the remote OCR extraction API",
    )
    ocr_api_extract_path: str = Field(
        default="/extract",
        description="Path of the multipart extraction endpoint",
    )
    ocr_api_health_path: str = Field(
        default="/health/ready",
        description="Path of the readiness endpoint (200 = ready, 503 = warming up)",
    )
    ocr_request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Upper bound for a single extraction call",
    )
    ocr_health_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Upper bound for the readiness probe",
    )
    ocr_max_connections: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Size of the shared outbound connection pool",
    )
    ocr_min_confidence: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Confidence below which a review warning is attached",
    )

    # Uploads
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum file size in MB",
    )
    allowed_media_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["application/pdf"],
        description="Comma-separated list of accepted upload media types",
    )

    default_currency: str = Field(default="BRL", min_length=3, max_length=3)

    # Server Settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    # CORS
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Comma-separated list of allowed CORS origins",
    )

    @field_validator(
        "ocr_request_timeout_seconds",
        "ocr_health_timeout_seconds",
        "ocr_max_connections",
        "ocr_min_confidence",
        "max_file_size_mb",
        "default_currency",
        mode="wrap",
    )
    @classmethod
    def fall_back_to_default(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info
    ) -> Any:
        """Replace an invalid env value with the field default instead of failing start-up."""
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name].default
            logger.warning(f"Invalid value {value!r} for {info.field_name}, using default {default!r}")
            return default

    @staticmethod
    def _split_csv(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @classmethod
    def _parse_list(cls, value: str | Iterable[str]) -> list[str]:
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return []
            # Try JSON (e.g., '["https://foo"]'); if it fails, fall back to CSV.
            try:
                parsed = json.loads(text)
                if isinstance(parsed, list):
                    return [str(item).strip() for item in parsed if str(item).strip()]
            except json.JSONDecodeError:
                pass
            return cls._split_csv(text)
        return [str(item).strip() for item in value if str(item).strip()]

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: str | Iterable[str]) -> list[str]:
        """Allow comma-separated env strings for CORS origins."""
        return cls._parse_list(value)

    @field_validator("allowed_media_types", mode="before")
    @classmethod
    def parse_media_types(cls, value: str | Iterable[str]) -> list[str]:
        """Media types are compared lower-cased; an empty list rejects every upload."""
        return [item.lower() for item in cls._parse_list(value)]

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def ocr_api_configured(self) -> bool:
        """Whether the base URL looks usable for outbound calls."""
        return self.ocr_api_base_url.startswith(("http://", "https://"))

    @property
    def ocr_extract_url(self) -> str:
        return self.ocr_api_base_url.rstrip("/") + "/" + self.ocr_api_extract_path.lstrip("/")

    @property
    def ocr_health_url(self) -> str:
        return self.ocr_api_base_url.rstrip("/") + "/" + self.ocr_api_health_path.lstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
