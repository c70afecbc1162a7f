"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the behavior of the original service

Collaborators:
  - api/main.py: reads settings for CORS and startup logging
  - container.py: reads settings for chunker, oracle and retry policy wiring
  - interfaces/api/http/routers: reads upload and input limits

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ORACLE_PROTOCOLS = frozenset({"rewrite", "structured"})
ORACLE_FAILURE_POLICIES = frozenset({"abort", "keep_original"})


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production/test)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON log lines (default: True)
        allowed_origins: Comma-separated CORS origins
        google_api_key: Google Gemini API key (oracle credentials)
        oracle_model: Model id used by the correction oracle
        fake_oracle: Use the deterministic in-process oracle (tests/CI)
        oracle_protocol: rewrite|structured (default: structured)
        oracle_failure_policy: abort|keep_original (default: abort)
        oracle_max_workers: Concurrent oracle calls; 1 means sequential
        oracle_call_delay_seconds: Pause between sequential oracle calls
        chunk_max_chars: Maximum characters per chunk sent to the oracle
        min_input_chars: Minimum meaningful input length (default: 5)
        max_input_chars: Maximum accepted text length (default: 200_000)
        max_upload_bytes: Maximum upload size in bytes (default: 10MiB)
        max_body_bytes: Max request body size (default: 12MiB)
        retry_max_attempts: Attempts per oracle call (default: 3)
        retry_base_delay_seconds: Initial backoff (default: 1.0)
        retry_max_delay_seconds: Backoff ceiling (default: 30.0)
    """

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:5173"
    cors_allow_credentials: bool = False

    # Oracle (LLM) credentials and model
    google_api_key: str = ""
    oracle_model: str = "gemini-1.5-flash"

    # Testing/CI
    fake_oracle: bool = False

    # Oracle behavior
    oracle_protocol: str = "structured"
    oracle_failure_policy: str = "abort"
    oracle_max_workers: int = 1
    oracle_call_delay_seconds: float = 0.2

    # Chunking
    chunk_max_chars: int = 3000

    # Input limits
    min_input_chars: int = 5
    max_input_chars: int = 200_000
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MiB
    max_body_bytes: int = 12 * 1024 * 1024

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    @field_validator("chunk_max_chars", "oracle_max_workers", "retry_max_attempts")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("oracle_call_delay_seconds", "retry_base_delay_seconds")
    @classmethod
    def must_be_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("oracle_protocol")
    @classmethod
    def oracle_protocol_valid(cls, v: str) -> str:
        protocol = (v or "structured").strip().lower()
        if protocol not in ORACLE_PROTOCOLS:
            raise ValueError("oracle_protocol must be rewrite or structured")
        return protocol

    @field_validator("oracle_failure_policy")
    @classmethod
    def oracle_failure_policy_valid(cls, v: str) -> str:
        policy = (v or "abort").strip().lower()
        if policy not in ORACLE_FAILURE_POLICIES:
            raise ValueError("oracle_failure_policy must be abort or keep_original")
        return policy

    def validate_limits(self) -> None:
        """
        Cross-field validation for input limits.
        Called explicitly after instantiation.
        """
        if self.min_input_chars > self.max_input_chars:
            raise ValueError(
                f"min_input_chars ({self.min_input_chars}) must not exceed "
                f"max_input_chars ({self.max_input_chars})"
            )
        if self.retry_max_delay_seconds <= 0:
            raise ValueError("retry_max_delay_seconds must be > 0")

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_oracle_requirements(self):
        if not self.google_api_key and not self.fake_oracle:
            raise ValueError("GOOGLE_API_KEY is required unless FAKE_ORACLE=1")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    settings = Settings()
    settings.validate_limits()
    return settings
