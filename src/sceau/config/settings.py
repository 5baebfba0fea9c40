"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env or system)
2. Environment-specific YAML config file (development.yaml, production.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Secrets (Redis password) should come from environment variables,
    not from YAML files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Sceau"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=4000, ge=1024, le=65535)
    API_RELOAD: bool = Field(default=False)
    API_PREFIX: str = Field(
        default="/api",
        description="Path prefix for sign-in routes ('' for none)",
    )

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Sign-In Challenge
    EXPECTED_DOMAIN: str = Field(
        default="localhost:3000",
        description="Host challenges are bound to (verifying authority)",
    )
    CHALLENGE_STATEMENT: str = Field(
        default="Sign in with Solana to the app.",
        min_length=1,
    )
    CHAIN_ID: Optional[str] = Field(
        default="solana:mainnet",
        description="Chain discriminator included in challenges",
    )
    CHALLENGE_RESOURCES: List[str] = Field(default_factory=list)
    CHALLENGE_TTL_SECONDS: int = Field(
        default=600,
        ge=30,
        description="Challenge lifetime (expirationTime - issuedAt)",
    )
    MAX_WINDOW_SECONDS: int = Field(
        default=600,
        ge=30,
        description="Window for challenges without expirationTime",
    )
    REQUIRE_ISSUED_NONCE: bool = Field(
        default=True,
        description="Only accept nonces issued by this server",
    )

    # Redis (nonce store)
    REDIS_ENABLED: bool = Field(default=False)
    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=6379, ge=1024, le=65535)
    REDIS_DB: int = Field(default=0, ge=0, le=15)
    REDIS_PASSWORD: Optional[str] = Field(default=None)
    REDIS_KEY_PREFIX: str = Field(default="sceau:nonce:")
    NONCE_STORE_TIMEOUT: float = Field(
        default=2.0,
        gt=0,
        description="Nonce store operation timeout in seconds",
    )

    # Handshake client
    SERVICE_ENDPOINT: str = Field(
        default="http://localhost:4000/api",
        description="Base URL of the sign-in service (client side)",
    )
    CLIENT_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="HTTP and signing timeout for the handshake client",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Observability - Metrics
    METRICS_ENABLED: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize prefix to '' or '/segment' without trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @field_validator("EXPECTED_DOMAIN")
    @classmethod
    def validate_expected_domain(cls, v: str) -> str:
        """Expected domain is a bare authority (host[:port])."""
        if not v or any(ch.isspace() for ch in v) or "/" in v:
            raise ValueError(
                "EXPECTED_DOMAIN must be a host[:port] without scheme or path"
            )
        return v

    @model_validator(mode="after")
    def validate_windows(self) -> "Settings":
        """Challenge lifetime must fit inside the nonce retention window."""
        if self.CHALLENGE_TTL_SECONDS > self.MAX_WINDOW_SECONDS:
            raise ValueError(
                "CHALLENGE_TTL_SECONDS must not exceed MAX_WINDOW_SECONDS"
            )
        return self


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        ValidationError: If values are invalid
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = Path(os.getenv("SCEAU_CONFIG_DIR", project_root / "config"))

    environment = env or os.getenv("ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    if env_file is None:
        default_env_file, default_config_file = env_map.get(
            environment, (".env.production", "production.yaml")
        )
        env_file = default_env_file
        if config_file is None:
            config_file = default_config_file

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file:
        env_config_path = config_dir / config_file
        if env_config_path.exists():
            with open(env_config_path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config.update(loaded)

    # Environment variables win over YAML values
    for key in list(merged_config):
        if key in os.environ:
            merged_config.pop(key)

    return Settings(**merged_config)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
