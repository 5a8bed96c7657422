"""Application configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="walletauth", description="Application name")
    environment: Literal["development", "testing", "staging", "production"] = Field(
        default="development", description="Runtime environment"
    )
    debug: bool = Field(default=False, description="Debug mode flag")
    secret_key: str = Field(
        default="dev-secret-key-change-in-production",
        description="Secret key for signing session tokens",
    )

    # API
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 prefix")
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )

    # Authentication service (client side)
    auth_service_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the authentication service",
    )
    metamask_route_prefix: str = Field(
        default="/metamask", description="Route prefix of the wallet login endpoints"
    )
    client_url: str = Field(
        default="http://localhost:3000",
        description="Origin used when the caller has none",
    )
    client_domain: str = Field(
        default="localhost", description="Domain used when the caller has none"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Timeout for each authentication service call"
    )
    authenticated_route: str = Field(
        default="/home", description="Route opened after a successful login"
    )

    # Session defaults
    default_display_name: str = Field(
        default="User", description="Display name for federated users without one"
    )
    default_avatar_url: str = Field(
        default="https://cdn-icons-png.flaticon.com/128/3177/3177440.png",
        description="Avatar for federated users without one",
    )
    wallet_display_name: str = Field(
        default="Anonymous", description="Display name for wallet-only sessions"
    )
    wallet_avatar_url: str = Field(
        default="https://cdn-icons-png.flaticon.com/128/10/10960.png",
        description="Avatar for wallet-only sessions",
    )

    # SIWE challenge issuing (server side)
    siwe_statement: str = Field(
        default="Sign in with Ethereum to the app.",
        description="Statement shown in the wallet signing prompt",
    )
    siwe_version: str = Field(default="1", description="EIP-4361 message version")
    chain_id: int = Field(default=1, description="Chain ID bound into challenges")
    nonce_expire_seconds: int = Field(
        default=300, description="Challenge lifetime in seconds"
    )

    # JWT Authentication
    access_token_expire_minutes: int = Field(
        default=30, description="Access token expiration in minutes"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="json", description="Log output format"
    )

    @computed_field
    @property
    def metamask_base_url(self) -> str:
        """Full URL of the wallet login endpoints."""
        return f"{self.auth_service_url.rstrip('/')}{self.metamask_route_prefix}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
