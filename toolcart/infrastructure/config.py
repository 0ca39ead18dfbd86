"""Application configuration.

Loads settings from environment variables (prefixed ``TOOLCART_``) with
sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from toolcart.domain.state_machines import CheckoutProtocol


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_title: str = "ToolCart API"
    api_version: str = "0.1.0"
    debug: bool = False

    # Shop
    currency: str = Field(
        default="GBP",
        description="ISO 4217 currency used for all prices",
    )
    default_protocol: CheckoutProtocol = Field(
        default=CheckoutProtocol.STANDARD,
        description="Checkout protocol active at startup",
    )
    activity_log_size: int = Field(
        default=8,
        ge=1,
        description="Number of recent activity entries kept",
    )
    confirmation_fallback: bool = Field(
        default=False,
        description="Answer used by the MCP server when the client cannot be asked",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "env_prefix": "TOOLCART_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
