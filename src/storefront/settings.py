"""Runtime settings read from the environment.

Protean's own configuration (databases, brokers, event store) lives in
``domain.toml``; this module only holds the application-level knobs that
the HTTP layer and the external adapters need.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    environment: str
    tool_secret: str
    service_role_key: str
    payment_link_base_url: str
    payment_link_ttl_hours: int
    currency: str
    shopify_api_version: str
    shopify_timeout_seconds: float
    embedding_dimensions: int
    inventory_provider: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    """Build settings from the current environment.

    Read on every call so tests can monkeypatch environment variables.
    """
    environment = (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()
    return Settings(
        environment=environment,
        tool_secret=os.getenv("TOOL_SECRET", ""),
        service_role_key=os.getenv("SERVICE_ROLE_KEY", ""),
        payment_link_base_url=os.getenv("PAYMENT_LINK_BASE_URL", "https://pay.stripe.com"),
        payment_link_ttl_hours=int(os.getenv("PAYMENT_LINK_TTL_HOURS", "24")),
        currency=os.getenv("CURRENCY", "USD"),
        shopify_api_version=os.getenv("SHOPIFY_API_VERSION", "2024-10"),
        shopify_timeout_seconds=float(os.getenv("SHOPIFY_TIMEOUT_SECONDS", "10")),
        embedding_dimensions=int(os.getenv("EMBEDDING_DIMENSIONS", "1536")),
        inventory_provider=os.getenv("INVENTORY_PROVIDER", "shopify" if environment == "production" else "fake"),
    )
