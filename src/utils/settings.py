"""Application configuration read from environment variables."""

import os


class AppConfig:
    """Service-level settings."""

    SERVICE_NAME = os.environ.get("SERVICE_NAME", "estate-insights-backend")

    # Property tax applied to the last sale price (1.5%)
    TAX_RATE = float(os.environ.get("TAX_RATE", "0.015"))

    REQUEST_TIMEOUT_SECONDS = float(os.environ.get("REQUEST_TIMEOUT_SECONDS", "10"))

    # Store bootstrap on cold start only; requests are never retried
    STORE_CONNECT_MAX_RETRIES = int(os.environ.get("STORE_CONNECT_MAX_RETRIES", "5"))
    STORE_CONNECT_RETRY_DELAY_SECONDS = float(os.environ.get("STORE_CONNECT_RETRY_DELAY_SECONDS", "2"))

    PROPERTIES_TABLE = os.environ.get("PROPERTIES_TABLE", "properties")
    TRANSACTIONS_TABLE = os.environ.get("TRANSACTIONS_TABLE", "transactions")
    AGENTS_TABLE = os.environ.get("AGENTS_TABLE", "agents")
    NEIGHBORHOODS_TABLE = os.environ.get("NEIGHBORHOODS_TABLE", "neighborhoods")
