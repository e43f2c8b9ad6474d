"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.utils.errors import StoreError
from src.utils.logging import get_structured_logger
from src.utils.settings import AppConfig

logger = get_structured_logger(__name__)

# Global client instance (singleton pattern)
_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """Get or create the async Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise StoreError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = await acreate_client(url, key, options)
        logger.info("Supabase client initialized", url=url)

    return _client


async def close_supabase_client() -> None:
    """Drop the cached client; supabase-py holds no explicit connection to close."""
    global _client
    if _client:
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[AsyncClient] = None

    async def __aenter__(self) -> AsyncClient:
        self.client = await get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                error=str(exc_val),
                type=exc_type.__name__,
            )
        return False


async def _probe_store() -> None:
    """Run a minimal read against the properties table."""
    async with SupabaseClient() as client:
        query = client.table(AppConfig.PROPERTIES_TABLE).select("id").limit(1)
        try:
            await query.execute()
        except Exception as e:
            raise StoreError(f"Store probe failed: {e}") from e


async def connect_with_retry(
    max_attempts: Optional[int] = None,
    delay_seconds: Optional[float] = None,
) -> None:
    """
    Verify the store is reachable, retrying on cold start.

    Only used at bootstrap; individual requests are never retried.
    """
    attempts = max_attempts or AppConfig.STORE_CONNECT_MAX_RETRIES
    delay = AppConfig.STORE_CONNECT_RETRY_DELAY_SECONDS if delay_seconds is None else delay_seconds

    try:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(StoreError),
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(delay),
            before_sleep=lambda retry_state: logger.warning(
                "Store connection failed, retrying",
                attempt=retry_state.attempt_number,
                max_attempts=attempts,
                delay_seconds=delay,
            ),
        ):
            with attempt:
                logger.info("Connecting to store", attempt=attempt.retry_state.attempt_number)
                await _probe_store()
    except RetryError as e:
        logger.error("Exceeded store connection retries", max_attempts=attempts)
        raise StoreError(f"Store unavailable after {attempts} attempts") from e

    logger.info("Connected to store")
