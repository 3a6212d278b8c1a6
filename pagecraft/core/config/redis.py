"""
Redis store adapter for pagecraft.

This module owns the single shared Redis connection used for both cache
entries and rate-limit counters:
- Connection pooling (one pool per process)
- Bounded retry with linear backoff on connect
- Persistent UNAVAILABLE state once retries are exhausted
- Raw string operations used by the cache facade and the rate limiter
- Conversion of every redis-py error into a typed cache exception

Lifecycle:
    The process-wide store is created by init_store() at startup and released
    by shutdown_store() at shutdown. Components receive the RedisStore
    instance through their constructors; get_store() is the FastAPI
    dependency that hands it out.

Usage:
    >>> store = await init_store()
    >>> await store.set_raw("meta:ring", '"Ring sizes"', ttl_seconds=7200)
    >>> await store.get_raw("meta:ring")
    '"Ring sizes"'
    >>> await shutdown_store()
"""
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from pagecraft.core.config.logging import get_logger
from pagecraft.core.config.settings import settings
from pagecraft.core.exceptions import (
    CacheConnectionException,
    CacheOperationException,
    ConfigurationException,
)

logger = get_logger(__name__)

T = TypeVar("T")


class StoreState(str, Enum):
    """Connection health of the shared store."""

    DISCONNECTED = "disconnected"  # Never connected
    CONNECTING = "connecting"
    READY = "ready"
    DEGRADED = "degraded"  # Last command failed, client will reconnect
    UNAVAILABLE = "unavailable"  # Connect retries exhausted
    CLOSED = "closed"


class RedisStore:
    """
    Key-value store adapter over an async Redis client.

    All raw operations either return the backend result or raise a
    CacheException subclass; no redis-py exception escapes this class.

    Args:
        url: Redis URL (defaults to settings.REDIS_URL)
        client: Pre-built async client (tests inject fakeredis here)
        max_retries: Connect retries after the first attempt
        retry_step_ms: Backoff growth per failed attempt
        retry_max_delay_ms: Backoff ceiling
    """

    def __init__(
        self,
        url: str | None = None,
        client: AsyncRedis | None = None,
        *,
        max_retries: int | None = None,
        retry_step_ms: int | None = None,
        retry_max_delay_ms: int | None = None,
    ) -> None:
        self._url = url or settings.REDIS_URL
        self._client = client
        self._pool: AsyncConnectionPool | None = None
        self._state = StoreState.DISCONNECTED

        self._max_retries = (
            settings.REDIS_CONNECT_MAX_RETRIES if max_retries is None else max_retries
        )
        self._retry_step_ms = (
            settings.REDIS_RETRY_STEP_MS if retry_step_ms is None else retry_step_ms
        )
        self._retry_max_delay_ms = (
            settings.REDIS_RETRY_MAX_DELAY_MS
            if retry_max_delay_ms is None
            else retry_max_delay_ms
        )

    # =========================================================================
    # CLIENT
    # =========================================================================

    def get_connection_kwargs(self) -> dict[str, Any]:
        """Redis pool parameters derived from settings."""
        return {
            "max_connections": settings.REDIS_MAX_CONNECTIONS,
            "decode_responses": True,
            "socket_timeout": settings.REDIS_SOCKET_TIMEOUT,
            "socket_connect_timeout": settings.REDIS_SOCKET_TIMEOUT,
            "socket_keepalive": True,
            "health_check_interval": 30,
        }

    @property
    def client(self) -> AsyncRedis:
        if self._client is None:
            self._pool = AsyncConnectionPool.from_url(
                self._url,
                **self.get_connection_kwargs(),
            )
            self._client = AsyncRedis(connection_pool=self._pool)
        return self._client

    @property
    def state(self) -> StoreState:
        return self._state

    def is_available(self) -> bool:
        """Report whether the last interaction with Redis succeeded."""
        return self._state is StoreState.READY

    # =========================================================================
    # CONNECTION LIFECYCLE
    # =========================================================================

    def backoff_delay_ms(self, failed_attempts: int) -> int:
        """
        Delay before the next connect attempt.

        Grows linearly with the number of failed attempts and is capped:
        min(failed_attempts * step, max_delay).
        """
        return min(failed_attempts * self._retry_step_ms, self._retry_max_delay_ms)

    async def connect(self) -> bool:
        """
        Establish the connection, retrying with bounded backoff.

        Returns:
            bool: True when Redis answered PING, False when every attempt
            failed. In the latter case the store is UNAVAILABLE and raw
            operations fail fast until connect() succeeds again.
        """
        if self._state is StoreState.READY:
            return True

        self._state = StoreState.CONNECTING
        logger.info("Connecting to Redis", url=self._safe_url())

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries + 1),
                wait=wait_incrementing(
                    start=self._retry_step_ms / 1000,
                    increment=self._retry_step_ms / 1000,
                    max=self._retry_max_delay_ms / 1000,
                ),
                retry=retry_if_exception_type(RedisError),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    await self.client.ping()
        except RedisError as e:
            self._state = StoreState.UNAVAILABLE
            logger.error(
                "Redis connection failed, giving up",
                url=self._safe_url(),
                attempts=self._max_retries + 1,
                error=str(e),
            )
            return False

        self._state = StoreState.READY
        logger.info("Redis client ready", url=self._safe_url())
        return True

    async def close(self) -> None:
        """Close the client and its pool. Called on application shutdown."""
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("Error while closing Redis client", error=str(e))

        if self._pool is not None:
            await self._pool.disconnect()

        self._client = None
        self._pool = None
        self._state = StoreState.CLOSED
        logger.info("Redis connection closed")

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Redis connection attempt failed",
            attempt=retry_state.attempt_number,
            next_delay_ms=self.backoff_delay_ms(retry_state.attempt_number),
            error=str(error),
        )

    def _safe_url(self) -> str:
        if "@" in self._url:
            scheme, rest = self._url.split("://", 1)
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self._url

    # =========================================================================
    # ERROR CONVERSION
    # =========================================================================

    async def _execute(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        if self._state is StoreState.UNAVAILABLE:
            raise CacheConnectionException(
                message="Redis unavailable (connect retries exhausted)",
                details={"operation": operation},
            )

        try:
            result = await call()
        except (RedisConnectionError, RedisTimeoutError) as e:
            if self._state is not StoreState.DEGRADED:
                logger.error("Redis connection error", operation=operation, error=str(e))
            self._state = StoreState.DEGRADED
            raise CacheConnectionException(
                details={"operation": operation, "error": str(e)},
            ) from e
        except RedisError as e:
            raise CacheOperationException(
                details={"operation": operation, "error": str(e)},
            ) from e

        if self._state is not StoreState.READY:
            if self._state is StoreState.DEGRADED:
                logger.info("Redis connection recovered", operation=operation)
            self._state = StoreState.READY

        return result

    # =========================================================================
    # RAW OPERATIONS
    # =========================================================================

    async def get_raw(self, key: str) -> str | None:
        return await self._execute("get", lambda: self.client.get(key))

    async def set_raw(self, key: str, value: str, ttl_seconds: int | None = None) -> bool:
        """SET with expiry. A missing TTL stores the key without expiration."""
        if ttl_seconds is None:
            return bool(await self._execute("set", lambda: self.client.set(key, value)))
        return bool(
            await self._execute("setex", lambda: self.client.setex(key, ttl_seconds, value))
        )

    async def del_raw(self, key: str) -> int:
        return await self._execute("delete", lambda: self.client.delete(key))

    async def exists_raw(self, key: str) -> bool:
        return await self._execute("exists", lambda: self.client.exists(key)) > 0

    async def hgetall_raw(self, key: str) -> dict[str, str]:
        return await self._execute("hgetall", lambda: self.client.hgetall(key))

    async def eval_script(
        self,
        script: str,
        keys: list[str],
        args: list[Any],
    ) -> Any:
        """Run a Lua script atomically on the server."""
        return await self._execute(
            "eval",
            lambda: self.client.eval(script, len(keys), *keys, *args),
        )

    async def flush_all(self) -> bool:
        """Remove every key in this store's logical database (FLUSHDB)."""
        return bool(await self._execute("flushdb", lambda: self.client.flushdb()))

    async def dbsize(self) -> int:
        return await self._execute("dbsize", lambda: self.client.dbsize())

    async def info(self, section: str | None = None) -> dict[str, Any]:
        if section is None:
            return await self._execute("info", lambda: self.client.info())
        return await self._execute("info", lambda: self.client.info(section))

    async def ping(self) -> bool:
        """Health probe; never raises."""
        try:
            return bool(await self._execute("ping", lambda: self.client.ping()))
        except (CacheConnectionException, CacheOperationException):
            return False


# =============================================================================
# PROCESS-WIDE STORE
# =============================================================================

_store: RedisStore | None = None


async def init_store(url: str | None = None) -> RedisStore:
    """
    Create and connect the process-wide store.

    Idempotent: a second call returns the existing store untouched. A failed
    connect still returns the store; it reports is_available() == False and
    every consumer degrades to its safe default.
    """
    global _store

    if _store is not None:
        return _store

    _store = RedisStore(url=url)
    await _store.connect()
    return _store


async def shutdown_store() -> None:
    """Close and forget the process-wide store."""
    global _store

    if _store is None:
        return

    await _store.close()
    _store = None


def get_store() -> RedisStore:
    """
    Return the process-wide store.

    Raises:
        ConfigurationException: If init_store() has not run
    """
    if _store is None:
        raise ConfigurationException("Redis store not initialised; call init_store() first")
    return _store


__all__ = [
    "StoreState",
    "RedisStore",
    "init_store",
    "shutdown_store",
    "get_store",
]
