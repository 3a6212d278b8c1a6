"""
Test doubles for pagecraft tests.
"""
from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError

# 2025-10-09T09:46:40Z
START_MS = 1_760_003_200_000


# =============================================================================
# TEST DOUBLES
# =============================================================================


class FakeClock:
    """Injectable epoch-ms clock."""

    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class BrokenRedis:
    """Async Redis stand-in whose every command fails with a connection error."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __getattr__(self, name: str) -> Any:
        async def fail(*args: Any, **kwargs: Any) -> Any:
            self.calls.append(name)
            raise RedisConnectionError("Connection refused")

        return fail


class FlakyRedis:
    """PING fails a given number of times, then succeeds."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.pings = 0

    async def ping(self) -> bool:
        self.pings += 1
        if self.pings <= self.failures:
            raise RedisConnectionError("Connection refused")
        return True

    async def get(self, key: str) -> str | None:
        return None

    async def aclose(self) -> None:
        pass


class FakeCompletion:
    """Scripted AI completion client that records its calls."""

    def __init__(self, reply: str = "<p>generated</p>", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system: str, prompt: str, *, max_tokens: int | None = None) -> str:
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.reply
