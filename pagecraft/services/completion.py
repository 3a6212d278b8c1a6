"""
AI completion client for pagecraft.

Thin async client for an OpenAI-compatible chat-completions endpoint. The
rest of the application treats it as an opaque call: system + prompt in,
text out, or an LLMException.

Error mapping:
- httpx.TimeoutException        -> LLMTimeoutException (504)
- transport errors, 5xx         -> LLMConnectionException (502), retried
- upstream 429                  -> LLMRateLimitException (429)
- other 4xx, unusable body      -> LLMInvalidResponseException (502)

Usage:
    >>> client = OpenAICompletionClient()
    >>> text = await client.complete("You are an SEO writer.", "Write about ring sizes")
    >>> await client.close()
"""
from typing import Any, Protocol

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pagecraft.core.config.settings import settings
from pagecraft.core.exceptions import (
    LLMConnectionException,
    LLMInvalidResponseException,
    LLMRateLimitException,
    LLMTimeoutException,
)
from pagecraft.core.logging import get_logger

logger = get_logger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"
MAX_ATTEMPTS = 2


class CompletionClient(Protocol):
    """Anything that turns a system message and a prompt into text."""

    async def complete(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int | None = None,
    ) -> str:
        ...


class OpenAICompletionClient:
    """
    Chat-completions client over httpx.

    Args:
        api_key: Bearer token (defaults to settings.OPENAI_API_KEY)
        base_url: API root, e.g. https://api.openai.com/v1
        model: Model name
        timeout: Request timeout in seconds
        client: Pre-built httpx.AsyncClient (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY.get_secret_value()
        self.base_url = base_url or settings.OPENAI_BASE_URL
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout or settings.OPENAI_TIMEOUT
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int | None = None,
    ) -> str:
        """
        Run one chat completion.

        Returns:
            str: Stripped text of the first choice

        Raises:
            LLMException: Any failure, mapped as described in the module docstring
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens or settings.OPENAI_MAX_TOKENS,
            "temperature": settings.OPENAI_TEMPERATURE,
        }

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(LLMConnectionException),
            reraise=True,
        ):
            with attempt:
                body = await self._post(payload)

        return self._extract_text(body)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.client.post(
                CHAT_COMPLETIONS_PATH,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise LLMTimeoutException(details={"model": self.model, "error": str(e)}) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                raise LLMRateLimitException(details={"model": self.model}) from e
            if status >= 500:
                raise LLMConnectionException(
                    message=f"AI completion service error: {status}",
                    details={"model": self.model, "status": status},
                ) from e
            raise LLMInvalidResponseException(
                message=f"AI completion request rejected: {status}",
                details={"model": self.model, "status": status},
            ) from e
        except httpx.RequestError as e:
            raise LLMConnectionException(details={"model": self.model, "error": str(e)}) from e

        try:
            return response.json()
        except ValueError as e:
            raise LLMInvalidResponseException(details={"model": self.model}) from e

    def _extract_text(self, body: dict[str, Any]) -> str:
        try:
            text = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMInvalidResponseException(
                details={"model": self.model, "reason": "missing choices[0].message.content"},
            ) from e

        if not isinstance(text, str) or not text.strip():
            raise LLMInvalidResponseException(
                details={"model": self.model, "reason": "empty completion"},
            )

        usage = body.get("usage") or {}
        logger.debug(
            "AI completion finished",
            model=self.model,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )
        return text.strip()


__all__ = [
    "CompletionClient",
    "OpenAICompletionClient",
]
