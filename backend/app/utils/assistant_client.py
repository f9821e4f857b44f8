from anthropic import AsyncAnthropic, APIStatusError, APIError, APIConnectionError, APITimeoutError
from typing import Optional, Dict, List, Any
import asyncio
import random
import httpx
from app.core.config import settings
from app.core.exceptions import AssistantUnavailableError
from app.core.logging_config import logger

# Retry configuration - loaded from settings (0 retries by default)
MAX_RETRIES = settings.ASSISTANT_MAX_RETRIES
BASE_DELAY = settings.ASSISTANT_RETRY_BASE_DELAY
MAX_DELAY = settings.ASSISTANT_RETRY_MAX_DELAY
REQUEST_TIMEOUT = float(settings.ASSISTANT_REQUEST_TIMEOUT)
CONNECT_TIMEOUT = float(settings.ASSISTANT_CONNECT_TIMEOUT)
RETRYABLE_ERRORS = ['overloaded_error', 'rate_limit_error', 'server_error']


class AssistantClient:
    """Anthropic Messages API wrapper used by the chat assistant"""

    def __init__(self):
        client_kwargs = {"api_key": settings.ANTHROPIC_API_KEY}

        # Only set base_url if it's a non-empty string with actual content
        if settings.ANTHROPIC_BASE_URL and settings.ANTHROPIC_BASE_URL.strip():
            client_kwargs["base_url"] = settings.ANTHROPIC_BASE_URL.strip()
            logger.info(f"Using custom Anthropic API base URL: {settings.ANTHROPIC_BASE_URL}")

        client_kwargs["timeout"] = httpx.Timeout(
            connect=CONNECT_TIMEOUT,
            read=REQUEST_TIMEOUT,
            write=REQUEST_TIMEOUT,
            pool=REQUEST_TIMEOUT
        )
        # Retries are handled here, not by the SDK
        client_kwargs["max_retries"] = 0

        self.async_client = AsyncAnthropic(**client_kwargs)
        self.model = settings.ASSISTANT_MODEL

        logger.info(f"Assistant client initialized: timeout={REQUEST_TIMEOUT}s, model={self.model}")

    def _is_retryable_error(self, error: Exception) -> bool:
        """Overload, rate limit and network errors are retryable"""
        if isinstance(error, (APIConnectionError, APITimeoutError)):
            return True

        if isinstance(error, (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError)):
            return True

        if isinstance(error, (APIStatusError, APIError)):
            if hasattr(error, 'body') and isinstance(error.body, dict):
                error_type = error.body.get('error', {}).get('type', '')
                if error_type:
                    return error_type in RETRYABLE_ERRORS
            if hasattr(error, 'status_code'):
                return error.status_code in [429, 500, 502, 503, 529]

        return False

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Exponential backoff with 0-25% jitter"""
        delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)
        return delay + delay * random.uniform(0, 0.25)

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = None,
        temperature: float = None,
        messages: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        """
        Generate a single (non-streaming) reply

        Args:
            prompt: User message
            system_prompt: System prompt
            max_tokens: Maximum tokens to generate
            temperature: Temperature for generation
            messages: Optional earlier turns of the conversation

        Returns:
            Dict with ``content`` and usage metadata
        """
        messages = list(messages or [])
        messages.append({"role": "user", "content": prompt})

        if max_tokens is None:
            max_tokens = settings.ASSISTANT_MAX_TOKENS
        if temperature is None:
            temperature = settings.ASSISTANT_TEMPERATURE

        logger.info(f"Assistant API: model={self.model}, max_tokens={max_tokens}, prompt_len={len(prompt)}")

        for attempt in range(MAX_RETRIES + 1):
            try:
                response = await self.async_client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system_prompt if system_prompt else "",
                    messages=messages
                )

                content = "".join(
                    block.text for block in response.content if getattr(block, "type", "") == "text"
                )

                result = {
                    "content": content,
                    "model": self.model,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                    "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
                    "stop_reason": response.stop_reason,
                    "id": response.id
                }

                logger.log_assistant_event("completion", tokens_used=result["total_tokens"], stop_reason=response.stop_reason)
                return result

            except Exception as e:
                error_type = type(e).__name__
                if self._is_retryable_error(e) and attempt < MAX_RETRIES:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"Assistant API error [{error_type}] (attempt {attempt + 1}/{MAX_RETRIES + 1}), retrying in {delay:.1f}s...",
                        extra={
                            "event_type": "assistant_api_retry",
                            "error_type": error_type,
                            "attempt": attempt + 1,
                            "retry_delay": delay
                        }
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"Assistant API error: {error_type}: {e}",
                        extra={
                            "event_type": "assistant_api_error",
                            "error_type": error_type,
                            "attempt": attempt + 1
                        }
                    )
                    raise


_assistant_client: Optional[AssistantClient] = None


def get_assistant_client() -> AssistantClient:
    """FastAPI dependency; 503 when no API key is configured"""
    global _assistant_client
    if not settings.assistant_enabled:
        raise AssistantUnavailableError()
    if _assistant_client is None:
        _assistant_client = AssistantClient()
    return _assistant_client
