"""
Text Completion Service.

Submits a single prompt to a chat completion model and returns the text of the
single response. Requests are limited in-process by request count and token
volume per period so a batch of commits does not overload the API.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Dict, Optional
import asyncio
import time

from openai import AsyncOpenAI, OpenAIError
from tiktoken import Encoding

from config import logger
from errors import ParseError, UpstreamUnavailable


class CompletionService(ABC):
    """Abstract base class for text completion services."""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Return the model's response to a prompt.

        Raises:
            UpstreamError: If the service call fails
            ParseError: If the response carries no text
        """
        pass

    def truncate(self, text: str, max_tokens: int) -> str:
        """Cut text to a token budget. The base service leaves text untouched."""
        return text


class OpenAICompletionService(CompletionService):
    """
    Completion service backed by OpenAI chat completions.

    Attributes:
        client (AsyncOpenAI): OpenAI API client
        encoding (Encoding): Token encoder used for budgeting
        model (str): Chat model name
        max_requests (int): Requests allowed per period
        max_tokens (int): Prompt tokens allowed per period
        period (int): Rate limit window in seconds
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        encoding: Encoding,
        model: str,
        max_requests: int,
        max_tokens: int,
        period: int,
        timeout: float = 120.0,
    ):
        self.client = client
        self.encoding = encoding
        self.model = model
        self.max_requests = max_requests
        self.max_tokens = max_tokens
        self.period = period
        self.timeout = timeout
        self.request_times = deque()
        self.token_counts = deque()
        self._lock = asyncio.Lock()

    def _count_tokens(self, text: str) -> int:
        """
        Count tokens in text using the model's tokenizer.

        Args:
            text (str): Text to count tokens for

        Returns:
            int: Number of tokens in text
        """
        return len(self.encoding.encode(text))

    def truncate(self, text: str, max_tokens: int) -> str:
        tokens = self.encoding.encode(text)
        if len(tokens) <= max_tokens:
            return text
        return self.encoding.decode(tokens[:max_tokens])

    def _evict_expired(self, now: float) -> None:
        while self.request_times and (now - self.request_times[0]) >= self.period:
            self.request_times.popleft()
            self.token_counts.popleft()

    async def _rate_limit(self, token_count: int) -> None:
        """
        Wait until a request of ``token_count`` tokens fits in the current window.

        Args:
            token_count (int): Prompt tokens of the upcoming request
        """
        async with self._lock:
            while True:
                now = time.monotonic()
                self._evict_expired(now)

                if not self.request_times:
                    break
                if (
                    len(self.request_times) < self.max_requests
                    and sum(self.token_counts) + token_count <= self.max_tokens
                ):
                    break

                # Next slot opens when the oldest request leaves the window
                wait_time = self.period - (now - self.request_times[0])
                if wait_time > 0:
                    await asyncio.sleep(wait_time)

            self.request_times.append(time.monotonic())
            self.token_counts.append(token_count)

    async def complete(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        token_count = self._count_tokens(prompt)
        logger.debug(f"Prompt token count: {token_count}")
        await self._rate_limit(token_count)

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "timeout": self.timeout,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if temperature is not None:
            params["temperature"] = temperature

        try:
            response = await self.client.chat.completions.create(**params)
        except OpenAIError as e:
            raise UpstreamUnavailable(f"Completion request failed: {e}") from e

        if not response.choices:
            raise ParseError("Completion response has no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ParseError("Completion response is empty")
        return content.strip()
