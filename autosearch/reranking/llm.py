"""Chat completion clients used by the re-ranker.

The re-ranker depends only on ``ChatCompletionClient``; the OpenAI-backed
implementation wraps an explicitly constructed ``openai.OpenAI`` instance.
"""

from abc import ABC, abstractmethod
from typing import Optional

import openai

from autosearch.config.models import LLMConfig
from autosearch.logging import get_logger
from autosearch.matching.exceptions import LLMFailure

logger = get_logger(__name__, component="rerank")


class ChatCompletionClient(ABC):
    """A chat model that answers with a single JSON object."""

    @abstractmethod
    def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        """Send one system + user exchange and return the raw JSON text.

        Raises:
            LLMFailure: On transport errors, timeouts or an empty response
        """
        ...


class OpenAIChatClient(ChatCompletionClient):
    """ChatCompletionClient backed by the OpenAI chat completions API.

    Args:
        client: Configured ``openai.OpenAI`` instance
        model: Chat model name
        temperature: Sampling temperature
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        client: "openai.OpenAI",
        model: str = "gpt-4o",
        temperature: float = 0.3,
        timeout: Optional[float] = 30.0,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            raise LLMFailure(f"LLM request timed out after {self.timeout}s") from e
        except openai.OpenAIError as e:
            raise LLMFailure(f"LLM request failed: {e}") from e

        if not response.choices:
            raise LLMFailure("LLM returned no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise LLMFailure("LLM returned an empty response")

        usage = getattr(response, "usage", None)
        logger.debug(
            "LLM response received",
            extra={
                "event": "rerank.llm.completed",
                "model": self.model,
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
            },
        )
        return content


def build_chat_client(settings: LLMConfig, api_key: Optional[str]) -> Optional[ChatCompletionClient]:
    """Create the re-ranking client, or None when re-ranking is unavailable.

    Returns None when the LLM is disabled in configuration or no API key is
    set; the re-ranker then serves heuristic-only results.
    """
    if not settings.enabled:
        logger.info("LLM re-ranking disabled in configuration", extra={"event": "rerank.disabled"})
        return None
    if not api_key:
        logger.warning(
            "OPENAI_API_KEY not set; re-ranking will use heuristic scores only",
            extra={"event": "rerank.unconfigured"},
        )
        return None

    # Retries are a caller policy; a failed call falls back immediately
    client = openai.OpenAI(api_key=api_key, timeout=settings.timeout_seconds, max_retries=0)
    return OpenAIChatClient(
        client,
        model=settings.model,
        temperature=settings.temperature,
        timeout=settings.timeout_seconds,
    )
