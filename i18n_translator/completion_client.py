"""Text-completion backends used for translation and plural expansion."""
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import (
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    OpenAIError
)
from openai import AsyncOpenAI
from openai.types.chat import (
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam
)

from i18n_translator.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompletionConfig:
    """Request parameters for a single completion call."""
    model: str
    temperature: float
    max_tokens: int


# Fixed request profiles. A low temperature keeps translations consistent with
# the glossary and style guide across keys.
TRANSLATION_COMPLETION = CompletionConfig(model='gpt-3.5-turbo', temperature=0.3, max_tokens=1000)
PLURAL_COMPLETION = CompletionConfig(model='gpt-4', temperature=0.3, max_tokens=1000)


class CompletionError(Exception):
    """Raised when a completion request fails or returns no usable text."""


class CompletionClient(Protocol):
    """Anything that can turn a system and user prompt into completion text."""

    async def complete(self, system_prompt: str, user_prompt: str, config: CompletionConfig) -> str:
        ...


class OpenAICompletionClient:
    """
    Completion client backed by the OpenAI chat completions API.

    Performs exactly one request per call. Failures are surfaced as
    CompletionError and it is up to the caller to decide what a failure means.
    """

    def __init__(self, client: AsyncOpenAI, timeout: Optional[float] = 60.0):
        self._client = client
        self._timeout = timeout

    async def complete(self, system_prompt: str, user_prompt: str, config: CompletionConfig) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=config.model,
                messages=[
                    ChatCompletionSystemMessageParam(role="system", content=system_prompt),
                    ChatCompletionUserMessageParam(role="user", content=user_prompt)
                ],
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=self._timeout,
            )
        except (RateLimitError, APITimeoutError, APIConnectionError, APIStatusError, OpenAIError) as api_exc:
            logger.error("API error occurred: %s - %s", api_exc.__class__.__name__, api_exc)
            raise CompletionError(f"{api_exc.__class__.__name__}: {api_exc}") from api_exc

        if not response.choices:
            raise CompletionError(f"Model '{config.model}' returned no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise CompletionError(f"Model '{config.model}' returned an empty completion")
        return content.strip()
