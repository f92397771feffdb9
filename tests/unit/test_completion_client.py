from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from i18n_translator.completion_client import (
    PLURAL_COMPLETION,
    TRANSLATION_COMPLETION,
    CompletionConfig,
    CompletionError,
    OpenAICompletionClient
)


def _mock_openai(content=None, side_effect=None, choices=True):
    response = MagicMock()
    if choices:
        message = MagicMock()
        message.content = content
        choice = MagicMock()
        choice.message = message
        response.choices = [choice]
    else:
        response.choices = []

    openai_client = MagicMock()
    openai_client.chat.completions.create = AsyncMock(return_value=response, side_effect=side_effect)
    return openai_client


def test_fixed_request_profiles():
    assert TRANSLATION_COMPLETION == CompletionConfig(model='gpt-3.5-turbo', temperature=0.3, max_tokens=1000)
    assert PLURAL_COMPLETION == CompletionConfig(model='gpt-4', temperature=0.3, max_tokens=1000)


@pytest.mark.asyncio
async def test_complete_returns_stripped_first_choice():
    openai_client = _mock_openai(content="  Bonjour {{name}}\n")
    client = OpenAICompletionClient(openai_client)

    result = await client.complete("system", "user", TRANSLATION_COMPLETION)

    assert result == "Bonjour {{name}}"
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-3.5-turbo"
    assert kwargs["temperature"] == 0.3
    assert kwargs["max_tokens"] == 1000
    assert kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]


@pytest.mark.asyncio
async def test_api_errors_become_completion_errors():
    openai_client = _mock_openai(side_effect=OpenAIError("quota exceeded"))
    client = OpenAICompletionClient(openai_client)

    with pytest.raises(CompletionError, match="quota exceeded"):
        await client.complete("system", "user", PLURAL_COMPLETION)
    # No retries
    assert openai_client.chat.completions.create.await_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   "])
async def test_empty_completion_is_an_error(content):
    client = OpenAICompletionClient(_mock_openai(content=content))

    with pytest.raises(CompletionError):
        await client.complete("system", "user", TRANSLATION_COMPLETION)


@pytest.mark.asyncio
async def test_missing_choices_is_an_error():
    client = OpenAICompletionClient(_mock_openai(choices=False))

    with pytest.raises(CompletionError):
        await client.complete("system", "user", TRANSLATION_COMPLETION)
