import json
import logging
import os
import re

import pytest

from i18n_translator.completion_client import PLURAL_COMPLETION, CompletionError
from i18n_translator.language_config import LanguageConfigLoader, PluralRuleCache
from i18n_translator.logging_config import LOGGER_NAME

TEXT_PATTERN = re.compile(r'^Text: "(.*?)"\n\n', re.S | re.M)
BASE_KEY_PATTERN = re.compile(r'Base key to use: "([^"]+)"')


class FakeCompletionClient:
    """
    Deterministic stand-in for the completion service.

    Translation requests return the scripted translation for the source text,
    or ``"<prefix> <text>"`` when none is scripted, which keeps placeholders
    intact. Plural requests return the scripted raw response for the base key
    and fail when none is scripted.
    """

    def __init__(self, translations=None, plural_responses=None, prefix='TR',
                 fail_translations=False, fail_plurals=False):
        self.translations = translations or {}
        self.plural_responses = plural_responses or {}
        self.prefix = prefix
        self.fail_translations = fail_translations
        self.fail_plurals = fail_plurals
        self.calls = []

    @property
    def translation_calls(self):
        return [call for call in self.calls if call[2] != PLURAL_COMPLETION]

    @property
    def plural_calls(self):
        return [call for call in self.calls if call[2] == PLURAL_COMPLETION]

    async def complete(self, system_prompt, user_prompt, config):
        self.calls.append((system_prompt, user_prompt, config))

        if config == PLURAL_COMPLETION:
            if self.fail_plurals:
                raise CompletionError("simulated plural failure")
            base_key = BASE_KEY_PATTERN.search(user_prompt).group(1)
            if base_key not in self.plural_responses:
                raise CompletionError(f"no plural response scripted for '{base_key}'")
            response = self.plural_responses[base_key]
            return response if isinstance(response, str) else json.dumps(response, ensure_ascii=False)

        if self.fail_translations:
            raise CompletionError("simulated translation failure")
        text = TEXT_PATTERN.search(user_prompt).group(1)
        return self.translations.get(text, f"{self.prefix} {text}")


@pytest.fixture
def fake_client_class():
    return FakeCompletionClient


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / 'config'
    os.makedirs(path / 'plural_rules')
    return path


@pytest.fixture
def write_json():
    def _write(path, data):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        return str(path)
    return _write


@pytest.fixture
def config_loader(config_dir):
    return LanguageConfigLoader(str(config_dir), PluralRuleCache())


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logger side effects (handlers, propagation) between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
