"""Expansion of English `_other` keys into a target language's plural forms."""
import json
from typing import Dict, Optional

import jsonschema

from i18n_translator.catalog_store import CATALOG_SCHEMA, PLURAL_SUFFIXES
from i18n_translator.completion_client import (
    PLURAL_COMPLETION,
    CompletionClient,
    CompletionError
)
from i18n_translator.language_config import LanguageConfigLoader
from i18n_translator.logging_config import get_logger
from i18n_translator.prompts import PLURAL_SYSTEM_PROMPT, PluralPrompt
from i18n_translator.translation_validator import find_placeholder_mismatches, has_placeholder

logger = get_logger(__name__)

OTHER_SUFFIX = '_other'


def is_plural_key(key: str, value: str) -> bool:
    """
    Check if a key is a plural key that needs expansion.

    Args:
        key: The catalog key.
        value: The source value for the key.

    Returns:
        True if the key ends with `_other` and its value carries a template variable.
    """
    return key.endswith(OTHER_SUFFIX) and '{{' in value


def base_key_of(key: str) -> str:
    """Strip a trailing `_other` suffix from ``key``."""
    if key.endswith(OTHER_SUFFIX):
        return key[:-len(OTHER_SUFFIX)]
    return key


class PluralExpander:
    """Generates the full set of plural-form keys for a translated `_other` key."""

    def __init__(
            self,
            client: CompletionClient,
            config_loader: LanguageConfigLoader,
            language_names: Optional[Dict[str, str]] = None
    ):
        self.client = client
        self.config_loader = config_loader
        self.language_names = language_names or {}

    def build_prompt(
            self,
            base_key: str,
            value: str,
            translated_other: str,
            language: str,
            singular_value: Optional[str] = None
    ) -> PluralPrompt:
        rules = self.config_loader.load_plural_rules(language)
        return PluralPrompt(
            base_key=base_key,
            plural_value=value,
            translated_other=translated_other,
            target_language=self.language_names.get(language, language),
            singular_value=singular_value,
            instructions=list(rules.instructions) if rules else [],
            examples=dict(rules.examples) if rules else {},
        )

    def _parse_plural_forms(self, content: str, base_key: str, value: str) -> Dict[str, str]:
        """
        Parse and validate the model's plural-form document.

        Raises:
            json.JSONDecodeError: If the content is not JSON.
            jsonschema.ValidationError: If it is not a flat object of strings.
            ValueError: If it is empty, uses foreign keys or drops placeholders.
        """
        plural_forms = json.loads(content)
        jsonschema.validate(instance=plural_forms, schema=CATALOG_SCHEMA)

        if not plural_forms:
            raise ValueError("response contains no plural forms")

        allowed_keys = {f"{base_key}{suffix}" for suffix in PLURAL_SUFFIXES}
        foreign_keys = [k for k in plural_forms if k not in allowed_keys]
        if foreign_keys:
            raise ValueError(f"unexpected keys for base '{base_key}': {', '.join(foreign_keys)}")

        # The singular is translated from its own source key.
        singular_key = f"{base_key}_one"
        if plural_forms.pop(singular_key, None) is not None:
            logger.debug("Ignoring %s returned by plural expansion", singular_key)
        if not plural_forms:
            raise ValueError("response contains no plural forms besides the singular")

        mismatched = find_placeholder_mismatches(value, plural_forms)
        if mismatched:
            raise ValueError(f"placeholder mismatch in: {', '.join(mismatched)}")

        return plural_forms

    async def generate_plural_forms(
            self,
            key: str,
            value: str,
            translated_other: str,
            language: str,
            singular_value: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Generate plural forms for a key that ends with `_other`.

        Never raises: on any failure the result degrades to a single entry
        holding the already translated `_other` value.

        Args:
            key: The key ending with `_other`.
            value: The English plural value.
            translated_other: The translated value for the `_other` form.
            language: Target language code.
            singular_value: The English `_one` value, if the source has one.

        Returns:
            A mapping of plural-form key to translated value.
        """
        fallback = {key: translated_other}
        base_key = base_key_of(key)

        if not has_placeholder(value):
            return fallback

        logger.info("Generating plural forms for key: %s in %s", base_key, language)

        prompt = self.build_prompt(base_key, value, translated_other, language, singular_value)

        try:
            content = await self.client.complete(PLURAL_SYSTEM_PROMPT, prompt.render(), PLURAL_COMPLETION)
        except CompletionError as exc:
            logger.error("Error generating plural forms: %s", exc)
            return fallback

        try:
            plural_forms = self._parse_plural_forms(content, base_key, value)
        except json.JSONDecodeError as json_exc:
            logger.error("Failed to parse plural forms JSON: %s", json_exc)
            logger.warning("Response content: %s", content)
            return fallback
        except jsonschema.ValidationError as schema_exc:
            logger.error("Plural forms response did not match the required schema: %s", schema_exc.message)
            logger.warning("Response content: %s", content)
            return fallback
        except ValueError as exc:
            logger.error("Rejected plural forms for %s: %s", base_key, exc)
            logger.warning("Response content: %s", content)
            return fallback

        plural_forms.setdefault(key, translated_other)
        logger.info("Successfully generated %d plural forms for %s", len(plural_forms), base_key)
        return plural_forms
