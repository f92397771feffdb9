"""Per-language glossary, style guide and plural rule documents."""
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from i18n_translator.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PluralRules:
    """Language-specific hints used to enrich the plural expansion prompt."""
    instructions: List[str] = field(default_factory=list)
    examples: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PluralRules":
        instructions = data.get('instructions') or []
        examples = data.get('examples') or {}
        if not isinstance(instructions, list):
            raise ValueError("'instructions' must be a list of strings")
        if not isinstance(examples, dict):
            raise ValueError("'examples' must be an object of plural form mappings")
        return cls(instructions=[str(line) for line in instructions], examples=examples)


class PluralRuleCache:
    """Plural rules loaded during one run, keyed by language code."""

    def __init__(self):
        self._rules: Dict[str, PluralRules] = {}

    def get(self, language: str) -> Optional[PluralRules]:
        return self._rules.get(language)

    def put(self, language: str, rules: PluralRules) -> None:
        self._rules[language] = rules

    def __contains__(self, language: str) -> bool:
        return language in self._rules

    def __len__(self) -> int:
        return len(self._rules)


class LanguageConfigLoader:
    """
    Loads the optional per-language documents from a configuration directory.

    Layout::

        <config_dir>/<lang>_glossary.json
        <config_dir>/<lang>_style_guide.json
        <config_dir>/plural_rules/<lang>.json

    None of these files is required. A missing or unreadable document degrades
    the prompt rather than aborting the run.
    """

    def __init__(self, config_dir: str, plural_rule_cache: Optional[PluralRuleCache] = None):
        self.config_dir = config_dir
        self.plural_rule_cache = plural_rule_cache if plural_rule_cache is not None else PluralRuleCache()

    def glossary_path(self, language: str) -> str:
        return os.path.join(self.config_dir, f"{language}_glossary.json")

    def style_guide_path(self, language: str) -> str:
        return os.path.join(self.config_dir, f"{language}_style_guide.json")

    def plural_rules_path(self, language: str) -> str:
        return os.path.join(self.config_dir, 'plural_rules', f"{language}.json")

    def _load_optional_object(self, file_path: str, description: str, language: str) -> Dict[str, Any]:
        if not os.path.exists(file_path):
            logger.info("No %s found for %s. Proceeding without %s.", description, language, description)
            return {}
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as json_exc:
            logger.warning("Error decoding %s '%s': %s. Proceeding without %s.",
                           description, file_path, json_exc, description)
            return {}
        except OSError as os_exc:
            logger.warning("Could not read %s '%s': %s. Proceeding without %s.",
                           description, file_path, os_exc, description)
            return {}

        if not isinstance(data, dict):
            logger.warning("%s '%s' must contain a JSON object. Proceeding without %s.",
                           description.capitalize(), file_path, description)
            return {}
        return data

    def load_glossary(self, language: str) -> Dict[str, str]:
        """
        Load the glossary for a target language.

        Args:
            language: Target language code.

        Returns:
            A mapping of source term to fixed target term, empty if unavailable.
        """
        glossary = self._load_optional_object(self.glossary_path(language), 'glossary', language)
        return {str(term): str(translation) for term, translation in glossary.items()}

    def load_style_guide(self, language: str) -> Dict[str, Any]:
        """Load the style guide for a target language, empty if unavailable."""
        return self._load_optional_object(self.style_guide_path(language), 'style guide', language)

    def load_plural_rules(self, language: str) -> Optional[PluralRules]:
        """
        Load plural rules for a target language.

        Successfully loaded rules are cached for the remainder of the run.

        Args:
            language: Target language code.

        Returns:
            The plural rules, or None if there are none or they could not be read.
        """
        cached = self.plural_rule_cache.get(language)
        if cached is not None:
            return cached

        rules_path = self.plural_rules_path(language)
        if not os.path.exists(rules_path):
            logger.info("No plural rules found for %s. Using default rules.", language)
            return None

        try:
            with open(rules_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("plural rules must be a JSON object")
            rules = PluralRules.from_dict(data)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.error("Error loading plural rules for %s: %s", language, exc)
            return None

        self.plural_rule_cache.put(language, rules)
        return rules
