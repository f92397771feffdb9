"""
Prompt builders for translation and plural expansion requests.

Each builder is a plain dataclass whose optional sections are explicit
fields. ``render()`` is deterministic: the same inputs always produce the same
prompt text, which keeps the prompts easy to pin down in tests.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

TRANSLATION_SYSTEM_PROMPT = 'You are a professional translator with expertise in localization.'

PLURAL_SYSTEM_PROMPT = (
    'You are a professional translator with expertise in localization and '
    'pluralization rules across different languages.'
)

PRESERVE_FORMATTING_INSTRUCTION = (
    'Important: Preserve all formatting, line breaks (\\n), and variables ({{variable_name}}). '
    'Do not translate the variable names inside the double curly braces.'
)

RETURN_ONLY_INSTRUCTION = 'Return only the translated text without any explanations or additional text.'

# `_one` is left out: the source `_one` key is translated on its own.
PLURAL_SUFFIX_DESCRIPTIONS = [
    ('_zero', 'for zero items'),
    ('_two', 'for exactly two items, if applicable in the language'),
    ('_few', 'for a few items, if applicable in the language'),
    ('_many', 'for many items, if applicable in the language'),
    ('_other', 'for all other cases'),
]


def _format_json_block(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


@dataclass
class TranslationPrompt:
    """User prompt for translating a single catalog value."""
    text: str
    source_language: str
    target_language: str
    glossary: Dict[str, str] = field(default_factory=dict)
    style_guide: Dict[str, Any] = field(default_factory=dict)

    def glossary_section(self) -> str:
        if not self.glossary:
            return ''
        return ('Use the following glossary for consistent translation of domain-specific terms:\n'
                f'{_format_json_block(self.glossary)}')

    def style_guide_section(self) -> str:
        if not self.style_guide:
            return ''
        return f'Follow these style guidelines:\n{_format_json_block(self.style_guide)}'

    def render(self) -> str:
        sections = [
            f'Translate the following text from {self.source_language} to {self.target_language}:',
            f'Text: "{self.text}"',
            self.glossary_section(),
            self.style_guide_section(),
            PRESERVE_FORMATTING_INSTRUCTION,
            RETURN_ONLY_INSTRUCTION,
        ]
        return '\n\n'.join(section for section in sections if section)


@dataclass
class PluralPrompt:
    """User prompt asking for every plural form a language needs for one key."""
    base_key: str
    plural_value: str
    translated_other: str
    target_language: str
    singular_value: Optional[str] = None
    instructions: List[str] = field(default_factory=list)
    examples: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def instructions_section(self) -> str:
        return '\n'.join(self.instructions)

    def examples_section(self) -> str:
        if not self.examples:
            return ''
        lines = ['Examples of correct plural forms:']
        lines.extend(
            f'{example_key}: {_format_json_block(forms)}'
            for example_key, forms in self.examples.items()
        )
        return '\n'.join(lines)

    def render(self) -> str:
        lines = [f'I need to create plural forms for the following translation in {self.target_language}:']
        if self.singular_value is not None:
            lines.append(f'Original English (singular): "{self.singular_value}"')
        lines.extend([
            f'Original English (plural): "{self.plural_value}"',
            f'Translated plural form ({self.target_language}): "{self.translated_other}"',
            f'Base key to use: "{self.base_key}"',
            '',
            f'For {self.target_language}, generate all appropriate plural forms using the following suffixes:',
        ])
        lines.extend(f'- {suffix} ({description})' for suffix, description in PLURAL_SUFFIX_DESCRIPTIONS)
        lines.append('')

        instructions = self.instructions_section()
        if instructions:
            lines.extend([instructions, ''])
        examples = self.examples_section()
        if examples:
            lines.extend([examples, ''])

        lines.extend([
            'Important:',
            '1. Only include plural forms that are grammatically necessary in the target language',
            '2. Preserve all variables like {{count}} in each form',
            f'3. Return the result as a valid JSON object with each key being EXACTLY "{self.base_key}" + suffix '
            f'(e.g. "{self.base_key}_zero", "{self.base_key}_other")',
            '4. Make sure the translation is grammatically correct for each plural form',
            '5. Do not change the base key name under any circumstances',
            '',
            'CRITICAL: Return ONLY the raw JSON object with no markdown formatting, '
            'no code blocks (```), and no explanations.',
        ])
        return '\n'.join(lines)
