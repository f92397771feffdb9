from i18n_translator.prompts import PluralPrompt, TranslationPrompt

PRESERVE = ('Important: Preserve all formatting, line breaks (\\n), and variables ({{variable_name}}). '
            'Do not translate the variable names inside the double curly braces.')
RETURN_ONLY = 'Return only the translated text without any explanations or additional text.'


def test_translation_prompt_without_optional_sections():
    prompt = TranslationPrompt(text="Hello {{name}}", source_language="English", target_language="Arabic")

    assert prompt.render() == (
        'Translate the following text from English to Arabic:\n\n'
        'Text: "Hello {{name}}"\n\n'
        f'{PRESERVE}\n\n'
        f'{RETURN_ONLY}'
    )


def test_translation_prompt_with_glossary_and_style_guide():
    prompt = TranslationPrompt(
        text="Open the dashboard",
        source_language="English",
        target_language="German",
        glossary={"dashboard": "Übersicht"},
        style_guide={"tone": "Formal"},
    )

    assert prompt.render() == (
        'Translate the following text from English to German:\n\n'
        'Text: "Open the dashboard"\n\n'
        'Use the following glossary for consistent translation of domain-specific terms:\n'
        '{\n  "dashboard": "Übersicht"\n}\n\n'
        'Follow these style guidelines:\n'
        '{\n  "tone": "Formal"\n}\n\n'
        f'{PRESERVE}\n\n'
        f'{RETURN_ONLY}'
    )


def test_translation_prompt_style_guide_only():
    rendered = TranslationPrompt(
        text="Save", source_language="en", target_language="fr", style_guide={"tone": "Casual"}
    ).render()

    assert 'glossary' not in rendered
    assert 'Follow these style guidelines:' in rendered


def test_plural_prompt_golden():
    prompt = PluralPrompt(
        base_key="count",
        plural_value="{{count}} items",
        translated_other="{{count}} Elemente",
        target_language="German",
        singular_value="{{count}} item",
    )

    expected = '\n'.join([
        'I need to create plural forms for the following translation in German:',
        'Original English (singular): "{{count}} item"',
        'Original English (plural): "{{count}} items"',
        'Translated plural form (German): "{{count}} Elemente"',
        'Base key to use: "count"',
        '',
        'For German, generate all appropriate plural forms using the following suffixes:',
        '- _zero (for zero items)',
        '- _two (for exactly two items, if applicable in the language)',
        '- _few (for a few items, if applicable in the language)',
        '- _many (for many items, if applicable in the language)',
        '- _other (for all other cases)',
        '',
        'Important:',
        '1. Only include plural forms that are grammatically necessary in the target language',
        '2. Preserve all variables like {{count}} in each form',
        '3. Return the result as a valid JSON object with each key being EXACTLY "count" + suffix '
        '(e.g. "count_zero", "count_other")',
        '4. Make sure the translation is grammatically correct for each plural form',
        '5. Do not change the base key name under any circumstances',
        '',
        'CRITICAL: Return ONLY the raw JSON object with no markdown formatting, '
        'no code blocks (```), and no explanations.',
    ])
    assert prompt.render() == expected


def test_plural_prompt_never_requests_one_suffix():
    rendered = PluralPrompt(
        base_key="files", plural_value="{{count}} files", translated_other="{{count}} plików",
        target_language="Polish"
    ).render()

    assert '- _one' not in rendered
    assert 'Original English (singular)' not in rendered


def test_plural_prompt_with_language_rules():
    rendered = PluralPrompt(
        base_key="items",
        plural_value="{{count}} items",
        translated_other="{{count}} عنصر",
        target_language="Arabic",
        instructions=["Arabic has six forms.", "Always include _zero."],
        examples={"days": {"days_two": "{{count}} يومان"}},
    ).render()

    assert 'Arabic has six forms.\nAlways include _zero.\n\n' in rendered
    assert 'Examples of correct plural forms:\ndays: {\n  "days_two": "{{count}} يومان"\n}\n\n' in rendered
    # Language hints come before the output constraints
    assert rendered.index('Arabic has six forms.') < rendered.index('Examples of correct plural forms:')
    assert rendered.index('Examples of correct plural forms:') < rendered.index('Important:')
