from typing import Dict, List, Set, Tuple
import re

# Matches template placeholders such as {{count}} or {{ user.name }}.
PLACEHOLDER_PATTERN = re.compile(r'\{\{[^{}]*\}\}')


def extract_placeholders(text: str) -> Set[str]:
    """
    Return the set of ``{{...}}`` placeholder tokens occurring in ``text``.

    Tokens are returned verbatim, including braces and inner whitespace, so a
    renamed or re-spaced variable counts as a different placeholder.
    """
    if not isinstance(text, str):
        raise ValueError("Input text must be a string.")
    return set(PLACEHOLDER_PATTERN.findall(text))


def has_placeholder(text: str) -> bool:
    """True if ``text`` contains both an opening and a closing placeholder marker."""
    return '{{' in text and '}}' in text


def check_placeholder_parity(base_string: str, target_string: str) -> bool:
    """
    Checks that a translation carries exactly the placeholders of its source.

    Placeholders may be reordered or repeated, since word order differs
    between languages, but none may be dropped, renamed or invented.

    Args:
        base_string: The source string.
        target_string: The translated string.

    Returns:
        True if both strings use the same set of placeholders, False otherwise.
    """
    return extract_placeholders(base_string) == extract_placeholders(target_string)


def find_placeholder_mismatches(base_string: str, translations: Dict[str, str]) -> List[str]:
    """Return the keys in ``translations`` whose value fails placeholder parity with ``base_string``."""
    return [
        key for key, value in translations.items()
        if not check_placeholder_parity(base_string, value)
    ]


def check_key_coverage(base_keys: Set[str], target_keys: Set[str]) -> Tuple[Set[str], Set[str]]:
    """
    Compares the keys of a target catalog against the source catalog.

    Args:
        base_keys: Keys of the source catalog.
        target_keys: Keys of the target catalog.

    Returns:
        A tuple (missing_keys, extra_keys): keys only in the source, and keys
        only in the target. Extra keys are expected for languages with more
        plural categories than the source.
    """
    missing_keys = base_keys - target_keys
    extra_keys = target_keys - base_keys
    return missing_keys, extra_keys


def clean_translated_text(translated_text: str, original_text: str) -> str:
    """
    Cleans the translated text by removing wrapping quotes or brackets that
    the model added but the original text did not have.

    Args:
        translated_text: The translated text.
        original_text: The original text.

    Returns:
        The cleaned translated text.
    """
    translated_text = translated_text.strip()
    if len(translated_text) >= 2:
        if translated_text.startswith('"') and translated_text.endswith('"') and not (
                original_text.startswith('"') and original_text.endswith('"')):
            translated_text = translated_text[1:-1]
        elif translated_text.startswith('[') and translated_text.endswith(']') and not (
                original_text.startswith('[') and original_text.endswith(']')):
            translated_text = translated_text[1:-1]
    return translated_text
