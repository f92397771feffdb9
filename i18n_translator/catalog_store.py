"""Loading and saving of flat key/value JSON catalogs."""
import json
import os
import re
import tempfile
from typing import Dict, List

import jsonschema

from i18n_translator.logging_config import get_logger

logger = get_logger(__name__)

# A catalog is a single flat JSON object whose values are all strings.
CATALOG_SCHEMA = {
    "type": "object",
    "patternProperties": {
        "^.*$": {"type": "string"}
    },
    "additionalProperties": False
}

PLURAL_SUFFIXES = ('_zero', '_one', '_two', '_few', '_many', '_other')

# Categories English never supplies; seeing them next to an `_other` sibling
# means the source language has a richer plural system than we handle.
_NON_ENGLISH_PLURAL_SUFFIX = re.compile(r'^(?P<base>.+)_(zero|two|few|many)$')


class CatalogError(ValueError):
    """Raised when a catalog document cannot be used as a flat string catalog."""


def load_catalog(file_path: str) -> Dict[str, str]:
    """
    Load a flat key/value catalog from a JSON file.

    A path that does not exist yields an empty catalog so that a first run
    against a new target language starts from scratch. Any other I/O or JSON
    error propagates to the caller.

    Args:
        file_path: The path to the catalog JSON file.

    Returns:
        The catalog as an insertion-ordered dictionary.

    Raises:
        CatalogError: If the document is not a flat object of strings.
    """
    if not os.path.exists(file_path):
        logger.info("Catalog '%s' not found. Starting from an empty catalog.", file_path)
        return {}

    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    try:
        jsonschema.validate(instance=data, schema=CATALOG_SCHEMA)
    except jsonschema.ValidationError as schema_exc:
        raise CatalogError(
            f"Catalog '{file_path}' must be a flat object of string values: {schema_exc.message}"
        ) from schema_exc

    return data


def save_catalog(file_path: str, catalog: Dict[str, str]) -> None:
    """
    Write a catalog as pretty-printed UTF-8 JSON, creating parent directories.

    The content is written to a sibling temporary file first and then moved
    over the destination, so readers never observe a half-written catalog.
    """
    directory = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(directory, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.catalog-', suffix='.json.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(catalog, f, ensure_ascii=False, indent=2)
            f.write('\n')
        os.replace(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def check_source_plural_categories(catalog: Dict[str, str]) -> List[str]:
    """
    Find source keys that belong to a plural group with non-English categories.

    Only `_one` and `_other` are expected in a source catalog. A key such as
    ``items_few`` is reported only when ``items_other`` also exists, so that
    unrelated keys like ``step_two`` are not flagged.

    Args:
        catalog: The source catalog.

    Returns:
        The offending keys, in catalog order.
    """
    offending = []
    for key in catalog:
        match = _NON_ENGLISH_PLURAL_SUFFIX.match(key)
        if match and f"{match.group('base')}_other" in catalog:
            offending.append(key)
    return offending
