"""Per-catalog translation driver."""
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from tqdm import tqdm

from i18n_translator.catalog_store import (
    CatalogError,
    check_source_plural_categories,
    load_catalog,
    save_catalog
)
from i18n_translator.completion_client import (
    TRANSLATION_COMPLETION,
    CompletionClient,
    CompletionError
)
from i18n_translator.language_config import LanguageConfigLoader
from i18n_translator.logging_config import get_logger
from i18n_translator.pluralizer import PluralExpander, base_key_of, is_plural_key
from i18n_translator.prompts import TRANSLATION_SYSTEM_PROMPT, TranslationPrompt
from i18n_translator.translation_validator import (
    check_key_coverage,
    check_placeholder_parity,
    clean_translated_text
)

logger = get_logger(__name__)

CatalogCallback = Callable[[Dict[str, str]], None]


class TranslationRejectedError(Exception):
    """Raised when a completion was received but cannot be used as a translation."""


@dataclass
class TranslationStats:
    """Outcome counts for one source/target catalog pair."""
    total: int = 0
    translated: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def summary(self) -> str:
        return (f"Total: {self.total}, Translated: {self.translated}, "
                f"Skipped: {self.skipped}, Failed: {self.failed}")


class Translator:
    """
    Translates every untranslated key of a source catalog into a target language.

    Keys are processed one at a time in source order. A key that already has a
    non-empty value in the target catalog is never sent to the model and never
    overwritten, which makes re-runs incremental.

    Args:
        client: Completion backend used for translation and plural expansion.
        config_loader: Loader for glossaries, style guides and plural rules.
        language_names: Optional mapping of language code to display name used in prompts.
        count_expanded_plural_forms: When True, every extra plural form produced by an
            expansion also counts towards ``translated``, so ``translated`` may exceed
            ``total``. When False, only source keys are counted.
        show_progress: Whether to display a tqdm progress bar.
    """

    def __init__(
            self,
            client: CompletionClient,
            config_loader: LanguageConfigLoader,
            language_names: Optional[Dict[str, str]] = None,
            count_expanded_plural_forms: bool = True,
            show_progress: bool = True
    ):
        self.client = client
        self.config_loader = config_loader
        self.language_names = language_names or {}
        self.count_expanded_plural_forms = count_expanded_plural_forms
        self.show_progress = show_progress
        self.plural_expander = PluralExpander(client, config_loader, self.language_names)

    def language_name(self, language_code: str) -> str:
        """Return the display name for ``language_code``, or the code itself if unknown."""
        return self.language_names.get(language_code, language_code)

    async def translate_string(
            self,
            text: str,
            source_language: str,
            target_language: str,
            glossary: Dict[str, str],
            style_guide: Dict[str, Any]
    ) -> str:
        """
        Translate a single catalog value.

        Raises:
            CompletionError: If the completion request fails.
            TranslationRejectedError: If the response drops or alters placeholders.
        """
        prompt = TranslationPrompt(
            text=text,
            source_language=self.language_name(source_language),
            target_language=self.language_name(target_language),
            glossary=glossary,
            style_guide=style_guide,
        )
        response = await self.client.complete(TRANSLATION_SYSTEM_PROMPT, prompt.render(), TRANSLATION_COMPLETION)
        translated_text = clean_translated_text(response, text)

        if not translated_text:
            raise TranslationRejectedError("model returned an empty translation")
        if not check_placeholder_parity(text, translated_text):
            raise TranslationRejectedError(f"placeholder mismatch in translation '{translated_text}'")
        return translated_text

    def _merge_plural_forms(
            self,
            key: str,
            plural_forms: Dict[str, str],
            merged: Dict[str, str],
            existing_catalog: Dict[str, str]
    ) -> int:
        """Merge expansion output, returning the number of extra keys written besides ``key``."""
        extra_keys = 0
        for plural_key, plural_value in plural_forms.items():
            if plural_key != key and existing_catalog.get(plural_key):
                logger.debug("Keeping existing translation for plural form '%s'", plural_key)
                continue
            merged[plural_key] = plural_value
            if plural_key != key:
                extra_keys += 1
        return extra_keys

    async def translate_catalog(
            self,
            source_language: str,
            target_language: str,
            source_catalog: Dict[str, str],
            existing_catalog: Dict[str, str],
            glossary: Optional[Dict[str, str]] = None,
            style_guide: Optional[Dict[str, Any]] = None,
            on_update: Optional[CatalogCallback] = None
    ) -> Tuple[Dict[str, str], TranslationStats]:
        """
        Translate all untranslated keys of ``source_catalog``.

        Per-key failures are logged and counted, never raised.

        Args:
            source_language: Source language code.
            target_language: Target language code.
            source_catalog: The catalog to translate from.
            existing_catalog: Translations already present for the target language.
            glossary: Advisory term mapping for the prompt.
            style_guide: Advisory style document for the prompt.
            on_update: Called with the merged catalog after every successful key.

        Returns:
            The merged catalog and the run statistics.
        """
        glossary = glossary or {}
        style_guide = style_guide or {}
        stats = TranslationStats(total=len(source_catalog))
        merged = dict(existing_catalog)

        with tqdm(
            source_catalog.items(),
            desc=f"Translating {source_language} -> {target_language}",
            unit="key",
            disable=not self.show_progress
        ) as progress:
            for key, value in progress:
                if existing_catalog.get(key):
                    logger.debug("Skipping already translated key: %s", key)
                    stats.skipped += 1
                    continue

                logger.info("Translating key: %s", key)
                try:
                    translated_text = await self.translate_string(
                        value, source_language, target_language, glossary, style_guide
                    )
                except CompletionError as exc:
                    logger.error("Failed to translate key '%s': %s", key, exc)
                    stats.failed += 1
                    continue
                except TranslationRejectedError as exc:
                    logger.error("Discarding translation for key '%s': %s", key, exc)
                    stats.failed += 1
                    continue

                if is_plural_key(key, value):
                    logger.info("Detected plural key: %s", key)
                    plural_forms = await self.plural_expander.generate_plural_forms(
                        key,
                        value,
                        translated_text,
                        target_language,
                        singular_value=source_catalog.get(f"{base_key_of(key)}_one")
                    )
                    extra_keys = self._merge_plural_forms(key, plural_forms, merged, existing_catalog)
                    stats.translated += 1
                    if self.count_expanded_plural_forms:
                        stats.translated += extra_keys
                else:
                    merged[key] = translated_text
                    stats.translated += 1

                if on_update is not None:
                    try:
                        on_update(merged)
                    except OSError as exc:
                        logger.error("Could not persist progress after key '%s': %s", key, exc)

        return merged, stats

    async def translate_file(
            self,
            source_language: str,
            target_language: str,
            source_file_path: str,
            target_file_path: str
    ) -> TranslationStats:
        """
        Translate a source catalog file into a target catalog file.

        The target file is rewritten after every successfully translated key,
        so an interrupted run resumes where it stopped.

        Raises:
            CatalogError: If a catalog is malformed or the source uses
                plural categories other than `_one` and `_other`.
            OSError, json.JSONDecodeError: If a catalog cannot be read.
        """
        logger.info("Translating from %s to %s...", source_language, target_language)

        source_catalog = load_catalog(source_file_path)
        unsupported = check_source_plural_categories(source_catalog)
        if unsupported:
            raise CatalogError(
                f"Source catalog '{source_file_path}' uses plural categories other than _one/_other: "
                f"{', '.join(unsupported)}"
            )
        existing_catalog = load_catalog(target_file_path)

        glossary = self.config_loader.load_glossary(target_language)
        style_guide = self.config_loader.load_style_guide(target_language)

        def persist(catalog: Dict[str, str]) -> None:
            save_catalog(target_file_path, catalog)

        merged, stats = await self.translate_catalog(
            source_language,
            target_language,
            source_catalog,
            existing_catalog,
            glossary,
            style_guide,
            on_update=persist
        )

        if stats.translated:
            # Catches up if an intermediate write failed.
            save_catalog(target_file_path, merged)

        missing_keys, _ = check_key_coverage(set(source_catalog), {k for k, v in merged.items() if v})
        if missing_keys:
            logger.warning("%d source key(s) remain untranslated for %s.", len(missing_keys), target_language)

        logger.info("Translation completed: %s", stats.summary())
        return stats
