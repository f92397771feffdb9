"""
Command line entry point.

Usage:
    i18n-translator translate -s en -t ar,fr,es
    i18n-translator translate -s en -t de -i locales/src -o locales/out
"""
import argparse
import asyncio
import os
import sys
from typing import Callable, Dict, List, Optional, Sequence

from i18n_translator.app_config import load_app_config
from i18n_translator.completion_client import OpenAICompletionClient
from i18n_translator.language_config import LanguageConfigLoader, PluralRuleCache
from i18n_translator.logging_config import get_logger
from i18n_translator.translator import TranslationStats, Translator

logger = get_logger(__name__)

__version__ = '1.0.0'

TranslatorFactory = Callable[[str], Translator]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='i18n-translator',
        description='Translate product strings from a source language to target languages using OpenAI.'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command')

    translate = subparsers.add_parser(
        'translate',
        help='Translate strings from source language to target language(s)'
    )
    translate.add_argument('-s', '--source', required=True,
                           help='Source language code (e.g., en)')
    translate.add_argument('-t', '--target', required=True,
                           help='Comma-separated list of target language codes (e.g., ar,fr,es)')
    translate.add_argument('-i', '--input-dir', default=None,
                           help='Directory containing source language files (default: data/input)')
    translate.add_argument('-o', '--output-dir', default=None,
                           help='Directory for output translated files (default: data/output)')
    translate.add_argument('-c', '--config-dir', default=None,
                           help='Directory holding glossaries, style guides and plural rules (default: config)')
    translate.add_argument('--no-progress', action='store_true',
                           help='Disable the progress bar')
    return parser


def parse_target_languages(value: str, name_to_code: Optional[Dict[str, str]] = None) -> List[str]:
    """
    Split a comma-separated target list into language codes.

    Entries may also be configured language names (e.g. "German"). Blank
    entries and duplicates are dropped, keeping first-seen order.
    """
    name_to_code = name_to_code or {}
    languages: List[str] = []
    for entry in value.split(','):
        entry = entry.strip()
        if not entry:
            continue
        code = name_to_code.get(entry.lower(), entry)
        if code not in languages:
            languages.append(code)
    return languages


async def run_translations(
        translator_for: TranslatorFactory,
        source_language: str,
        target_languages: Sequence[str],
        source_file_path: str,
        output_dir: str
) -> Dict[str, Optional[TranslationStats]]:
    """
    Translate the source file into each target language in turn.

    A failure for one language is logged and does not stop the batch.

    Returns:
        Statistics per language, or None for languages that raised.
    """
    results: Dict[str, Optional[TranslationStats]] = {}
    for target_language in target_languages:
        target_file_path = os.path.join(output_dir, f"{target_language}.json")
        logger.info("Processing translation from %s to %s...", source_language, target_language)
        try:
            stats = await translator_for(target_language).translate_file(
                source_language,
                target_language,
                source_file_path,
                target_file_path
            )
        except Exception as exc:
            logger.error("Error translating to %s: %s", target_language, exc)
            results[target_language] = None
            continue

        logger.info("Translation to %s completed successfully", target_language)
        logger.info("  Total strings: %d", stats.total)
        logger.info("  Newly translated: %d", stats.translated)
        logger.info("  Already translated (skipped): %d", stats.skipped)
        logger.info("  Failed translations: %d", stats.failed)
        results[target_language] = stats
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != 'translate':
        parser.print_help()
        return 0

    app_config = load_app_config(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        config_dir=args.config_dir
    )

    source_file_path = os.path.join(app_config.input_dir, f"{args.source}.json")
    if not os.path.exists(source_file_path):
        logger.critical("Error: Source file %s does not exist", source_file_path)
        return 1

    target_languages = parse_target_languages(args.target, app_config.name_to_code)
    if not target_languages:
        logger.critical("Error: No target languages given")
        return 1

    translator = Translator(
        OpenAICompletionClient(app_config.openai_client),
        LanguageConfigLoader(app_config.config_dir, PluralRuleCache()),
        language_names=app_config.language_codes,
        count_expanded_plural_forms=app_config.count_expanded_plural_forms,
        show_progress=not args.no_progress
    )

    results = asyncio.run(run_translations(
        lambda _language: translator,
        args.source,
        target_languages,
        source_file_path,
        app_config.output_dir
    ))

    return 0 if all(stats is not None for stats in results.values()) else 1


if __name__ == '__main__':
    sys.exit(main())
