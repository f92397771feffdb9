"""Application configuration module for the translator."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from openai import AsyncOpenAI

from i18n_translator.logging_config import setup_logger

DEFAULT_INPUT_DIR = os.path.join('data', 'input')
DEFAULT_OUTPUT_DIR = os.path.join('data', 'output')
DEFAULT_CONFIG_DIR = 'config'


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str
    input_dir: str
    output_dir: str
    config_dir: str

    # Language configuration
    language_codes: Dict[str, str]
    name_to_code: Dict[str, str]

    # Statistics policy
    count_expanded_plural_forms: bool

    # OpenAI client
    openai_client: Optional[AsyncOpenAI]


def _compute_project_root() -> str:
    """The project root is the directory the translator is invoked from."""
    return os.path.abspath(os.getcwd())


def _resolve_path(project_root: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.abspath(os.path.join(project_root, path))


def _load_dotenv_files(project_root: str) -> None:
    """Load the .env file from the project root, if present."""
    dotenv_path = os.path.join(project_root, '.env')

    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load the YAML configuration file, falling back to defaults on any problem."""
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('TRANSLATOR_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            print(f"Notice: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {}) or {}
    log_level_str = str(log_config.get('log_level', 'INFO')).upper()
    log_file_path = log_config.get('log_file_path', os.path.join('logs', 'translation_log.log'))
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _log_dotenv_status(logger: logging.Logger, project_root: str) -> None:
    """Log the status of .env file loading."""
    dotenv_path = os.path.join(project_root, '.env')

    if os.path.exists(dotenv_path):
        logger.info("Loaded environment variables from: %s", dotenv_path)
    else:
        logger.info(
            "No .env file found in project root ('%s'). Relying on system environment variables if any.",
            dotenv_path
        )


def _build_language_mappings(locales_list: List[Dict[str, str]]) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Build language code mappings from supported locales."""
    language_codes: Dict[str, str] = {}
    name_to_code: Dict[str, str] = {}

    for locale in locales_list:
        code = locale.get('code')
        name = locale.get('name')
        if code and name:
            language_codes[code] = name
            name_to_code[name.lower()] = code

    return language_codes, name_to_code


def _create_openai_client(logger: logging.Logger) -> AsyncOpenAI:
    """Create the OpenAI client, exiting if no API key is configured."""
    api_key_from_env = os.environ.get('OPENAI_API_KEY')
    if not api_key_from_env:
        logger.critical("CRITICAL: OPENAI_API_KEY is not set in the environment or the .env file.")
        sys.exit(1)

    try:
        client = AsyncOpenAI(api_key=api_key_from_env)
        logger.info("OpenAI client initialized successfully")
        return client
    except Exception as e:
        logger.critical("Failed to initialize OpenAI client: %s", str(e))
        logger.critical("Please check your OPENAI_API_KEY and network connectivity.")
        sys.exit(1)


def load_app_config(
        input_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
        config_dir: Optional[str] = None,
        create_client: bool = True
) -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Explicit directory arguments (e.g. from the command line) take precedence
    over values in the configuration file. Relative paths are resolved against
    the project root.

    Args:
        input_dir: Override for the directory holding source catalogs.
        output_dir: Override for the directory receiving target catalogs.
        config_dir: Override for the directory holding glossaries, style guides
            and plural rules.
        create_client: Whether to build the OpenAI client. Exits the process
            when enabled and OPENAI_API_KEY is missing.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    logger = _setup_logger_from_config(config)

    _log_dotenv_status(logger, project_root)

    locales_list = config.get('supported_locales', []) or []
    language_codes, name_to_code = _build_language_mappings(locales_list)

    openai_client = _create_openai_client(logger) if create_client else None

    return AppConfig(
        project_root=project_root,
        input_dir=_resolve_path(project_root, input_dir or config.get('input_dir', DEFAULT_INPUT_DIR)),
        output_dir=_resolve_path(project_root, output_dir or config.get('output_dir', DEFAULT_OUTPUT_DIR)),
        config_dir=_resolve_path(project_root, config_dir or config.get('config_dir', DEFAULT_CONFIG_DIR)),
        language_codes=language_codes,
        name_to_code=name_to_code,
        count_expanded_plural_forms=bool(config.get('count_expanded_plural_forms', True)),
        openai_client=openai_client
    )
