import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .constants import DEFAULT_DOCS_PREFIX, DEFAULT_VERSION_HEADER
from .versioning.registry import ConfigurationError


load_dotenv()

logger = logging.getLogger('api.config')

# Accepted spellings of the wrapping section key
SECTION_KEYS = ('apiVersioning', 'ApiVersioning', 'api_versioning')


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """
    Environment-driven settings, read once at import.

    Env vars:
      - API_VERSIONING_CONFIG: path to the YAML/JSON versioning file
      - API_VERSION_HEADER (default: X-API-Version)
      - API_DOCS_ENABLED (default: true)
      - API_DOCS_PREFIX (default: /openapi)
      - REQUEST_LOG_ENABLED (default: true)
      - REQUEST_LOG_SAMPLE_RATE (default: 0.0)
      - LOG_LEVEL (default: INFO)
    """
    API_VERSIONING_CONFIG = os.getenv('API_VERSIONING_CONFIG', '')
    API_VERSION_HEADER = os.getenv('API_VERSION_HEADER', DEFAULT_VERSION_HEADER)
    API_DOCS_ENABLED = _env_flag('API_DOCS_ENABLED', 'true')
    API_DOCS_PREFIX = os.getenv('API_DOCS_PREFIX', DEFAULT_DOCS_PREFIX)
    REQUEST_LOG_ENABLED = _env_flag('REQUEST_LOG_ENABLED', 'true')
    REQUEST_LOG_SAMPLE_RATE = _env_float('REQUEST_LOG_SAMPLE_RATE', 0.0)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler unless the host application already configured logging."""
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=getattr(logging, (level or Config.LOG_LEVEL), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def extract_section(data: Any) -> Dict[str, Any]:
    """Return the versioning section whether or not it is wrapped in apiVersioning."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"API versioning configuration must be a mapping, got {type(data).__name__}"
        )
    for key in SECTION_KEYS:
        if key in data:
            return extract_section(data[key])
    return data


def load_versioning_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the raw versioning section from a YAML or JSON file.

    Args:
        path: File path; defaults to API_VERSIONING_CONFIG

    Returns:
        The section as a dict. Empty when no file is configured, in which case the
        registry falls back to its default version.

    Raises:
        ConfigurationError: If a configured file is missing or cannot be parsed
    """
    path = path or Config.API_VERSIONING_CONFIG
    if not path:
        logger.info("API_VERSIONING_CONFIG not set, no API versions configured")
        return {}

    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"API versioning config file not found: {file_path}")

    try:
        data = yaml.safe_load(file_path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse API versioning config {file_path}: {e}") from e

    return extract_section(data)
