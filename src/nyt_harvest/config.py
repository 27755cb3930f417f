"""
Configuration management using Pydantic Settings.

Loads runtime configuration from environment variables and the .env file,
with an optional YAML credentials file as a fallback source for the API key.
Provides type-safe access to:
- Article Search API endpoint and key
- Rate limiting and retry settings
- Output directories for CSV exports and raw page dumps
"""

from pathlib import Path
from typing import Optional
import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nyt_harvest.exceptions import ConfigurationError


DEFAULT_SEARCH_URL = "https://api.nytimes.com/svc/search/v2/articlesearch.json"

# Fixed by the provider: every search page holds at most 10 documents
PAGE_SIZE = 10


def load_api_key_from_yaml(path: str) -> str:
    """
    Read the API key from a YAML credentials file.

    Two layouts are accepted:

        api_key: XXXX

    or, for files shared between several services:

        nyt:
          api_key: XXXX

    Args:
        path: Path to the YAML file

    Returns:
        The API key string

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If no api_key entry is found

    Example:
        >>> load_api_key_from_yaml('config/credentials.yaml')
        'abc123...'
    """
    credentials_path = Path(path)
    if not credentials_path.exists():
        raise FileNotFoundError(
            f"Credentials file not found at {credentials_path}. "
            f"Create it with an 'api_key' entry or set NYT_API_KEY instead."
        )

    with open(credentials_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Credentials file {credentials_path} is not a mapping")

    api_key = data.get('api_key')
    if api_key is None and isinstance(data.get('nyt'), dict):
        api_key = data['nyt'].get('api_key')

    if not api_key:
        raise ConfigurationError(
            f"No 'api_key' entry found in {credentials_path}"
        )

    return str(api_key)


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.

    Environment Variables (from .env):
        NYT_API_KEY: Article Search API key
        NYT_CREDENTIALS_FILE: Optional YAML file holding the key instead
        SEARCH_URL: Article Search endpoint
        REQUEST_DELAY_SEC: Fixed delay before each API call
        REQUEST_TIMEOUT_SEC: Per-call timeout
        MAX_RETRIES: Transport-level retries for connection errors and 5xx
        RETRY_FAILED_PAGES: Extra attempts for pages that return non-200
        OUTPUT_DIR: Directory for CSV exports
        RAW_DIR: Directory for per-page JSON dumps
        SENTINEL_AUTHOR: Author value separated into the secondary CSV

    Example:
        >>> config = get_app_config()
        >>> config.page_size
        10
        >>> config.resolve_api_key()
        'abc123...'
    """

    nyt_api_key: Optional[str] = Field(
        default=None,
        description="Article Search API key"
    )

    nyt_credentials_file: Optional[str] = Field(
        default=None,
        description="YAML file with an api_key entry, used when NYT_API_KEY is unset"
    )

    search_url: str = Field(
        default=DEFAULT_SEARCH_URL,
        description="Article Search API endpoint"
    )

    page_size: int = Field(
        default=PAGE_SIZE,
        gt=0,
        description="Documents per result page (fixed by the provider)"
    )

    request_delay_sec: float = Field(
        default=1.0,
        ge=0.0,
        description="Fixed delay before each API call (provider allows 5 calls/sec, 1000/day)"
    )

    request_timeout_sec: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-call HTTP timeout in seconds"
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        description="Transport retries for connection errors and 429/5xx responses"
    )

    backoff_factor: float = Field(
        default=0.5,
        ge=0.0,
        description="Exponential backoff factor between transport retries"
    )

    retry_failed_pages: int = Field(
        default=0,
        ge=0,
        description="Extra attempts for a page that returns a non-200 status"
    )

    output_dir: str = Field(
        default="data/output",
        description="Directory for CSV exports"
    )

    raw_dir: str = Field(
        default="data/raw",
        description="Directory for per-page JSON dumps"
    )

    sentinel_author: str = Field(
        default="Modern Love",
        description="Author value routed to the secondary partition"
    )

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    def resolve_api_key(self) -> str:
        """
        Return the API key from the environment, falling back to the YAML file.

        Raises:
            ConfigurationError: If neither source provides a key
        """
        if self.nyt_api_key:
            return self.nyt_api_key
        if self.nyt_credentials_file:
            return load_api_key_from_yaml(self.nyt_credentials_file)
        raise ConfigurationError(
            "No API key configured. Set NYT_API_KEY in .env "
            "or point NYT_CREDENTIALS_FILE at a YAML file with an 'api_key' entry."
        )


# Singleton pattern - loaded once, cached forever
_app_config: Optional[AppConfig] = None


def get_app_config() -> AppConfig:
    """
    Get global application config instance (lazy-loaded singleton).

    Returns:
        Singleton AppConfig instance

    Example:
        >>> config = get_app_config()
        >>> config2 = get_app_config()
        >>> config is config2  # Same instance
        True
    """
    global _app_config
    if _app_config is None:
        _app_config = AppConfig()
    return _app_config
