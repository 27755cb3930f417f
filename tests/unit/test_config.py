"""
Unit tests for configuration management using Pydantic Settings.

Tests AppConfig defaults, environment overrides, the YAML credentials
fallback and the lazily cached singleton.
"""

import pytest
from pydantic import ValidationError

from nyt_harvest.config import (
    AppConfig,
    get_app_config,
    load_api_key_from_yaml,
    DEFAULT_SEARCH_URL,
    PAGE_SIZE,
)
from nyt_harvest.exceptions import ConfigurationError


class TestAppConfigDefaults:
    """Test default values without any environment."""

    def test_defaults(self):
        config = AppConfig()

        assert config.nyt_api_key is None
        assert config.search_url == DEFAULT_SEARCH_URL
        assert config.page_size == PAGE_SIZE == 10
        assert config.request_delay_sec == 1.0
        assert config.request_timeout_sec == 30.0
        assert config.retry_failed_pages == 0

    def test_reads_environment_variables(self, monkeypatch):
        monkeypatch.setenv('NYT_API_KEY', 'env-key')
        monkeypatch.setenv('REQUEST_DELAY_SEC', '2.5')
        monkeypatch.setenv('RETRY_FAILED_PAGES', '2')

        config = AppConfig()

        assert config.nyt_api_key == 'env-key'
        assert config.request_delay_sec == 2.5
        assert config.retry_failed_pages == 2

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / '.env').write_text('NYT_API_KEY=dotenv-key\nOUTPUT_DIR=out\n', encoding='utf-8')

        config = AppConfig()

        assert config.nyt_api_key == 'dotenv-key'
        assert config.output_dir == 'out'

    def test_rejects_negative_delay(self, monkeypatch):
        monkeypatch.setenv('REQUEST_DELAY_SEC', '-1')

        with pytest.raises(ValidationError):
            AppConfig()


class TestResolveApiKey:
    """Test API key resolution order: environment, then YAML file."""

    def test_environment_key_wins(self, tmp_path):
        credentials = tmp_path / 'credentials.yaml'
        credentials.write_text('api_key: yaml-key\n', encoding='utf-8')

        config = AppConfig(nyt_api_key='env-key', nyt_credentials_file=str(credentials))

        assert config.resolve_api_key() == 'env-key'

    def test_falls_back_to_yaml(self, tmp_path):
        credentials = tmp_path / 'credentials.yaml'
        credentials.write_text('nyt:\n  api_key: yaml-key\n', encoding='utf-8')

        config = AppConfig(nyt_credentials_file=str(credentials))

        assert config.resolve_api_key() == 'yaml-key'

    def test_raises_when_nothing_configured(self):
        with pytest.raises(ConfigurationError, match="No API key configured"):
            AppConfig().resolve_api_key()


class TestLoadApiKeyFromYaml:
    """Test the YAML credentials loader."""

    def test_flat_layout(self, tmp_path):
        path = tmp_path / 'c.yaml'
        path.write_text('api_key: abc123\n', encoding='utf-8')

        assert load_api_key_from_yaml(str(path)) == 'abc123'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Credentials file not found"):
            load_api_key_from_yaml(str(tmp_path / 'missing.yaml'))

    def test_missing_entry(self, tmp_path):
        path = tmp_path / 'c.yaml'
        path.write_text('other: value\n', encoding='utf-8')

        with pytest.raises(ConfigurationError, match="No 'api_key' entry"):
            load_api_key_from_yaml(str(path))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / 'c.yaml'
        path.write_text('- just\n- a list\n', encoding='utf-8')

        with pytest.raises(ConfigurationError, match="not a mapping"):
            load_api_key_from_yaml(str(path))


class TestGetAppConfig:
    """Test the lazily cached singleton."""

    def test_returns_same_instance(self):
        config = get_app_config()
        config2 = get_app_config()

        assert config is config2
