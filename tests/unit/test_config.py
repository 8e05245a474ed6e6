"""
Unit tests for environment-based configuration.
"""

import json

import pytest

from targetpharma.core.config import DEFAULT_APP_URL, Config, Environment
from targetpharma.core.exceptions import ConfigurationError

CONFIG_VARS = ('TARGETPHARMA_ENV', 'OPS_APP_URL', 'OPS_APP_ID', 'OPS_APP_KEY', 'OPS_TIMEOUT',
               'OPS_PAGE_SIZE', 'LOG_LEVEL', 'LOG_FILE', 'STRUCTURED_LOGGING')


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestConfig:
    """Test configuration loading and validation."""

    def test_defaults(self):
        config = Config()
        assert config.env is Environment.DEVELOPMENT
        assert config.app_url == DEFAULT_APP_URL
        assert config.app_id is None
        assert config.timeout == 30.0
        assert config.page_size == 50
        assert config['log_level'] == 'INFO'

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv('OPS_APP_ID', 'env-id')
        monkeypatch.setenv('OPS_PAGE_SIZE', '25')
        monkeypatch.setenv('OPS_TIMEOUT', '12.5')
        config = Config()
        assert config.app_id == 'env-id'
        assert config.page_size == 25
        assert config.timeout == 12.5

    def test_environment_from_variable(self, monkeypatch):
        monkeypatch.setenv('TARGETPHARMA_ENV', 'production')
        config = Config()
        assert config.env is Environment.PRODUCTION
        assert config.log_level == 'WARNING'
        assert config.structured_logging is True

    def test_testing_overrides(self):
        config = Config(env='testing')
        assert config.timeout == 5.0
        assert config.log_level == 'DEBUG'

    def test_unknown_environment(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Config(env='moon')
        assert exc_info.value.config_key == 'environment'

    @pytest.mark.parametrize("name,value", [
        ('OPS_PAGE_SIZE', '0'),
        ('OPS_TIMEOUT', '-1'),
        ('LOG_LEVEL', 'LOUD'),
        ('OPS_APP_URL', ''),
    ])
    def test_validation_failures(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigurationError):
            Config()

    def test_get_and_to_dict(self):
        config = Config()
        assert config.get('missing', 'fallback') == 'fallback'
        data = config.to_dict()
        data['page_size'] = 1
        assert config.page_size == 50


@pytest.mark.unit
class TestConfigFiles:
    """Test JSON configuration files."""

    def test_save_omits_credentials(self, tmp_path, monkeypatch):
        monkeypatch.setenv('OPS_APP_ID', 'secret-id')
        monkeypatch.setenv('OPS_APP_KEY', 'secret-key')
        path = tmp_path / 'config.json'
        Config().save_to_file(str(path))
        data = json.loads(path.read_text())
        assert 'app_id' not in data
        assert 'app_key' not in data
        assert data['page_size'] == 50

    def test_from_file_overrides(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'page_size': 10, 'app_url': 'https://example.org/ops'}))
        config = Config.from_file(str(path))
        assert config.page_size == 10
        assert config.app_url == 'https://example.org/ops'

    def test_from_file_validates(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'page_size': 0}))
        with pytest.raises(ConfigurationError):
            Config.from_file(str(path))

    def test_missing_file(self, tmp_path):
        path = tmp_path / 'nope.json'
        with pytest.raises(ConfigurationError) as exc_info:
            Config.from_file(str(path))
        assert exc_info.value.config_file == str(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{not json')
        with pytest.raises(ConfigurationError):
            Config.from_file(str(path))
