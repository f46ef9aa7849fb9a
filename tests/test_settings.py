"""
Unit tests for loading layout settings from YAML.
"""
import logging
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_layout.settings import (
    SETTINGS_ENV_VAR,
    SettingsError,
    get_default_settings,
    load_settings,
    settings_path,
)


@pytest.fixture
def settings_file(tmp_path):
    def write(content):
        path = tmp_path / 'layout_settings.yaml'
        path.write_text(content, encoding='utf-8')
        return str(path)
    return write


class TestLoadSettings:
    """Tests for the YAML settings layer."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(str(tmp_path / 'nope.yaml')) == get_default_settings()

    def test_empty_file_gives_defaults(self, settings_file):
        assert load_settings(settings_file('')) == get_default_settings()

    def test_values_override_defaults(self, settings_file):
        settings = load_settings(settings_file('cache_capacity: 20\nmin_scale: 0.5\nlog_level: debug\n'))
        assert settings['cache_capacity'] == 20
        assert settings['min_scale'] == 0.5
        assert settings['log_level'] == 'DEBUG'
        assert settings['default_container'] == {'width': 1280, 'height': 720}

    def test_partial_container_is_merged(self, settings_file):
        settings = load_settings(settings_file('default_container:\n  width: 1920\n'))
        assert settings['default_container'] == {'width': 1920, 'height': 720}

    def test_unknown_keys_ignored(self, settings_file, caplog):
        with caplog.at_level(logging.WARNING):
            settings = load_settings(settings_file('theme: dark\n'))
        assert 'theme' not in settings
        assert 'Ignoring unknown setting' in caplog.text

    @pytest.mark.parametrize('content', [
        'cache_capacity: 0\n',
        'cache_capacity: many\n',
        'min_scale: 0.1\n',
        'min_scale: 3\n',
        'default_container: 800\n',
        'default_container:\n  width: -5\n',
        'log_level: LOUD\n',
        '- just\n- a list\n',
        'key: [unclosed\n',
    ])
    def test_bad_settings_raise(self, settings_file, content):
        with pytest.raises(SettingsError):
            load_settings(settings_file(content))

    def test_env_var_selects_file(self, settings_file, monkeypatch):
        path = settings_file('cache_capacity: 7\n')
        monkeypatch.setenv(SETTINGS_ENV_VAR, path)
        assert settings_path() == path
        assert load_settings()['cache_capacity'] == 7

    def test_defaults_are_fresh_copies(self):
        settings = get_default_settings()
        settings['default_container']['width'] = 1
        assert get_default_settings()['default_container']['width'] == 1280
