import json
import os

import pytest

from moodle_dfexplain.config import ConfigHelper
from moodle_dfexplain.types import TextFormat


def write_config(tmp_path, data):
    (tmp_path / 'config.json').write_text(json.dumps(data), encoding='utf-8')
    config = ConfigHelper(str(tmp_path))
    config.load()
    return config


def test_missing_config(tmp_path):
    config = ConfigHelper(str(tmp_path))

    assert not config.is_present()
    with pytest.raises(ConfigHelper.NoConfigError):
        config.load()


@pytest.mark.parametrize('content', ['{not json', '[1, 2]'])
def test_invalid_config(tmp_path, content):
    (tmp_path / 'config.json').write_text(content, encoding='utf-8')

    with pytest.raises(ConfigHelper.NoConfigError):
        ConfigHelper(str(tmp_path)).load()


def test_defaults_without_file(tmp_path):
    config = ConfigHelper(str(tmp_path))

    assert config.get_texteditors() == ['tiny', 'atto', 'textarea']
    assert config.get_htmleditor() is None
    assert config.get_lang() == 'en'
    assert config.get_default_explanation_format() == TextFormat.HTML
    assert config.get_sentry_dsn() is None
    with pytest.raises(ValueError):
        config.get_property('lang')


def test_read_values(tmp_path):
    config = write_config(
        tmp_path,
        {'texteditors': 'atto, textarea,', 'htmleditor': 'textarea', 'lang': 'de', 'default_explanation_format': '2'},
    )

    assert config.get_texteditors() == ['atto', 'textarea']
    assert config.get_default_explanation_format() == TextFormat.PLAIN
    assert config.get_string_manager().lang == 'de'

    registry = config.get_editor_registry()
    assert registry.enabled_names == ['atto', 'textarea']
    assert registry.preference == 'textarea'


def test_invalid_default_format_falls_back_to_html(tmp_path):
    config = write_config(tmp_path, {'default_explanation_format': 'latex'})

    assert config.get_default_explanation_format() == TextFormat.HTML


def test_set_defaults_writes_file(tmp_path):
    config = ConfigHelper(str(tmp_path))

    config.set_defaults()

    assert config.is_present()
    assert json.loads((tmp_path / 'config.json').read_text(encoding='utf-8')) == {
        'texteditors': ['tiny', 'atto', 'textarea'],
        'lang': 'en',
        'default_explanation_format': 1,
    }
    if os.name != 'nt':
        assert os.stat(config.config_path).st_mode & 0o777 == 0o600


def test_remove_property_rewrites_shorter_file(tmp_path):
    config = write_config(tmp_path, {'lang': 'de', 'sentry_dsn': 'https://key@example.invalid/1'})

    config.remove_property('sentry_dsn')

    reloaded = ConfigHelper(str(tmp_path))
    reloaded.load()
    assert reloaded.get_sentry_dsn() is None
    assert reloaded.get_lang() == 'de'
