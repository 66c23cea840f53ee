import json

import pytest

from moodle_dfexplain import main as cli
from moodle_dfexplain.config import ConfigHelper


@pytest.fixture(autouse=True)
def no_debugger(monkeypatch):
    # Coverage and debuggers set a trace function, which would make errors re-raise
    monkeypatch.setattr(cli, 'check_debug', lambda: False)


@pytest.fixture
def attempt_file(tmp_path):
    def _write(data):
        path = tmp_path / 'attempt.json'
        path.write_text(json.dumps(data), encoding='utf-8')
        return str(path)

    return _write


ATTEMPT = {
    'usage_id': 7,
    'slot': 2,
    'context': {'id': 99, 'level': 'module'},
    'steps': [{'behaviour_vars': {'explanation': 'x < y', 'explanationformat': '1'}}],
}


def test_render_input(attempt_file, tmp_path, capsys):
    cli.main([attempt_file(ATTEMPT), '-p', str(tmp_path)])

    out = capsys.readouterr().out
    assert out.startswith('<div class="ablock"><div class="answer">')
    assert 'name="q7:2_-explanation"' in out
    assert '>x &lt; y</textarea>' in out


def test_render_read_only(attempt_file, tmp_path, capsys):
    cli.main([attempt_file(ATTEMPT), '--readonly', '-p', str(tmp_path)])

    out = capsys.readouterr().out
    assert '<div class="explanation_readonly">x &lt; y</div>' in out
    assert '<textarea' not in out


def test_requirements_use_context_from_file(attempt_file, tmp_path, capsys):
    cli.main([attempt_file(ATTEMPT), '--requirements', '-p', str(tmp_path)])

    out = capsys.readouterr().out
    requirements = json.loads(out[out.index('\n[') + 1 :])
    assert requirements == [
        {
            'editor': 'tiny',
            'element_id': 'q7:2_-explanation_id',
            'options': {'context': {'id': 99, 'level': 'module'}, 'autosave': False},
            'fp_options': {'return_types': 1},
        }
    ]


def test_context_id_option_wins(attempt_file, tmp_path, capsys):
    cli.main([attempt_file(ATTEMPT), '--requirements', '-ctx', '5', '-p', str(tmp_path)])

    out = capsys.readouterr().out
    assert '"id": 5' in out


def test_summary(attempt_file, tmp_path, capsys):
    cli.main([attempt_file(ATTEMPT), '--summary', '-p', str(tmp_path)])

    assert capsys.readouterr().out.strip() == 'Explanation: x < y'


def test_config_is_used(attempt_file, tmp_path, capsys):
    (tmp_path / 'config.json').write_text(json.dumps({'texteditors': ['textarea'], 'lang': 'de'}), encoding='utf-8')

    cli.main([attempt_file(ATTEMPT), '-p', str(tmp_path)])

    out = capsys.readouterr().out
    assert '<p>Bitte begründen Sie Ihre Antwort:</p>' in out
    assert '<select' in out


def test_init_writes_config(tmp_path):
    with pytest.raises(SystemExit) as exit_info:
        cli.main(['--init', '-p', str(tmp_path)])

    assert exit_info.value.code == 0
    config = ConfigHelper(str(tmp_path))
    config.load()
    assert config.get_texteditors() == ['tiny', 'atto', 'textarea']


def test_missing_attempt_file_argument(tmp_path):
    with pytest.raises(SystemExit) as exit_info:
        cli.main(['-p', str(tmp_path)])

    assert exit_info.value.code == 2


def test_invalid_attempt_exits_with_error(attempt_file, tmp_path, capsys):
    with pytest.raises(SystemExit) as exit_info:
        cli.main([attempt_file({'slot': 1}), '-p', str(tmp_path)])

    assert exit_info.value.code == 1
    assert 'usage_id' in capsys.readouterr().err


def test_broken_config_exits(attempt_file, tmp_path):
    (tmp_path / 'config.json').write_text('{', encoding='utf-8')

    with pytest.raises(SystemExit) as exit_info:
        cli.main([attempt_file(ATTEMPT), '-p', str(tmp_path)])

    assert exit_info.value.code == -1


def test_errors_are_reported_to_sentry(attempt_file, tmp_path, monkeypatch):
    (tmp_path / 'config.json').write_text(
        json.dumps({'sentry_dsn': 'https://key@example.invalid/1'}), encoding='utf-8'
    )
    captured = []
    monkeypatch.setattr(cli.sentry_sdk, 'init', lambda dsn: None)
    monkeypatch.setattr(cli.sentry_sdk, 'capture_exception', captured.append)

    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / 'missing.json'), '-p', str(tmp_path)])

    assert len(captured) == 1
    assert 'missing.json' in str(captured[0])
