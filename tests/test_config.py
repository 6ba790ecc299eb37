import logging

import pytest
from click.testing import CliRunner

import main as main_module
from config import DEFAULT_PALETTE, load_settings, truthy_env, valid_hex
from logging_utils import configure_logging

ENV_KEYS = (
    'KANBAN_DATA_DIR', 'KANBAN_ALT_SCREEN', 'KANBAN_LOG_LEVEL', 'KANBAN_LOG_FILE',
    'KANBAN_PRIMARY', 'KANBAN_TODO', 'KANBAN_INPROGRESS', 'KANBAN_DONE',
    'FORCE_COLOR', 'NO_COLOR',
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv + delenv so values loaded from .env files are undone afterwards
    for key in ENV_KEYS:
        monkeypatch.setenv(key, 'x')
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.mark.parametrize("value, expected", [
    (None, True), ("1", True), ("yes", True), ("0", False), ("off", False), (" False ", False), ("", False),
])
def test_truthy_env(value, expected):
    assert truthy_env(value) is expected


def test_valid_hex():
    assert valid_hex("#a1b2c3") == "#A1B2C3"
    assert valid_hex("a1b2c3") == "#A1B2C3"
    assert valid_hex("#zzz") is None
    assert valid_hex(None) is None


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.alt_screen is True
    assert settings.log_level == 'WARNING'
    assert settings.log_file is None
    assert settings.palette == DEFAULT_PALETTE
    assert settings.data_dir.name == 'data'


def test_env_file_values_and_precedence(clean_env, monkeypatch):
    env_file = clean_env / '.env'
    env_file.write_text(
        "KANBAN_DATA_DIR={0}\nKANBAN_LOG_LEVEL=debug\nKANBAN_TODO=#112233\n"
        "KANBAN_DONE=not-a-color\nKANBAN_ALT_SCREEN=off\n".format(clean_env / 'board')
    )
    monkeypatch.setenv('KANBAN_LOG_LEVEL', 'error')
    settings = load_settings()
    assert settings.data_dir == clean_env / 'board'
    assert settings.log_level == 'ERROR'
    assert settings.alt_screen is False
    assert settings.palette['KANBAN_TODO'] == '#112233'
    assert settings.palette['KANBAN_DONE'] == DEFAULT_PALETTE['KANBAN_DONE']


def test_configure_logging_replaces_handler(tmp_path):
    log_file = tmp_path / 'logs' / 'kanban.log'
    first = configure_logging('info', log_file)
    second = configure_logging('debug', log_file)
    root = logging.getLogger()
    try:
        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.DEBUG
        logging.getLogger('board').debug('hello')
        second.flush()
        assert 'DEBUG board: hello' in log_file.read_text()
    finally:
        configure_logging('WARNING', None)


def test_main_runs_a_session(clean_env):
    data_dir = clean_env / 'data'
    runner = CliRunner()
    try:
        result = runner.invoke(
            main_module.main,
            ['--data-dir', str(data_dir), '--no-alt-screen'],
            input='add Write spec\ndark\nexit\n',
        )
    finally:
        configure_logging('WARNING', None)
    assert result.exit_code == 0, result.output
    assert 'Goodbye.' in result.output
    assert 'Write spec' in (data_dir / 'kanban-tasks.json').read_text()
    assert (data_dir / 'kanban-darkmode.json').read_text() == 'true'
    assert (data_dir / 'kanban.log').exists()


def test_main_starts_from_corrupt_data(clean_env):
    data_dir = clean_env / 'data'
    data_dir.mkdir()
    (data_dir / 'kanban-tasks.json').write_text('{{{')
    try:
        result = CliRunner().invoke(main_module.main, ['--data-dir', str(data_dir), '--no-alt-screen'],
                                    input='exit\n')
    finally:
        configure_logging('WARNING', None)
    assert result.exit_code == 0, result.output
    assert (data_dir / 'kanban-tasks.json').read_text() == '[]'
