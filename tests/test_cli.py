"""Tests for the command line interface."""

import logging

import pytest
import yaml
from click.testing import CliRunner

from organize import cli


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """The CLI installs handlers on the root logger; drop them after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def config_file(tmp_path):
    """Write a minimal config file and return its path."""

    def _write(**organizer):
        path = tmp_path / 'config.yml'
        with open(path, 'w') as f:
            yaml.dump({'organizer': organizer, 'logging': {'level': 'WARNING'}}, f)
        return str(path)

    return _write


def test_run_organizes_given_directories(config_file, input_root, output_root, create_test_file):
    create_test_file(input_root, 'trip/a.jpg', b'a')
    create_test_file(input_root, 'readme.txt', b'r')
    report = output_root.parent / 'report.txt'

    result = CliRunner().invoke(cli, [
        '--config', config_file(), 'run', str(input_root),
        '--output', str(output_root), '--no-progress', '--report', str(report),
    ])

    assert result.exit_code == 0, result.output
    assert (output_root / '2023' / '3.marzo' / 'trip' / 'a.jpg').read_bytes() == b'a'
    assert "Copied: 1" in result.output
    assert "Skipped by extension: 1" in result.output
    assert report.exists()


def test_run_uses_configured_roots_and_dry_run(config_file, input_root, output_root, create_test_file):
    create_test_file(input_root, 'a.jpg')
    path = config_file(input_roots=[str(input_root)], output_root=str(output_root))

    result = CliRunner().invoke(cli, ['--config', path, 'run', '--dry-run', '--no-progress'])

    assert result.exit_code == 0, result.output
    assert "DRY RUN" in result.output
    assert not output_root.exists()


def test_run_without_directories_fails(config_file):
    result = CliRunner().invoke(cli, ['--config', config_file(), 'run', '--no-progress'])

    assert result.exit_code == 1
    assert "No input directories configured" in result.output


def test_invalid_config_is_rejected(config_file):
    result = CliRunner().invoke(cli, ['--config', config_file(month_locale='xx'), 'status'])

    assert result.exit_code == 1
    assert "Unsupported month locale" in result.output


def test_count_reports_per_root(config_file, tmp_path, create_test_file):
    create_test_file(tmp_path / 'one', 'a.jpg')
    create_test_file(tmp_path / 'one', '.hidden.jpg')
    create_test_file(tmp_path / 'two', 'b/c.png')

    result = CliRunner().invoke(cli, [
        '--config', config_file(), 'count', str(tmp_path / 'one'), str(tmp_path / 'two'),
    ])

    assert result.exit_code == 0, result.output
    assert "Total: 2 files" in result.output


def test_check_name_flags_reserved_names(config_file):
    result = CliRunner().invoke(cli, ['--config', config_file(), 'check-name', 'photo.jpg', 'CON.jpg'])

    assert result.exit_code == 1
    assert "CON.jpg: reserved name error" in result.output
    assert "OK: photo.jpg" in result.output


def test_status_shows_configuration(config_file, input_root, output_root):
    path = config_file(input_roots=[str(input_root)], output_root=str(output_root))

    result = CliRunner().invoke(cli, ['--config', path, 'status'])

    assert result.exit_code == 0, result.output
    assert f"Input: {input_root}" in result.output
    assert "free" in result.output


def test_log_dir_receives_log_file(tmp_path):
    path = tmp_path / 'config.yml'
    log_dir = tmp_path / 'logs'
    with open(path, 'w') as f:
        yaml.dump({'logging': {'level': 'INFO', 'log_dir': str(log_dir)}}, f)

    result = CliRunner().invoke(cli, ['--config', str(path), 'check-name', 'photo.jpg'])

    assert result.exit_code == 0, result.output
    assert (log_dir / 'picture_organizer.log').exists()
