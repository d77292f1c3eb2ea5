import logging

import pytest

from feed_pager import cli, rendering
from feed_pager.config import AppConfig, LoggingConfig
from feed_pager.exceptions import ConversionError, FeedFetchError
from feed_pager.models import Feed


@pytest.fixture
def restore_logging():
    original_handlers = list(logging.getLogger().handlers)
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
    try:
        yield
    finally:
        for handler in logging.getLogger().handlers[:]:
            logging.getLogger().removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            logging.getLogger().addHandler(handler)


@pytest.fixture
def fake_app(monkeypatch):
    captured = {}
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(cli, "load_config", lambda path: AppConfig())
    monkeypatch.setattr(cli, "load_feeds", lambda feeds, **kwargs: (Feed(title="F"),))
    monkeypatch.setattr(cli, "run", lambda session: captured.setdefault("session", session))
    return captured


def test_configure_logging_defaults_to_console_only(restore_logging):
    cli.configure_logging("INFO")

    handlers = logging.getLogger().handlers
    assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_with_log_file_keeps_terminal_clean(restore_logging, tmp_path):
    log_path = tmp_path / "logs" / "pager.log"
    cli.configure_logging("DEBUG", str(log_path))

    handlers = logging.getLogger().handlers
    assert log_path.exists()
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.FileHandler)


def test_configure_logging_rejects_unknown_level(restore_logging):
    with pytest.raises(ValueError):
        cli.configure_logging("LOUD")


def test_main_runs_session_with_fetched_feeds(fake_app):
    assert cli.main([]) == 0

    session = fake_app["session"]
    assert session.navigator.feeds == (Feed(title="F"),)
    assert session.on_error is rendering.fail_fast


def test_main_selects_fallback_policy(fake_app):
    cli.main(["--on-render-error", "fallback"])

    assert fake_app["session"].on_error is rendering.plain_text_fallback


def test_main_cli_overrides_logging(fake_app, monkeypatch):
    captured_log_config = {}

    def fake_configure(level, log_file=None):
        captured_log_config["level"] = level
        captured_log_config["file"] = log_file

    monkeypatch.setattr(cli, "configure_logging", fake_configure)
    monkeypatch.setattr(
        cli,
        "load_config",
        lambda path: AppConfig(logging=LoggingConfig(level="INFO", file="config.log")),
    )

    cli.main(["--log-level", "DEBUG", "--log-file", "cli.log"])

    assert captured_log_config == {"level": "DEBUG", "file": "cli.log"}


def test_main_saves_and_loads_snapshots(fake_app, monkeypatch):
    saved = {}
    monkeypatch.setattr(cli, "load_snapshot", lambda path: (Feed(title=path),))
    monkeypatch.setattr(cli, "save_snapshot", lambda path, feeds: saved.update(path=path, feeds=feeds))

    cli.main(["--load-feeds", "in.json", "--save-feeds", "out.json"])

    assert fake_app["session"].navigator.feeds == (Feed(title="in.json"),)
    assert saved == {"path": "out.json", "feeds": (Feed(title="in.json"),)}


def test_main_returns_error_code_on_fetch_failure(fake_app, monkeypatch):
    def fail(feeds, **kwargs):
        raise FeedFetchError("unreachable")

    monkeypatch.setattr(cli, "load_feeds", fail)

    assert cli.main([]) == 1
    assert "session" not in fake_app


def test_main_returns_error_code_on_render_failure(fake_app, monkeypatch):
    def fail(session):
        raise ConversionError("malformed")

    monkeypatch.setattr(cli, "run", fail)

    assert cli.main([]) == 1


def test_main_reports_config_errors_through_parser(fake_app, monkeypatch):
    def fail(path):
        raise ValueError("bad padding")

    monkeypatch.setattr(cli, "load_config", fail)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
