"""Tests for the process entry point and the process-level error observers."""
import asyncio
import logging
import sys
import threading
from unittest.mock import MagicMock

import pytest

from farm_inventory import __main__ as entrypoint
from farm_inventory import lifecycle
from farm_inventory.config import Settings


def fake_server_factory(run=None, started=True, shutdown_clean=True):
    """Build a uvicorn.Server stand-in; the app it receives is recorded on the mock."""
    servers = []

    def factory(config):
        server = MagicMock()
        server.started = started
        server.run.side_effect = run

        def finish():
            config.app.state.shutdown_clean = shutdown_clean

        if run is None:
            server.run.side_effect = finish
        servers.append(server)
        return server

    factory.servers = servers
    return factory


def test_clean_shutdown_exits_zero():
    assert entrypoint.serve(Settings(), fake_server_factory()) == 0


def test_failed_close_exits_one():
    assert entrypoint.serve(Settings(), fake_server_factory(shutdown_clean=False)) == 1


def test_failed_startup_exits_one():
    assert entrypoint.serve(Settings(), fake_server_factory(started=False)) == 1


def test_crashing_server_is_restarted_then_given_up():
    factory = fake_server_factory(run=RuntimeError("event loop died"))

    assert entrypoint.serve(Settings(), factory) == 1
    assert len(factory.servers) == entrypoint.MAX_RESTARTS + 1


def test_main_exits_with_serve_status(monkeypatch):
    monkeypatch.setattr(entrypoint, "serve", lambda settings: 1)
    monkeypatch.setattr(entrypoint, "install_exception_hooks", lambda: None)

    with pytest.raises(SystemExit) as excinfo:
        entrypoint.main()

    assert excinfo.value.code == 1


def test_uncaught_exception_logged(caplog):
    try:
        raise ValueError("boom")
    except ValueError:
        exc_info = sys.exc_info()

    with caplog.at_level(logging.ERROR):
        lifecycle.log_uncaught_exception(*exc_info)

    assert "Uncaught exception" in caplog.text
    assert "boom" in caplog.text


def test_thread_exception_logged_and_thread_survivable(monkeypatch, caplog):
    monkeypatch.setattr(threading, "excepthook", lifecycle.log_thread_exception)

    def fail():
        raise RuntimeError("worker failed")

    with caplog.at_level(logging.ERROR):
        worker = threading.Thread(target=fail, name="worker-1")
        worker.start()
        worker.join()

    assert "Uncaught exception in thread worker-1" in caplog.text


def test_unretrieved_task_error_logged(caplog):
    loop = asyncio.new_event_loop()
    loop.set_exception_handler(lifecycle.asyncio_exception_handler)
    try:
        with caplog.at_level(logging.ERROR):
            loop.call_exception_handler({"message": "Task exception was never retrieved",
                                         "exception": RuntimeError("lost")})
    finally:
        loop.close()

    assert "Unhandled async error: Task exception was never retrieved" in caplog.text


def test_install_exception_hooks(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.__excepthook__)
    monkeypatch.setattr(threading, "excepthook", threading.__excepthook__)

    lifecycle.install_exception_hooks()

    assert sys.excepthook is lifecycle.log_uncaught_exception
    assert threading.excepthook is lifecycle.log_thread_exception
