import logging
import signal
import socket

import pytest
import uvicorn

from content_api import server
from content_api.server import (
    ContentAPIServer,
    PortUnavailableError,
    bind_socket,
    log_uncaught_exception,
    log_unhandled_async_error,
)


@pytest.fixture
def busy_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    yield sock.getsockname()[1]
    sock.close()


def test_bind_socket_moves_past_busy_port(busy_port):
    sock, port = bind_socket("127.0.0.1", busy_port, max_attempts=5)
    try:
        assert busy_port < port <= busy_port + 4
        assert sock.getsockname()[1] == port
    finally:
        sock.close()


def test_bind_socket_gives_up_after_max_attempts(busy_port):
    with pytest.raises(PortUnavailableError):
        bind_socket("127.0.0.1", busy_port, max_attempts=1)


def test_uncaught_exception_logs_and_exits(monkeypatch, caplog):
    exits = []
    monkeypatch.setattr(server.os, "_exit", exits.append)

    with caplog.at_level(logging.CRITICAL, logger="content_api.server"):
        try:
            raise ValueError("boom")
        except ValueError as e:
            log_uncaught_exception(type(e), e, e.__traceback__)

    assert exits == [1]
    assert "Uncaught Exception" in caplog.text


def test_unhandled_async_error_is_only_logged(monkeypatch, caplog):
    exits = []
    monkeypatch.setattr(server.os, "_exit", exits.append)

    with caplog.at_level(logging.ERROR, logger="content_api.server"):
        log_unhandled_async_error(None, {"message": "Task exception was never retrieved",
                                         "exception": RuntimeError("lost")})

    assert exits == []
    assert "Task exception was never retrieved" in caplog.text


def test_shutdown_signal_arms_forced_exit():
    config = uvicorn.Config(app=lambda scope, receive, send: None)
    srv = ContentAPIServer(config, shutdown_timeout=10)

    srv.handle_exit(signal.SIGTERM, None)
    try:
        assert srv.should_exit is True
        assert srv._force_exit_timer is not None
        assert srv._force_exit_timer.interval == 10 + server.FORCE_EXIT_GRACE_SECONDS
        assert srv._force_exit_timer.daemon is True
    finally:
        srv.cancel_forced_exit()


def test_force_exit_uses_failure_status(monkeypatch):
    exits = []
    monkeypatch.setattr(server.os, "_exit", exits.append)
    server.force_exit()
    assert exits == [1]


def test_clean_shutdown_does_not_reraise_signal():
    config = uvicorn.Config(app=lambda scope, receive, send: None)
    srv = ContentAPIServer(config, shutdown_timeout=10)

    try:
        with srv.capture_signals():
            srv.handle_exit(signal.SIGTERM, None)
            assert srv._captured_signals == [signal.SIGTERM]
        assert srv._captured_signals == []
        assert srv.should_exit is True
    finally:
        srv.cancel_forced_exit()
