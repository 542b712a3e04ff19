# content_api/server.py
"""
Process lifecycle: port binding with retry, graceful shutdown with a
forced-exit fallback, and process-level error logging.
"""
import argparse
import contextlib
import errno
import logging
import os
import signal
import socket
import sys
import threading
from typing import List, Optional, Tuple

import uvicorn

from .config import get_settings

logger = logging.getLogger(__name__)

FORCE_EXIT_GRACE_SECONDS = 5


class PortUnavailableError(RuntimeError):
    """Every port in the retry window was already taken"""


def bind_socket(host: str, port: int, max_attempts: int) -> Tuple[socket.socket, int]:
    """Bind a listening socket on `port`, moving up one port per conflict.

    Returns the socket and the port it ended up on. Errors other than
    "address in use" are raised straight away.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    for candidate in range(port, port + max_attempts):
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, candidate))
            sock.listen(2048)
        except OSError as e:
            sock.close()
            if e.errno != errno.EADDRINUSE:
                raise
            logger.warning(f"Port {candidate} is in use, trying port {candidate + 1}...")
            continue
        sock.set_inheritable(True)
        return sock, candidate

    raise PortUnavailableError(
        f"No free port in {port}-{port + max_attempts - 1} after {max_attempts} attempts"
    )


class ContentAPIServer(uvicorn.Server):
    """uvicorn server that arms a forced exit once shutdown begins"""

    def __init__(self, config: uvicorn.Config, shutdown_timeout: float):
        super().__init__(config)
        self.shutdown_timeout = shutdown_timeout
        self._force_exit_timer: Optional[threading.Timer] = None

    def handle_exit(self, sig: int, frame) -> None:
        if self._force_exit_timer is None:
            logger.info(f"{signal.Signals(sig).name} received. Shutting down gracefully...")
            # uvicorn's own graceful timeout must get to run before this fires
            self._force_exit_timer = threading.Timer(
                self.shutdown_timeout + FORCE_EXIT_GRACE_SECONDS, force_exit
            )
            self._force_exit_timer.daemon = True
            self._force_exit_timer.start()
        super().handle_exit(sig, frame)

    @contextlib.contextmanager
    def capture_signals(self):
        """Forget handled signals so uvicorn does not re-raise them after a clean shutdown"""
        with super().capture_signals():
            try:
                yield
            finally:
                self._captured_signals.clear()

    def cancel_forced_exit(self) -> None:
        if self._force_exit_timer is not None:
            self._force_exit_timer.cancel()


def force_exit() -> None:
    logger.error("Forcing shutdown...")
    _flush_log_handlers()
    os._exit(1)


def _flush_log_handlers() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def log_uncaught_exception(exc_type, exc_value, exc_traceback) -> None:
    """sys.excepthook: log the error and terminate the process"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught Exception", exc_info=(exc_type, exc_value, exc_traceback))
    _flush_log_handlers()
    os._exit(1)


def log_unhandled_async_error(loop, context: dict) -> None:
    """asyncio exception handler; errors are logged and the process keeps running"""
    logger.error(
        f"Unhandled async error: {context.get('message', 'unknown error')}",
        exc_info=context.get("exception"),
    )


def install_exception_hooks() -> None:
    sys.excepthook = log_uncaught_exception


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the Content API server")
    parser.add_argument("--host", default=settings.SERVICE_HOST, help="Interface to listen on")
    parser.add_argument("--port", type=int, default=settings.PORT, help="First port to try")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    install_exception_hooks()

    sock, port = bind_socket(args.host, args.port, settings.PORT_RETRY_ATTEMPTS)

    from .main import app

    config = uvicorn.Config(
        app,
        log_level=args.log_level.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SECONDS,
    )
    server = ContentAPIServer(config, shutdown_timeout=settings.SHUTDOWN_TIMEOUT_SECONDS)

    logger.info(f"Server is running on http://localhost:{port}")
    logger.info("Press CTRL+C to stop the server")
    try:
        server.run(sockets=[sock])
    finally:
        server.cancel_forced_exit()
        sock.close()
    logger.info("Server closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
