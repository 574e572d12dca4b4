"""HTTP listener.

The socket is bound up front so a busy port fails fast with BIND_FAILED
before anything is served. uvicorn then runs on a background thread with
its own event loop; requests are handled one at a time on that loop. A
watcher on the same loop polls a stop flag every ``poll_interval`` seconds
and asks uvicorn to shut down gracefully: no new connections are accepted
and in-flight requests finish.
"""

from __future__ import annotations

import asyncio
import logging
import socket
import threading
import time

import uvicorn

from runner_mock.application import MockApplication
from runner_mock.errors import create_error

logger = logging.getLogger(__name__)

BACKLOG = 128


class MockServer:
    """Runs a MockApplication over HTTP.

    Example:
        with MockServer(MockApplication(config)) as server:
            httpx.get(f"{server.url}/health")
    """

    def __init__(self, application: MockApplication):
        """Initialize server.

        Args:
            application: Application to serve
        """
        self.application = application
        self.config = application.config.server
        self._stop = threading.Event()
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        """Bound port (differs from config when configured as 0)."""
        if self._socket is None:
            return self.config.port
        return self._socket.getsockname()[1]

    @property
    def url(self) -> str:
        host = self.config.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def bind(self) -> socket.socket:
        """Bind and listen on the configured address.

        Raises:
            MockServiceError: BIND_FAILED if the port is taken or not permitted
        """
        host, port = self.config.host, self.config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.bind((host, port))
            sock.listen(BACKLOG)
        except OSError as e:
            sock.close()
            raise create_error(
                "BIND_FAILED",
                host=host,
                port=port,
                reason=e.strerror or str(e),
                cause=e,
            ) from e

        self._socket = sock
        return sock

    def start(self, timeout: float = 10.0) -> None:
        """Bind and start serving on a background thread.

        Args:
            timeout: Seconds to wait for the listener to come up

        Raises:
            MockServiceError: BIND_FAILED, or INTERNAL_ERROR if startup fails
        """
        if self.running:
            return

        self.application.check()
        sock = self.bind()
        self._server = uvicorn.Server(
            uvicorn.Config(
                self.application.app,
                log_config=None,
                access_log=False,
                lifespan="off",
            )
        )
        self._thread = threading.Thread(
            target=self._run_loop,
            args=(sock,),
            name="runner-mock-listener",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                self._close_socket()
                raise create_error("INTERNAL_ERROR", error="listener exited during startup")
            if time.monotonic() >= deadline:
                self.stop()
                raise create_error("INTERNAL_ERROR", error="listener did not start in time")
            time.sleep(0.01)

        logger.info("Listening on %s", self.url)

    def request_stop(self) -> None:
        """Set the stop flag; safe to call from a signal handler."""
        self._stop.set()

    def stop(self, timeout: float = 10.0) -> None:
        """Stop accepting connections and wait for in-flight requests."""
        self.request_stop()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Listener still running after %.1fs", timeout)
            self._thread = None
        self._close_socket()
        self._stop.clear()

    def wait(self) -> None:
        """Block until the listener thread exits."""
        while self.running:
            self._thread.join(self.config.poll_interval)

    def run(self) -> None:
        """Start, block until a stop is requested, then shut down."""
        self.start()
        try:
            self.wait()
        finally:
            self.stop()
        logger.info("Stopped")

    def _run_loop(self, sock: socket.socket) -> None:
        asyncio.run(self._serve(sock))

    async def _serve(self, sock: socket.socket) -> None:
        server = self._server
        serve_task = asyncio.create_task(server.serve(sockets=[sock]))
        while not serve_task.done():
            if self._stop.is_set() and not server.should_exit:
                logger.debug("Stop requested, shutting down listener")
                server.should_exit = True
            await asyncio.wait({serve_task}, timeout=self.config.poll_interval)
        await serve_task

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> MockServer:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
