"""Threaded uvicorn servers with a bind notification."""

import math
import threading

import uvicorn
from fastapi import FastAPI

from unbound_webhook.core.errors import ConfigurationError


class ServiceServer(uvicorn.Server):
    """
    Uvicorn server running on its own thread.

    ``listening`` is set once the socket is bound and accepting connections.
    """

    def __init__(self, config: uvicorn.Config, name: str = "server"):
        super().__init__(config)
        self.name = name
        self.listening = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def for_app(
        cls,
        app: FastAPI,
        host: str,
        port: int,
        read_timeout: float = 60.0,
        name: str = "server",
    ) -> "ServiceServer":
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            timeout_keep_alive=max(1, math.ceil(read_timeout)),
            log_config=None,
            access_log=False,
        )
        return cls(config, name=name)

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self.listening.set()

    def start(self) -> None:
        """Serve in a daemon thread; signal handling stays with the main thread."""
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()

    def wait_until_listening(self, timeout: float | None = None) -> None:
        """Block until bound; fails if the server thread exits first."""
        waited = 0.0
        while not self.listening.wait(0.1):
            waited += 0.1
            if self._thread is None or not self._thread.is_alive():
                raise ConfigurationError(
                    f"{self.name} failed to listen on {self.config.host}:{self.config.port}"
                )
            if timeout is not None and waited >= timeout:
                raise ConfigurationError(f"{self.name} did not start within {timeout}s")

    def stop(self, timeout: float = 5.0) -> None:
        self.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
