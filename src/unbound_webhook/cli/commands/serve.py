"""Process wiring for the webhook."""

import logging
import signal
import threading

from unbound_webhook.api.health import HealthStatus, create_health_app
from unbound_webhook.api.server import ServiceServer
from unbound_webhook.api.webhook import create_webhook_app
from unbound_webhook.config import ProviderConfiguration, ServerOptions
from unbound_webhook.core.provider import UnboundProvider

logger = logging.getLogger(__name__)


def wait_for_signal() -> signal.Signals:
    """Block the main thread until SIGINT or SIGTERM."""
    received: list[signal.Signals] = []
    stop = threading.Event()

    def handler(signum, frame):
        received.append(signal.Signals(signum))
        stop.set()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)
    while not stop.wait(1.0):
        pass
    return received[0]


def serve() -> None:
    """Start both servers, flip the probes, and block until signalled."""
    options = ServerOptions.from_env()

    status = HealthStatus()
    logger.info(f"Starting liveness and readiness server on {options.health_address}")
    health_server = ServiceServer.for_app(
        create_health_app(status),
        options.health_host,
        options.health_port,
        read_timeout=options.read_timeout,
        name="health",
    )
    health_server.start()
    webhook_server: ServiceServer | None = None
    try:
        health_server.wait_until_listening()

        provider = UnboundProvider.from_config(ProviderConfiguration.from_env())

        logger.info(f"Starting webhook server on {options.webhook_address}")
        webhook_server = ServiceServer.for_app(
            create_webhook_app(provider, write_timeout=options.write_timeout),
            options.webhook_host,
            options.webhook_port,
            read_timeout=options.read_timeout,
            name="webhook",
        )
        webhook_server.start()
        webhook_server.wait_until_listening()

        status.set_healthy(True)
        status.set_ready(True)

        received = wait_for_signal()
        logger.info(f"Signal {received.name} received. Shutting down the webhook.")
        status.set_healthy(False)
        status.set_ready(False)
    finally:
        if webhook_server is not None:
            webhook_server.stop(timeout=1.0)
        health_server.stop(timeout=1.0)
