"""Process entry point: load configuration, initialize the solver and serve."""

from __future__ import annotations

import logging
import signal
import threading

from regery_webhook.config import AppConfig, load_config
from regery_webhook.server import WebhookServer
from regery_webhook.solver import RegeryDnsSolver

logger = logging.getLogger(__name__)


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(config: AppConfig, stop_event: threading.Event) -> None:
    """Initialize the solver and serve until ``stop_event`` is set."""
    solver = RegeryDnsSolver()
    solver.initialize(None, stop_event)

    server = WebhookServer(config, solver)
    thread = threading.Thread(target=server.serve_forever, name="webhook-server", daemon=True)
    thread.start()

    stop_event.wait()
    logger.info("Shutting down webhook server")
    server.shutdown()
    thread.join()


def main() -> None:
    # Configuration errors are fatal: nothing is served without a valid GROUP_NAME
    config = load_config()
    configure_logging(config)

    stop_event = threading.Event()
    for signum in (signal.SIGTERM, signal.SIGINT):
        signal.signal(signum, lambda *_: stop_event.set())

    run(config, stop_event)
