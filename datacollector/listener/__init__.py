"""UDP Listener Service - receives sensor datagrams and stores readings."""

__version__ = "0.1.0"

import asyncio
import logging
import signal
import sys
from typing import Optional

from .config import ListenerConfig, load_config
from .endpoint import UDPEndpoint
from .listener import ListenerState, UDPListenerService

logger = logging.getLogger(__name__)


def create_store(config: ListenerConfig):
    """Build the reading store selected by the configuration."""
    from datacollector.shared.database import ReadingsStorage
    from datacollector.shared.store import InMemoryReadingStore

    if config.storage_backend == "memory":
        logger.warning("Using in-memory storage; readings are lost on exit")
        return InMemoryReadingStore()

    storage = ReadingsStorage(config.db)
    storage.ensure_schema()
    return storage


async def serve(listener: UDPListenerService) -> None:
    """Run the listener until SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()

    def signal_handler(signum):
        signame = signal.Signals(signum).name
        logger.info(f"Received {signame}, shutting down...")
        listener.stop()

    for signum in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(signum, signal_handler, signum)

    await listener.run()


def main(config_path: Optional[str] = None):
    """Entry point for UDP listener service."""
    from datacollector.ingest.service import IngestionService
    from datacollector.shared.logging import setup_logging

    config = load_config(config_path)
    setup_logging(config.log_level)

    try:
        store = create_store(config)
    except Exception as e:
        logger.exception(f"Failed to open reading store: {e}")
        sys.exit(1)

    listener = UDPListenerService(IngestionService(store), config)

    try:
        asyncio.run(serve(listener))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except OSError as e:
        logger.error(f"UDP listener could not start: {e}")
        sys.exit(1)
    finally:
        store.close()


__all__ = [
    "ListenerConfig",
    "ListenerState",
    "UDPEndpoint",
    "UDPListenerService",
    "create_store",
    "load_config",
    "main",
]
