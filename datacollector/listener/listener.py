"""UDP listener - receives telemetry datagrams and hands them to ingestion."""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from datacollector.ingest.service import IngestionService
from .config import ListenerConfig
from .endpoint import Datagram, UDPEndpoint

logger = logging.getLogger(__name__)

EndpointFactory = Callable[[str, int], Awaitable[UDPEndpoint]]


class ListenerState(Enum):
    """Lifecycle states of the listener."""
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class UDPListenerService:
    """Background service that listens for UDP sensor data.

    Datagrams are processed one at a time: the next receive starts only after
    the previous payload has been handed to the ingestion service.
    """

    def __init__(
        self,
        service: IngestionService,
        config: ListenerConfig,
        endpoint_factory: EndpointFactory = UDPEndpoint.bind,
    ):
        self.service = service
        self.config = config
        self._endpoint_factory = endpoint_factory
        self._endpoint: Optional[UDPEndpoint] = None
        self._stop_event = asyncio.Event()
        self._state = ListenerState.STOPPED

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def endpoint(self) -> Optional[UDPEndpoint]:
        return self._endpoint

    def stop(self) -> None:
        """Ask the loop to finish; the current receive wait ends promptly.

        A stop is final: calling run() afterwards returns right after binding.
        """
        self._stop_event.set()

    def _set_state(self, state: ListenerState) -> None:
        self._state = state
        logger.debug(f"UDP listener {state.value}", extra={"state": state.value})

    async def run(self) -> None:
        """Bind the socket and process datagrams until stopped or cancelled.

        Raises:
            OSError: If the socket cannot be bound.
        """
        port = self.config.port
        self._set_state(ListenerState.STARTING)

        try:
            self._endpoint = await self._endpoint_factory(self.config.host, port)
        except asyncio.CancelledError:
            self._set_state(ListenerState.STOPPED)
            raise
        except Exception:
            logger.exception(f"Failed to start UDP listener on port {port}", extra={"port": port})
            self._set_state(ListenerState.STOPPED)
            raise

        self._set_state(ListenerState.RUNNING)
        logger.info(f"UDP Listener started on port {port}", extra={"port": port})

        try:
            await self._receive_loop()
        finally:
            self._set_state(ListenerState.STOPPING)
            self._endpoint.close()
            self._endpoint = None
            self._set_state(ListenerState.STOPPED)
            logger.info("UDP Listener stopped", extra={"port": port})

    async def _receive_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                datagram = await self._next_datagram()
                if datagram is None:
                    break
                await self._handle_datagram(datagram)
            except asyncio.CancelledError:
                # Expected when stopping
                break
            except Exception:
                logger.exception("Error receiving UDP data")
                try:
                    await self._pause(self.config.retry_delay)
                except asyncio.CancelledError:
                    break

    async def _next_datagram(self) -> Optional[Datagram]:
        """Wait for a datagram, or return None once a stop is requested."""
        receive = asyncio.ensure_future(self._endpoint.recv())
        stop = asyncio.ensure_future(self._stop_event.wait())
        try:
            done, _ = await asyncio.wait({receive, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (receive, stop):
                if not task.done():
                    task.cancel()

        if receive in done:
            return receive.result()
        return None

    async def _handle_datagram(self, datagram: Datagram) -> None:
        data, (host, _port) = datagram
        text = data.decode("utf-8", errors="replace")

        logger.debug(
            f"Received data from {host}: {text!r}",
            extra={"device_id": host, "payload": text},
        )

        reading = await asyncio.to_thread(self.service.process, text, host)
        if reading is None:
            logger.debug(f"Dropped datagram from {host}", extra={"device_id": host})
        else:
            logger.debug(
                f"Datagram from {host} stored as reading {reading.id}",
                extra={"device_id": host, "reading_id": reading.id},
            )

    async def _pause(self, seconds: float) -> None:
        """Sleep for a fixed backoff, waking early if a stop is requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
