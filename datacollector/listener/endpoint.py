"""asyncio UDP receive endpoint."""

import asyncio
import logging
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

Address = Tuple[str, int]
Datagram = Tuple[bytes, Address]

# Datagrams waiting for recv(); anything beyond this is dropped
MAX_PENDING_DATAGRAMS = 256


class _QueueProtocol(asyncio.DatagramProtocol):
    """Hands received datagrams and socket errors to a bounded queue."""

    def __init__(self, queue: "asyncio.Queue[Union[Datagram, Exception]]"):
        self._queue = queue

    def datagram_received(self, data: bytes, addr) -> None:
        # IPv6 addresses come as 4-tuples; host and port are always first
        host = addr[0]
        try:
            self._queue.put_nowait((data, (host, addr[1])))
        except asyncio.QueueFull:
            logger.warning(
                f"Receive queue full, dropping datagram from {host}",
                extra={"device_id": host, "reason": "queue_full"},
            )

    def error_received(self, exc: Exception) -> None:
        try:
            self._queue.put_nowait(exc)
        except asyncio.QueueFull:
            logger.warning(f"Receive queue full, dropping socket error: {exc}")


class UDPEndpoint:
    """A bound UDP socket that yields datagrams one at a time."""

    def __init__(
        self,
        transport: asyncio.DatagramTransport,
        queue: "asyncio.Queue[Union[Datagram, Exception]]",
    ):
        self._transport = transport
        self._queue = queue

    @classmethod
    async def bind(
        cls,
        host: str,
        port: int,
        max_pending: int = MAX_PENDING_DATAGRAMS,
    ) -> "UDPEndpoint":
        """Bind a UDP socket on host:port.

        Args:
            host: Interface address to bind.
            port: UDP port; 0 picks a free one.
            max_pending: How many received datagrams may wait for recv()
                before new ones are dropped.

        Raises:
            OSError: If the address cannot be bound, e.g. it is already in use.
        """
        loop = asyncio.get_running_loop()
        queue: "asyncio.Queue[Union[Datagram, Exception]]" = asyncio.Queue(maxsize=max_pending)
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _QueueProtocol(queue),
            local_addr=(host, port),
        )
        return cls(transport, queue)

    @property
    def local_address(self) -> Optional[Address]:
        """Address the socket is bound to (useful when binding port 0)."""
        sockname = self._transport.get_extra_info("sockname")
        return (sockname[0], sockname[1]) if sockname else None

    @property
    def closed(self) -> bool:
        return self._transport.is_closing()

    @property
    def pending(self) -> int:
        """Number of datagrams received but not yet returned by recv()."""
        return self._queue.qsize()

    async def recv(self) -> Datagram:
        """Wait for the next datagram.

        Returns:
            Tuple of (payload bytes, (sender host, sender port)).

        Raises:
            OSError: If the socket reported an error.
        """
        item = await self._queue.get()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if not self._transport.is_closing():
            self._transport.close()
