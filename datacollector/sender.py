"""Simple UDP sender for generating test telemetry traffic.

Sends payloads in the same format as the device firmware, so a running
listener can be exercised without real hardware.
"""

import argparse
import logging
import random
import socket
import time
from typing import Iterable, Tuple

from datacollector.ingest.parser import format_payload
from datacollector.listener.config import DEFAULT_PORT

logger = logging.getLogger(__name__)

HOST = "127.0.0.1"


def send_readings(
    readings: Iterable[Tuple[float, float]],
    host: str = HOST,
    port: int = DEFAULT_PORT,
    interval: float = 0.0,
) -> int:
    """Send one datagram per (temperature, humidity) pair.

    Returns:
        Number of datagrams sent.
    """
    sent = 0
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        for temperature, humidity in readings:
            payload = format_payload(temperature, humidity)
            sock.sendto(payload.encode("utf-8"), (host, port))
            logger.debug(f"Sent {payload} to {host}:{port}")
            sent += 1
            if interval:
                time.sleep(interval)
    return sent


def simulated_readings(count: int) -> Iterable[Tuple[float, float]]:
    """Generate plausible indoor readings with a small random walk."""
    temperature, humidity = 22.0, 50.0
    for _ in range(count):
        temperature += random.uniform(-0.5, 0.5)
        humidity = min(100.0, max(0.0, humidity + random.uniform(-2.0, 2.0)))
        yield round(temperature, 2), round(humidity, 2)


def main():
    """Entry point for the test sender."""
    from datacollector.shared.logging import setup_logging

    parser = argparse.ArgumentParser(
        description="Send simulated temperature/humidity datagrams",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", type=str, default=HOST, help="Listener address")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="Listener UDP port")
    parser.add_argument("-n", "--count", type=int, default=5, help="Number of datagrams")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between datagrams")
    args = parser.parse_args()

    setup_logging("DEBUG")
    sent = send_readings(simulated_readings(args.count), args.host, args.port, args.interval)
    logger.info(f"Sent {sent} datagrams to {args.host}:{args.port}")


if __name__ == "__main__":
    main()
