"""Wire format parsing for telemetry datagrams.

Devices send a single line of the form ``temp=25.50,hum=60.00``. Keys are
matched case-insensitively and the pair may be surrounded by other text, but
``temp`` must come before ``hum``.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional, Tuple

# ASCII so that only 0-9 count as digits regardless of input script
PAYLOAD_PATTERN = re.compile(
    r"temp=(-?[\d.]+),hum=(-?[\d.]+)",
    re.IGNORECASE | re.ASCII,
)


class WireParser(ABC):
    """Base class for datagram payload parsers."""

    @abstractmethod
    def try_parse(self, raw: Optional[str]) -> Optional[Tuple[float, float]]:
        """Parse a payload into (temperature, humidity), or None on failure."""
        pass


class KeyValueParser(WireParser):
    """Parser for the ``temp=<num>,hum=<num>`` format.

    Stateless; one instance can be shared between threads.
    """

    def try_parse(self, raw: Optional[str]) -> Optional[Tuple[float, float]]:
        if raw is None or not raw.strip():
            return None

        match = PAYLOAD_PATTERN.search(raw)
        if match is None:
            return None

        try:
            temperature = float(match.group(1))
            humidity = float(match.group(2))
        except ValueError:
            # e.g. "1.2.3" or "." pass the character class but aren't numbers
            return None

        return temperature, humidity


_default_parser = KeyValueParser()


def try_parse(raw: Optional[str]) -> Optional[Tuple[float, float]]:
    """Parse a payload with the default key=value parser."""
    return _default_parser.try_parse(raw)


def format_payload(temperature: float, humidity: float) -> str:
    """Build a payload the way device firmware does (two decimals each)."""
    return f"temp={temperature:.2f},hum={humidity:.2f}"
