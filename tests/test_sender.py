import socket

from datacollector.ingest.parser import try_parse
from datacollector.sender import send_readings, simulated_readings


def test_send_readings_emits_wire_format() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as receiver:
        receiver.bind(("127.0.0.1", 0))
        receiver.settimeout(2.0)
        port = receiver.getsockname()[1]

        sent = send_readings([(25.5, 60.0), (-1.0, 40.25)], host="127.0.0.1", port=port)

        payloads = [receiver.recvfrom(1024)[0] for _ in range(sent)]

    assert sent == 2
    assert payloads == [b"temp=25.50,hum=60.00", b"temp=-1.00,hum=40.25"]


def test_simulated_readings_are_parseable() -> None:
    readings = list(simulated_readings(10))

    assert len(readings) == 10
    for temperature, humidity in readings:
        assert 0.0 <= humidity <= 100.0
        payload = f"temp={temperature:.2f},hum={humidity:.2f}"
        assert try_parse(payload) is not None
