import logging

from datacollector.shared.logging import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="datacollector.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Failed to parse data",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_fields_are_appended() -> None:
    formatter = ContextualFormatter("%(levelname)s %(message)s")

    output = formatter.format(_record(device_id="10.0.0.5", reason="parse_failure", payload="x y"))

    assert output == "WARNING Failed to parse data | device_id=10.0.0.5 payload='x y' reason=parse_failure"


def test_plain_message_without_context() -> None:
    formatter = ContextualFormatter("%(message)s")

    assert formatter.format(_record()) == "Failed to parse data"


def test_custom_context_keys() -> None:
    formatter = ContextualFormatter("%(message)s", context_keys=["port"])

    output = formatter.format(_record(port=5000, device_id="ignored"))

    assert output == "Failed to parse data | port=5000"
