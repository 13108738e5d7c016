import json
import logging

from yeelight_matter_bridge.config import Config
from yeelight_matter_bridge.logging import JsonFormatter, configure_logging, get_logger


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="yeelight.encoder",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Sending lighting effect %s",
        args=("rainbow",),
        exc_info=None,
    )
    record.effect_code = 0x27

    payload = json.loads(JsonFormatter().format(record))

    assert payload["logger"] == "yeelight.encoder"
    assert payload["level"] == "INFO"
    assert payload["message"] == "Sending lighting effect rainbow"
    assert payload["effect_code"] == 39
    assert "msg" not in payload


def test_configure_logging_applies_subsystem_levels(capsys) -> None:
    configure_logging(Config(log_format="json", log_level="INFO", decoder_log_level="ERROR"))

    assert get_logger("yeelight.decoder").level == logging.ERROR
    assert get_logger("yeelight.encoder").level == logging.INFO

    get_logger("yeelight.decoder").warning("suppressed")
    get_logger("yeelight.encoder").info("Sending lighting effect", extra={"device_id": "lamp-1"})

    lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert [line["message"] for line in lines] == ["Sending lighting effect"]
    assert lines[0]["device_id"] == "lamp-1"


def test_plain_format(capsys) -> None:
    configure_logging(Config())
    get_logger("yeelight.state").info("Caching color temperature")

    err = capsys.readouterr().err
    assert "| INFO | yeelight.state | Caching color temperature" in err
