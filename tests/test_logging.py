"""Tests for the gateway log sinks."""

from loguru import logger

from wagate.core.logging import NO_REQUEST, log, setup_logging


def _read_log(logs_dir) -> str:
    # Removing the sinks closes and flushes the file
    logger.remove()
    return "".join(path.read_text() for path in logs_dir.glob("gateway_*.log"))


def test_request_lines_carry_request_id(tmp_path):
    logs_dir = tmp_path / "logs"
    setup_logging(logs_dir=logs_dir)

    with log.contextualize(request_id="ab12cd34"):
        log.info("Message sent")

    text = _read_log(logs_dir)
    assert "| ab12cd34 |" in text
    assert "Message sent" in text


def test_background_lines_use_placeholder(tmp_path):
    logs_dir = tmp_path / "logs"
    setup_logging(log_format="json", logs_dir=logs_dir)

    log.info("Reconnecting...")

    text = _read_log(logs_dir)
    assert f"| {NO_REQUEST} |" in text
    assert "Reconnecting..." in text
