"""Unit tests for logger setup."""

import logging
from uranium_sdk.utils.logger import get_logger


def test_info_events_are_silent_by_default(capsys):
    """Without host configuration nothing below WARNING reaches the console."""
    logger = get_logger("uranium_sdk.tests.silent")

    logger.info("Preparing upload", file_size=10)
    logger.debug("Chunk sent", part_number=1)

    captured = capsys.readouterr()
    assert "Preparing upload" not in captured.out
    assert "Chunk sent" not in captured.out


def test_host_logging_level_governs_output(caplog):
    """Events follow the stdlib logger of the same name."""
    name = "uranium_sdk.tests.routed"
    logger = get_logger(name)

    logger.info("Dropped before level change")
    caplog.set_level(logging.INFO, logger=name)
    logger.info("Preparing upload", file_size=10)
    logger.debug("Chunk sent")

    messages = [record.getMessage() for record in caplog.records if record.name == name]
    assert len(messages) == 1
    assert "Preparing upload" in messages[0]
    assert "file_size" in messages[0]
