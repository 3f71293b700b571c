"""Tests for logging.py – structlog setup."""
import io
import json
import logging

import pytest
import structlog

from gndec_timetable.logging import get_logger, setup_logging


@pytest.fixture
def stream():
    buf = io.StringIO()
    yield buf
    structlog.reset_defaults()
    logging.getLogger().handlers = []


class TestSetupLogging:
    def test_json_lines(self, stream):
        setup_logging(json_output=True, stream=stream)
        get_logger("gndec_timetable.registry").info("registry_flushed", groups=2)
        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record["event"] == "registry_flushed"
        assert record["groups"] == 2
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filter(self, stream):
        setup_logging(json_output=True, log_level="WARNING", stream=stream)
        log = get_logger("gndec_timetable.assemble")
        log.info("document_assembled")
        log.warning("group_collision", group_id="D2A1")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "group_collision"

    def test_stdlib_records_share_the_stream(self, stream):
        setup_logging(stream=stream)
        logging.getLogger("requests").warning("retrying")
        assert "retrying" in stream.getvalue()
