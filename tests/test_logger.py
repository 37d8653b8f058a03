"""日志系统测试"""

import json
import logging

import pytest

from relay_core.utils.logger import (
    get_logger,
    get_relay_logger,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def restore_logging():
    yield
    shutdown_logging()
    logging.basicConfig(force=True, handlers=[logging.NullHandler()])


class TestLogger:
    """日志系统测试"""

    def test_setup_without_file(self, restore_logging):
        relay_logger = setup_logging({"level": "DEBUG"})

        assert get_relay_logger() is relay_logger
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_file_output(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "relay.log"
        setup_logging({"format": "json"}, log_file)

        logging.getLogger("relay_core.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        record = json.loads(line)
        assert record["name"] == "relay_core.test"

    def test_context(self, restore_logging):
        relay_logger = setup_logging()

        relay_logger.set_context(station_id="s1")
        assert relay_logger.context_data == {"station_id": "s1"}

        relay_logger.clear_context()
        assert relay_logger.context_data == {}

    def test_structlog_logger_accepts_fields(self, restore_logging):
        setup_logging()
        logger = get_logger("relay_core.test")

        logger.info("station ready", station_id="s1", fetch="station_info")

    def test_shutdown(self, restore_logging):
        setup_logging()
        shutdown_logging()

        assert get_relay_logger() is None
