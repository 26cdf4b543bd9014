import logging
from datetime import date

import pytest

from logger import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_handlers():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogging:
    """Tests for logging configuration."""

    def test_writes_dated_log_file(self, test_config):
        """Test that messages reach the date-stamped log file."""
        setup_logging(test_config, console=False)

        get_logger("store").info("Created category 'Forest'")
        for handler in get_logger().handlers:
            handler.flush()

        log_file = test_config.log_dir / f"worldsmith-{date.today().isoformat()}.log"
        assert "Created category 'Forest'" in log_file.read_text()
        assert "worldsmith.store" in log_file.read_text()

    def test_repeated_setup_does_not_stack_handlers(self, test_config):
        """Test that calling setup twice leaves one set of handlers."""
        setup_logging(test_config)
        logger = setup_logging(test_config)

        assert len(logger.handlers) == 2

    def test_child_logger_name(self):
        """Test that named loggers hang off the application logger."""
        assert get_logger().name == LOGGER_NAME
        assert get_logger("db").name == f"{LOGGER_NAME}.db"
        assert get_logger("db").parent is logging.getLogger(LOGGER_NAME)
