"""Tests for kubegen logging setup."""
import logging

import pytest

from kubegen.core import logger as logger_module
from kubegen.core.logger import ROOT_LOGGER, get_logger


@pytest.fixture
def parent_logger(monkeypatch):
    """The kubegen parent logger, restored to its previous state afterwards."""
    parent = logging.getLogger(ROOT_LOGGER)
    level = parent.level
    handlers = list(parent.handlers)
    monkeypatch.setattr(logger_module, "_file_logging_configured", False)
    yield parent
    for handler in parent.handlers:
        if handler not in handlers:
            parent.removeHandler(handler)
            handler.close()
    parent.setLevel(level)


class TestGetLogger:
    """Test the module logger hierarchy."""

    def test_module_logger_level_unset(self, parent_logger):
        logger = get_logger("kubegen.core.writer")

        assert logger.level == logging.NOTSET
        assert logger.getEffectiveLevel() == parent_logger.level

    def test_verbose_enables_debug(self, parent_logger, tmp_path):
        log_file = tmp_path / "kubegen.log"
        logger = get_logger("kubegen.core.writer")
        assert not logger.isEnabledFor(logging.DEBUG)

        logger_module.setup_file_logging(log_file=str(log_file), verbose=True)
        logger.debug("Wrote deploy/base/ingress.yaml")

        assert logger.isEnabledFor(logging.DEBUG)
        assert "Wrote deploy/base/ingress.yaml" in log_file.read_text()
