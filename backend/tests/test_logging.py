import logging

from app.core.logging import HANDLER_NAME, configure_logging


def test_configure_logging_installs_one_named_handler():
    root = logging.getLogger()
    previous_level = root.level
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")

        named = [handler for handler in root.handlers if handler.get_name() == HANDLER_NAME]
        assert len(named) == 1
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous_level)
