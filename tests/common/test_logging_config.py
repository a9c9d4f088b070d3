# tests/common/test_logging_config.py
# -*- coding: utf-8 -*-
import logging

from vps_setup.common.logging_config import (
    COLOR_RESET,
    STEP,
    SUCCESS,
    TAG_COLORS,
    TaggedFormatter,
    setup_logging,
)


def make_record(level: int, message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


def test_custom_level_names():
    assert logging.getLevelName(SUCCESS) == "SUCCESS"
    assert logging.getLevelName(STEP) == "STEP"


def test_plain_tags():
    formatter = TaggedFormatter(use_color=False)
    assert formatter.format(make_record(logging.INFO)) == "[INFO] hello"
    assert formatter.format(make_record(SUCCESS)) == "[SUCCESS] hello"
    assert formatter.format(make_record(logging.ERROR)) == "[ERROR] hello"


def test_colored_tags():
    formatter = TaggedFormatter(use_color=True)
    line = formatter.format(make_record(logging.WARNING))
    assert line == f"{TAG_COLORS['WARNING']}[WARNING]{COLOR_RESET} hello"


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "logs" / "vps-setup.log"
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(log_level=logging.WARNING, log_file=str(log_file), use_color=False)
        logging.getLogger("tests.file").debug("only in the file")
        for handler in root.handlers:
            handler.flush()
        assert "only in the file" in log_file.read_text()
        assert len(root.handlers) == 2
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            if handler not in saved_handlers:
                handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
