"""
Tests for the structured category logger

Line format, detail tree, level filtering, colors and the singleton
reconfiguration that bound loggers pick up.
"""

import io
import re

from models.enums import LogCategory, LogLevel
from utils.logger import Colors, Logger, configure_logger, get_category_logger, get_logger


def make_logger(**kwargs):
    stream = io.StringIO()
    return Logger(stream=stream, use_colors=False, **kwargs), stream


def test_message_line_format():
    logger, stream = make_logger()
    logger.info(LogCategory.DEVICE, "UVC camera opened")

    line = stream.getvalue().splitlines()[0]
    assert re.match(r"^\[\d\d:\d\d:\d\d\] DEVICE    ✓ UVC camera opened$", line)


def test_details_as_tree():
    logger, stream = make_logger()
    logger.info(LogCategory.SESSION, "Control written", control="brightness", value=138)

    lines = stream.getvalue().splitlines()
    assert lines[1].strip() == "├─ control: brightness"
    assert lines[2].strip() == "└─ value: 138"


def test_level_filter():
    logger, stream = make_logger(min_level=LogLevel.WARN)
    logger.info(LogCategory.CONFIG, "hidden")
    logger.debug(LogCategory.CONFIG, "hidden too")
    logger.warn(LogCategory.CONFIG, "shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "⚠ shown" in output


def test_colors_enabled():
    stream = io.StringIO()
    logger = Logger(stream=stream, use_colors=True)
    logger.error(LogCategory.DEVICE, "Write failed")

    assert Colors.RED in stream.getvalue()
    assert Colors.RESET in stream.getvalue()


def test_bound_logger_uses_category():
    logger, stream = make_logger()
    bound = logger.for_category(LogCategory.INPUT)
    bound.warn("STDIN is not a TTY")

    assert "INPUT" in stream.getvalue()
    assert bound.with_category(LogCategory.RENDER)._category == LogCategory.RENDER


def test_configure_logger_updates_singleton_in_place(quiet_logger):
    before = get_logger()
    bound = get_category_logger(LogCategory.SYSTEM)

    stream = io.StringIO()
    configure_logger(min_level=LogLevel.ERROR, use_colors=False, stream=stream)
    bound.warn("filtered")
    bound.error("kept")

    assert get_logger() is before
    assert "filtered" not in stream.getvalue()
    assert "SYSTEM" in stream.getvalue()
    assert "kept" in stream.getvalue()


def test_default_stream_is_stderr(capsys):
    logger = Logger(use_colors=False)
    logger.info(LogCategory.SYSTEM, "to stderr")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "to stderr" in captured.err
