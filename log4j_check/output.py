"""Logging setup: prefixed warnings and '=' indented verbose trace."""
import logging
import platform
import sys

PROGNAME = "log4j-check"
VERSION = "1.2"

log = logging.getLogger("log4j_check")


def log_prefix() -> str:
    return f"{PROGNAME} {VERSION} {platform.node() or 'localhost'}"


def verbose(msg: str, level: int = 1):
    log.debug(msg, extra={"depth": level})


class VerbosityFilter(logging.Filter):
    """Drop verbose records nested deeper than the requested -v count."""

    def __init__(self, verbosity: int = 0):
        super().__init__()
        self.verbosity = verbosity

    def filter(self, record):
        if record.levelno > logging.DEBUG:
            return True
        return getattr(record, "depth", 1) <= self.verbosity


class CheckFormatter(logging.Formatter):
    def __init__(self, prefix: str):
        super().__init__()
        self.prefix = prefix

    def format(self, record):
        msg = record.getMessage()
        if record.levelno <= logging.DEBUG:
            return "=" * getattr(record, "depth", 1) + "> " + msg
        return f"{self.prefix}: {msg}"


def setup_logging(verbosity: int = 0, stream=None) -> logging.Handler:
    """Route the package logger to stderr; returns the installed handler."""
    for handler in list(log.handlers):
        log.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(CheckFormatter(log_prefix()))
    handler.addFilter(VerbosityFilter(verbosity))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    log.propagate = False
    return handler


def report(msg: str):
    """A finding line on stdout."""
    print(f"{log_prefix()}: {msg}")
