"""Error taxonomy for log4j-check."""


class Log4jCheckError(Exception):
    """Base class for errors raised by log4j-check."""


class SetupError(Log4jCheckError):
    """Fatal problem with the run's setup (paths, config, scratch space)."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path

    def __str__(self):
        msg = super().__str__()
        return f"{msg}: {self.path}" if self.path else msg
