"""Scratch workspace for extracted archives."""
import os
import shutil
import tempfile
from typing import Optional

from .errors import SetupError


class Scratch:
    """Temporary directory created on first use and removed by cleanup().

    Use as a context manager so removal happens on every exit path.
    """

    def __init__(self, prefix: str = "log4j-check."):
        self.prefix = prefix
        self._tmpdir: Optional[str] = None

    @property
    def created(self) -> bool:
        return self._tmpdir is not None

    @property
    def path(self) -> str:
        if self._tmpdir is None:
            try:
                self._tmpdir = tempfile.mkdtemp(prefix=self.prefix)
            except OSError as exc:
                raise SetupError(
                    f"unable to create scratch directory ({exc.strerror})",
                    tempfile.gettempdir(),
                ) from exc
        return self._tmpdir

    def subdir(self) -> str:
        """A fresh directory inside the workspace, one per extraction."""
        try:
            return tempfile.mkdtemp(dir=self.path)
        except OSError as exc:
            raise SetupError(
                f"unable to create scratch directory ({exc.strerror})", self.path
            ) from exc

    def cleanup(self):
        if self._tmpdir and os.path.exists(self._tmpdir):
            shutil.rmtree(self._tmpdir, ignore_errors=True)
        self._tmpdir = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cleanup()
        return False
