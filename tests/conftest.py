"""Shared test fixtures: real jar files built with zipfile."""

from __future__ import annotations

import io
import logging
import os
import zipfile

import pytest

from log4j_check.archive import JNDI_LOOKUP_CLASS, POM_PATHS
from log4j_check.models import ScanState
from log4j_check.scratch import Scratch
from log4j_check.tools import Capabilities


POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.apache.logging.log4j</groupId>
    <artifactId>log4j</artifactId>
    <version>{version}</version>
  </parent>
  <artifactId>log4j-api</artifactId>
</project>
"""


def jar_bytes(entries: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


def log4j_entries(version: str | None = None, vulnerable: bool = True) -> dict:
    entries = {
        "META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n",
        "org/apache/logging/log4j/core/Logger.class": b"\xca\xfe\xba\xbe logger",
    }
    if vulnerable:
        entries[JNDI_LOOKUP_CLASS] = b"\xca\xfe\xba\xbe jndi"
    if version:
        entries[POM_PATHS[0]] = POM_TEMPLATE.format(version=version)
    return entries


@pytest.fixture
def make_jar(tmp_path):
    """Write a jar under tmp_path: make_jar("a/b.jar", entries) -> path."""

    def _make(relpath: str, entries: dict) -> str:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(jar_bytes(entries))
        return str(path)

    return _make


@pytest.fixture
def state() -> ScanState:
    return ScanState()


@pytest.fixture
def scratch():
    with Scratch() as s:
        yield s


@pytest.fixture
def real_caps() -> Capabilities:
    return Capabilities.probe()


@pytest.fixture
def no_tools() -> Capabilities:
    return Capabilities()


@pytest.fixture(autouse=True)
def _reset_logger():
    """setup_logging() disables propagation; give caplog its records back."""
    yield
    log = logging.getLogger("log4j_check")
    for handler in list(log.handlers):
        log.removeHandler(handler)
    log.propagate = True
    log.setLevel(logging.NOTSET)


needs_unzip = pytest.mark.skipif(
    Capabilities.probe().unzip is None, reason="unzip(1) not installed"
)
needs_zip = pytest.mark.skipif(
    Capabilities.probe().zip is None or Capabilities.probe().unzip is None,
    reason="zip(1)/unzip(1) not installed",
)


def entry_names(path: str) -> list:
    with zipfile.ZipFile(path) as zf:
        return zf.namelist()


def entry_data(path: str) -> dict:
    with zipfile.ZipFile(path) as zf:
        return {n: zf.read(n) for n in zf.namelist()}


def same_file_bytes(a: str, b: str) -> bool:
    with open(a, "rb") as fa, open(b, "rb") as fb:
        return fa.read() == fb.read()


def touch(path) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb"):
        pass
    return str(path)
