"""Tests for the lazily created scratch workspace."""

from __future__ import annotations

import os
import tempfile

import pytest

from log4j_check.errors import SetupError
from log4j_check.scratch import Scratch


def test_created_lazily_and_removed():
    with Scratch() as scratch:
        assert not scratch.created
        path = scratch.path
        sub = scratch.subdir()
        assert os.path.isdir(sub) and sub.startswith(path)
    assert not os.path.exists(path)


def test_removed_on_error():
    with pytest.raises(RuntimeError):
        with Scratch() as scratch:
            path = scratch.path
            raise RuntimeError("boom")
    assert not os.path.exists(path)


def test_unwritable_tmpdir(monkeypatch, tmp_path):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "missing"))
    with pytest.raises(SetupError):
        Scratch().path
