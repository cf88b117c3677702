"""Candidate discovery: running processes and the filesystem."""
import os
from typing import Iterable, Iterator

from .models import Candidate
from .output import verbose
from .processes import JAR_SUFFIX, find_process_jars
from .tools import Capabilities

SKIP_FILES = "files"
SKIP_PACKAGES = "packages"
SKIP_PROCESSES = "processes"
SKIP_CHOICES = (SKIP_FILES, SKIP_PACKAGES, SKIP_PROCESSES)


def scantree(path: str) -> Iterator[os.DirEntry]:
    """Recursively yield DirEntry objects for given directory."""
    try:
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    yield from scantree(entry.path)
                else:
                    yield entry
    except OSError as e:
        verbose(f"{path}: {e}", 7)


def iter_jars(root: str) -> Iterator[str]:
    """Regular (non-symlink) files named *.jar under root."""
    if os.path.isfile(root):
        if root.endswith(JAR_SUFFIX):
            yield root
        return
    for entry in scantree(root):
        try:
            if entry.name.endswith(JAR_SUFFIX) and entry.is_file(follow_symlinks=False):
                yield entry.path
        except OSError:
            continue


def find_filesystem_jars(search_paths: Iterable[str]) -> list:
    verbose("Searching for jars on the filesystem...", 3)
    candidates = []
    for root in search_paths or ["/"]:
        candidates.extend(Candidate(archive_path=path) for path in iter_jars(root))
    return candidates


def discover(caps: Capabilities, search_paths: Iterable[str] = (),
             skip: Iterable[str] = ()) -> list:
    """All candidates, process-held jars first, in discovery order."""
    verbose("Looking for jars...", 2)
    skip = set(skip)
    candidates = []

    if SKIP_PROCESSES in skip:
        verbose("Skipping process check.", 2)
    else:
        candidates.extend(find_process_jars(caps))

    if SKIP_FILES in skip:
        verbose("Skipping files check.", 2)
    else:
        candidates.extend(find_filesystem_jars(search_paths))

    return candidates
