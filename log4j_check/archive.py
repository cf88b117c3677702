"""Archive inspection: JndiLookup.class detection inside (nested) jars."""
import os
import re
from typing import Optional

from .models import ArchiveIdentity, Classification, ScanState
from .output import log, report, verbose
from .processes import JAR_SUFFIX, has_jndi_reenable_flag
from .scratch import Scratch
from .tools import Capabilities, run
from .versions import is_exempt, is_known_disabled_name, pom_log4j_version

JNDI_LOOKUP_CLASS = "org/apache/logging/log4j/core/lookup/JndiLookup.class"
POM_PATHS = (
    "META-INF/maven/org.apache.logging.log4j/log4j-api/pom.xml",
    "META-INF/maven/org.apache.logging.log4j/log4j-core/pom.xml",
)

# `unzip -l` body line: length, date, time, name
LISTING_RE = re.compile(r"^\s*\d+\s+\S+\s+\S+\s+(.+)$")
CHUNK_SIZE = 1024 * 1024
UNZIP_OK = (0, 1)


def is_nested_jar_name(name: str) -> bool:
    return "log4j" in name and name.endswith(JAR_SUFFIX)


def parse_listing(output: str) -> list:
    """Entry names from `unzip -l` output."""
    entries = []
    in_body = False
    for line in output.splitlines():
        if line.lstrip().startswith("---"):
            if in_body:
                break
            in_body = True
            continue
        if not in_body:
            continue
        match = LISTING_RE.match(line)
        if match:
            entries.append(match.group(1))
    return entries


def grep_file(path: str, needle: bytes) -> bool:
    """Raw byte search, chunked with overlap so matches can span chunks."""
    tail = b""
    with open(path, "rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                return False
            window = tail + chunk
            if needle in window:
                return True
            tail = window[max(0, len(window) - len(needle) + 1):]


class ArchiveInspector:
    """Classifies jars, recursing into log4j jars packaged inside them.

    Every identity is recorded in `state` before any recursion or
    classification, so an archive is inspected at most once per run.
    """

    def __init__(self, caps: Capabilities, state: ScanState, scratch: Scratch):
        self.caps = caps
        self.state = state
        self.scratch = scratch

    # ------------------------------------------------------------ listing

    def list_entries(self, jar: str) -> Optional[list]:
        """Entry names in `jar`; None without unzip(1), empty if unreadable."""
        if not self.caps.unzip:
            return None
        stdout, stderr, rc = run([self.caps.unzip, "-l", jar])
        # unzip exits 1 on warnings (e.g. a launch script before the zip data)
        if rc not in UNZIP_OK:
            log.warning(f"Unable to list '{jar}': {stderr.strip() or 'unzip failed'}")
            return []
        return parse_listing(stdout)

    def read_entry(self, jar: str, entry: str) -> Optional[str]:
        stdout, _, rc = run([self.caps.unzip, "-p", jar, entry])
        if rc not in UNZIP_OK or not stdout.strip():
            return None
        return stdout

    # ------------------------------------------------------------ nesting

    def extract_and_inspect(self, jar: str, nested: list, pid: Optional[int],
                            identity: ArchiveIdentity):
        verbose(f"Extracting {jar} to look inside jars inside of jars...", 5)
        dest = self.scratch.subdir()
        _, stderr, rc = run([self.caps.unzip, "-o", "-q", jar, *nested, "-d", dest])
        if rc not in UNZIP_OK:
            log.warning(f"Unable to extract jars from '{jar}': {stderr.strip()}")
        for name in nested:
            extracted = os.path.join(dest, name)
            if not os.path.isfile(extracted):
                continue
            self.inspect(extracted, pid, parent=identity, display_path=name)

    # ------------------------------------------------------------ checks

    def has_vulnerable_class(self, jar: str, entries: Optional[list]) -> bool:
        if entries is not None:
            return JNDI_LOOKUP_CLASS in entries
        log.warning("unzip(1) not found, trying to grep...")
        return grep_file(jar, JNDI_LOOKUP_CLASS.encode())

    def pom_version(self, jar: str, entries: Optional[list]) -> Optional[str]:
        if entries is None:
            log.warning("Unable to check meta manifest since unzip(1) is missing.")
            return None
        verbose(f"Checking for meta manifest and version in '{jar}'...", 6)
        for pom in POM_PATHS:
            if pom not in entries:
                continue
            text = self.read_entry(jar, pom)
            if text:
                return pom_log4j_version(text)
        return None

    # ------------------------------------------------------------ entry point

    def inspect(self, jar: str, pid: Optional[int] = None,
                parent: Optional[ArchiveIdentity] = None,
                display_path: Optional[str] = None) -> Optional[Classification]:
        """Inspect one jar, returning its Classification.

        None means skipped (already seen) or benign (no JndiLookup.class).
        `display_path` names a nested jar by its path inside `parent`.
        """
        name = display_path or jar
        identity = ArchiveIdentity(name, str(parent) if parent else None)
        if not self.state.mark_seen(identity):
            verbose(f"Skipping already seen jar '{identity}'...", 6)
            return None

        entries = self.list_entries(jar)
        if entries:
            nested = [e for e in entries if is_nested_jar_name(e)]
            if nested:
                self.extract_and_inspect(jar, nested, pid, identity)

        verbose(f"Checking for '{JNDI_LOOKUP_CLASS}' inside of {name}...", 5)
        if not self.has_vulnerable_class(jar, entries):
            return None

        msg = ""
        if parent:
            msg = f" (inside of {parent})"
        flagged = False
        if pid is not None:
            flagged = has_jndi_reenable_flag(pid, self.caps)
            msg += f" used by process {pid}"

        version = self.pom_version(jar, entries)
        classification = Classification(
            identity=identity,
            process_id=pid,
            contains_vulnerable_class=True,
            exempt_by_version=is_exempt(version) if version else False,
            exempt_by_name=is_known_disabled_name(name),
            jndi_reenabled_by_flag=flagged,
        )

        if classification.exempt:
            if flagged:
                report(f"Normally non-vulnerable jar '{name}'{msg} found, "
                       "but JNDI Lookups enabled via command-line flags!")
            elif pid is not None:
                report(f"Non-vulnerable jar '{name}'{msg} found, "
                       "JNDI Lookups not enabled via command-line flags.")
            verbose("Allowing jar with known disabled JNDI Lookup.", 6)
        elif flagged:
            report(f"Possibly vulnerable jar '{name}'{msg}, "
                   "with JNDI Lookups enabled via command-line flags.")
        else:
            report(f"Possibly vulnerable jar '{name}'{msg}.")

        self.state.add_classification(classification)
        return classification
