"""Log4j scanner: discovery -> inspection -> remediation over one ScanState."""
from typing import Optional

from .archive import ArchiveInspector
from .config import Options
from .discovery import SKIP_PACKAGES, discover
from .models import Candidate, ScanState
from .output import log, verbose
from .packages import check_packages
from .remediation import RemediationEngine
from .scratch import Scratch
from .tools import Capabilities


class Log4jScanner:
    """Runs every check for one host and returns the accumulated state."""

    def __init__(self, options: Options, caps: Optional[Capabilities] = None):
        self.options = options
        self.caps = caps if caps is not None else Capabilities.probe()

    def scan(self) -> ScanState:
        state = ScanState()
        with Scratch() as scratch:
            if self.options.jars:
                verbose("Checking only given jars...", 1)
                candidates = [Candidate(archive_path=j) for j in self.options.jars]
            else:
                verbose("Running all checks...", 1)
                self._check_packages(state)
                candidates = discover(self.caps, self.options.search_paths,
                                      self.options.skip)

            self._check_jars(state, scratch, candidates)

            if self.options.fix and state.suspects:
                engine = RemediationEngine(self.caps)
                state.remediations.extend(engine.remediate_all(state.suspects))
        return state

    def _check_packages(self, state: ScanState):
        if SKIP_PACKAGES in self.options.skip:
            verbose("Skipping package check.", 2)
            return
        for finding in check_packages(self.caps):
            state.add_package(finding)

    def _check_jars(self, state: ScanState, scratch: Scratch, candidates: list):
        if not candidates:
            return
        verbose("Checking all found jars...", 2)
        if not self.caps.unzip:
            log.warning("unzip(1) not found, unable to peek into jars inside of jar!")

        inspector = ArchiveInspector(self.caps, state, scratch)
        for candidate in candidates:
            try:
                inspector.inspect(candidate.archive_path, candidate.process_id)
            except (OSError, UnicodeError) as exc:
                log.warning(f"Unable to check {candidate.archive_path!r}: "
                            f"{getattr(exc, 'strerror', None) or exc}")
