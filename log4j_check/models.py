"""Data models for log4j findings."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Verdict(Enum):
    BENIGN = "benign"
    EXEMPT = "exempt"
    SUSPECT = "suspect"
    FLAG_OVERRIDE = "flag-override"


@dataclass(frozen=True)
class Candidate:
    archive_path: str
    process_id: Optional[int] = None


@dataclass(frozen=True)
class ArchiveIdentity:
    archive_path: str
    parent: Optional[str] = None

    @property
    def is_nested(self) -> bool:
        return self.parent is not None

    def __str__(self):
        if self.parent:
            return f"{self.parent}:{self.archive_path}"
        return self.archive_path


@dataclass(frozen=True)
class Classification:
    identity: ArchiveIdentity
    process_id: Optional[int] = None
    contains_vulnerable_class: bool = True
    exempt_by_version: bool = False
    exempt_by_name: bool = False
    jndi_reenabled_by_flag: bool = False

    @property
    def is_nested(self) -> bool:
        return self.identity.is_nested

    @property
    def exempt(self) -> bool:
        return self.exempt_by_version or self.exempt_by_name

    @property
    def verdict(self) -> Verdict:
        if not self.contains_vulnerable_class:
            return Verdict.BENIGN
        if not self.exempt:
            return Verdict.SUSPECT
        if self.jndi_reenabled_by_flag:
            return Verdict.FLAG_OVERRIDE
        return Verdict.EXEMPT


@dataclass(frozen=True)
class PackageFinding:
    package_name: str
    version: str
    exempt: bool = False

    def __str__(self):
        return f"{self.package_name}-{self.version}"


@dataclass(frozen=True)
class RemediationResult:
    original_path: str
    backup_path: str
    succeeded: bool
    error: Optional[str] = None


@dataclass
class ScanState:
    """Everything one run accumulates, threaded through the pipeline."""
    seen: set = field(default_factory=set)
    suspects: list = field(default_factory=list)
    concerns: list = field(default_factory=list)
    packages: list = field(default_factory=list)
    remediations: list = field(default_factory=list)

    def mark_seen(self, identity: ArchiveIdentity) -> bool:
        """Record `identity`; False if it was already inspected this run."""
        if identity in self.seen:
            return False
        self.seen.add(identity)
        return True

    def add_classification(self, classification: Classification):
        verdict = classification.verdict
        if verdict is Verdict.SUSPECT:
            self.suspects.append(classification)
        elif verdict is Verdict.FLAG_OVERRIDE:
            self.concerns.append(classification)

    def add_package(self, finding: PackageFinding):
        self.packages.append(finding)

    @property
    def fixed(self) -> list:
        return [r.backup_path for r in self.remediations if r.succeeded]

    @property
    def clean(self) -> bool:
        return not (self.suspects or self.concerns or self.packages)
