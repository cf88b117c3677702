"""Remediation: back up a suspect jar, then delete JndiLookup.class from it."""
import shutil

from .archive import JNDI_LOOKUP_CLASS
from .models import Classification, RemediationResult
from .output import log, verbose
from .tools import Capabilities, run

BACKUP_SUFFIX = ".bak"


class RemediationEngine:
    def __init__(self, caps: Capabilities):
        self.caps = caps

    def remediate(self, classification: Classification) -> RemediationResult:
        jar = classification.identity.archive_path
        backup = jar + BACKUP_SUFFIX

        if classification.is_nested:
            log.warning(f"Unable to fix '{classification.identity}' -- "
                        "it's a jar inside another jar.")
            return RemediationResult(jar, backup, False, "nested jar")
        if not self.caps.zip:
            log.warning(f"zip(1) not found, unable to fix '{jar}'.")
            return RemediationResult(jar, backup, False, "zip(1) not found")

        verbose(f"Fixing {jar}...", 4)
        try:
            shutil.copy2(jar, backup)
        except OSError as exc:
            log.warning(f"Unable to back up '{jar}' to '{backup}': {exc.strerror}")
            return RemediationResult(jar, backup, False, str(exc))

        _, stderr, rc = run([self.caps.zip, "-q", "-d", jar, JNDI_LOOKUP_CLASS])
        if rc != 0:
            log.warning(f"Unable to remove JndiLookup.class from '{jar}': "
                        f"{stderr.strip() or f'zip exited {rc}'}")
            return RemediationResult(jar, backup, False, stderr.strip())
        return RemediationResult(jar, backup, True)

    def remediate_all(self, suspects: list) -> list:
        verbose("Trying to fix suspect jars...", 3)
        return [self.remediate(c) for c in suspects]
