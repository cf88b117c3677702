"""Running-process evidence: JNDI re-enabling flag and jars held open by java."""
import os
from typing import Optional

from .models import Candidate
from .output import log, verbose
from .tools import Capabilities, run

FATAL_SETTING = "-Dlog4j2.enableJndi=true"
JAR_SUFFIX = ".jar"
PROC_CMDLINE = "/proc/{pid}/cmdline"


def read_cmdline(pid: int, caps: Optional[Capabilities] = None) -> Optional[str]:
    """Full command line of `pid`, or None if it cannot be read."""
    proc_path = PROC_CMDLINE.format(pid=pid)
    if os.path.exists(proc_path):
        try:
            with open(proc_path, "rb") as f:
                raw = f.read()
            return raw.replace(b"\0", b" ").decode(errors="replace").strip()
        except OSError:
            return None
    if caps is None or not caps.ps:
        return None
    stdout, _, rc = run([caps.ps, "-www", "-p", str(pid), "-o", "command="], timeout=30)
    if rc != 0:
        return None
    return stdout.strip() or None


def has_jndi_reenable_flag(pid: int, caps: Optional[Capabilities] = None) -> bool:
    verbose(f"Checking process {pid} for command-line flags...", 6)
    cmdline = read_cmdline(pid, caps)
    if cmdline is None:
        return False
    return FATAL_SETTING in cmdline


def _unique(candidates: list) -> list:
    seen = set()
    out = []
    for c in candidates:
        if c not in seen:
            seen.add(c)
            out.append(c)
    return out


def parse_lsof(output: str) -> list:
    """`lsof -c java` lines for regular files ending in .jar -> candidates."""
    candidates = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 3 or "REG" not in fields[2:]:
            continue
        if not line.rstrip().endswith(JAR_SUFFIX):
            continue
        try:
            pid = int(fields[1])
        except ValueError:
            continue
        candidates.append(Candidate(archive_path=fields[-1], process_id=pid))
    return _unique(candidates)


def parse_ps(output: str) -> list:
    """`ps -o pid,command= -wwwax` lines whose command ends in .jar."""
    candidates = []
    for line in output.splitlines():
        line = line.strip()
        if not line.endswith(JAR_SUFFIX):
            continue
        fields = line.split()
        if len(fields) < 2:
            continue
        try:
            pid = int(fields[0])
        except ValueError:
            continue
        candidates.append(Candidate(archive_path=fields[-1], process_id=pid))
    return _unique(candidates)


def find_process_jars(caps: Capabilities) -> list:
    """Jars used by running processes, via lsof or, failing that, ps."""
    verbose("Checking running processes...", 3)
    if caps.lsof:
        stdout, stderr, rc = run([caps.lsof, "-c", "java"])
        # lsof exits 1 when nothing matched
        if rc not in (0, 1):
            log.warning(f"lsof(8) failed: {stderr.strip()}")
            return []
        return parse_lsof(stdout)
    if caps.ps:
        stdout, stderr, rc = run([caps.ps, "-o", "pid,command=", "-wwwax"])
        if rc != 0:
            log.warning(f"ps(1) failed: {stderr.strip()}")
            return []
        return parse_ps(stdout)
    log.warning("Neither lsof(8) nor ps(1) found, unable to check processes.")
    return []
