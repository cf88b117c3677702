"""External utilities: one-time capability probe and a subprocess runner."""
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Tuple


def run(cmd: list, timeout: int = 300) -> Tuple[str, str, int]:
    """Run a local subprocess; returns (stdout, stderr, returncode)."""
    try:
        proc = subprocess.run(
            cmd, capture_output=True, text=True, errors="replace", timeout=timeout
        )
        return proc.stdout or "", proc.stderr or "", proc.returncode
    except subprocess.TimeoutExpired:
        return "", "Command timed out", -1
    except FileNotFoundError:
        return "", f"Not found: {cmd[0]}", -1
    except OSError as exc:
        return "", str(exc), -1


@dataclass(frozen=True)
class Capabilities:
    """Which optional utilities exist on this host, probed once per run."""
    unzip: Optional[str] = None
    zip: Optional[str] = None
    lsof: Optional[str] = None
    ps: Optional[str] = None
    rpm: Optional[str] = None

    @classmethod
    def probe(cls) -> "Capabilities":
        return cls(
            unzip=shutil.which("unzip"),
            zip=shutil.which("zip"),
            lsof=shutil.which("lsof"),
            ps=shutil.which("ps"),
            rpm=shutil.which("rpm"),
        )
