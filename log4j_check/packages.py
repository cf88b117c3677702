"""Installed-package check via rpm(8)."""
from .models import PackageFinding
from .output import log, verbose
from .tools import Capabilities, run
from .versions import is_exempt, package_version

PACKAGE_NEEDLE = "log4j"
QUERY_FORMAT = "%{NAME}--%{EPOCH}:%{VERSION}-%{RELEASE}\\n"


def parse_rpm_query(output: str) -> list:
    """`name--[epoch:]version[-release]` lines mentioning log4j -> findings."""
    findings = []
    for line in output.splitlines():
        line = line.strip()
        if PACKAGE_NEEDLE not in line or "--" not in line:
            continue
        name, _, raw_version = line.rpartition("--")
        # rpm prints "(none)" for packages without an epoch
        raw_version = raw_version.replace("(none):", "")
        version = package_version(raw_version)
        findings.append(PackageFinding(
            package_name=name, version=version, exempt=is_exempt(version)
        ))
    return findings


def check_rpms(caps: Capabilities) -> list:
    """Non-exempt log4j packages known to the rpm database."""
    verbose("Checking rpms...", 4)
    stdout, stderr, rc = run([caps.rpm, "-qa", "--queryformat", QUERY_FORMAT])
    if rc != 0:
        log.warning(f"rpm(8) query failed: {stderr.strip()}")
        return []
    return [f for f in parse_rpm_query(stdout) if not f.exempt]


def check_packages(caps: Capabilities) -> list:
    verbose("Checking for vulnerable packages...", 2)
    if not caps.rpm:
        verbose("rpm(8) not found, skipping package check.", 3)
        return []
    return check_rpms(caps)
