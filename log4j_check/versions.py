"""Version gating for log4j: which releases ship with JNDI lookups disabled.

1.x has been determined not to be vulnerable, and any version from 2.16 on
(including new major versions) disables JNDI lookups by default.  2.16 still
ships JndiLookup.class, so it can be re-enabled with -Dlog4j2.enableJndi=true.
"""
import os
import re
from typing import Optional
from xml.etree import ElementTree

MAJOR_WANTED = 2
MINOR_MINIMUM = 16

KNOWN_DISABLED_RE = re.compile(
    rf"^log4j-core-{MAJOR_WANTED}\.{MINOR_MINIMUM}[0-9.]*\.jar$"
)

NUMERIC_RE = re.compile(r"[0-9]+")

# rpm style "epoch:version-release"
PACKAGE_VERSION_RE = re.compile(r"^(?:\d+:)?([^-]+)(?:-.*)?$")


def is_exempt(version: Optional[str]) -> bool:
    """True when `version` is known to have JNDI lookups disabled.

    Anything that does not parse as numeric major.minor is not exempt.
    """
    if not version:
        return False
    major, _, rest = version.strip().partition(".")
    minor = rest.split(".", 1)[0]
    if not (NUMERIC_RE.fullmatch(major) and NUMERIC_RE.fullmatch(minor)):
        return False
    major, minor = int(major), int(minor)
    return major < MAJOR_WANTED or (major == MAJOR_WANTED and minor >= MINOR_MINIMUM)


def package_version(raw: str) -> str:
    """Strip an rpm epoch and release: '1:2.14.1-1' -> '2.14.1'."""
    raw = raw.strip()
    match = PACKAGE_VERSION_RE.match(raw)
    return match.group(1) if match else raw


def is_known_disabled_name(archive_path: str) -> bool:
    return bool(KNOWN_DISABLED_RE.match(os.path.basename(archive_path)))


def _strip_ns(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(elem, name: str) -> Optional[str]:
    for child in elem:
        if _strip_ns(child.tag) == name:
            return (child.text or "").strip()
    return None


def pom_log4j_version(pom_xml: str) -> Optional[str]:
    """Pull the log4j version out of a maven pom.xml.

    The module poms inherit from the `log4j` parent, so prefer the parent's
    version and fall back to the project's own <version>.
    """
    try:
        root = ElementTree.fromstring(pom_xml)
    except ElementTree.ParseError:
        return None
    for child in root:
        if _strip_ns(child.tag) == "parent" and _child_text(child, "artifactId") == "log4j":
            return _child_text(child, "version") or None
    return _child_text(root, "version") or None
