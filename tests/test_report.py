"""Tests for the final verdict."""

from __future__ import annotations

import io

from log4j_check.models import (
    ArchiveIdentity,
    Classification,
    PackageFinding,
    RemediationResult,
    ScanState,
)
from log4j_check.report import EXIT_CLEAN, EXIT_FINDINGS, ReportGenerator


def test_clean():
    out = io.StringIO()
    assert ReportGenerator(ScanState()).emit(out) == EXIT_CLEAN
    assert "No obvious indicators of vulnerability found." in out.getvalue()


def test_suspects_listed_with_nesting():
    state = ScanState()
    state.add_classification(Classification(ArchiveIdentity("/opt/a.jar")))
    state.add_classification(Classification(ArchiveIdentity("lib/log4j.jar", "/opt/b.jar")))
    lines = ReportGenerator(state).lines()
    assert "/opt/a.jar" in lines
    assert "/opt/b.jar:lib/log4j.jar" in lines
    assert ReportGenerator(state).exit_code() == EXIT_FINDINGS


def test_remediated_run_still_has_findings():
    state = ScanState()
    state.add_classification(Classification(ArchiveIdentity("/opt/a.jar")))
    state.remediations.append(RemediationResult("/opt/a.jar", "/opt/a.jar.bak", True))
    gen = ReportGenerator(state, fix_requested=True)
    lines = gen.lines()
    assert "/opt/a.jar.bak" in lines
    assert "Remember to restart any services using those jars." in lines
    assert gen.exit_code() == EXIT_FINDINGS


def test_failed_remediation():
    state = ScanState()
    state.add_classification(Classification(ArchiveIdentity("/opt/a.jar")))
    state.remediations.append(RemediationResult("/opt/a.jar", "/opt/a.jar.bak", False))
    assert "Looks like I was unable to do that, though." in ReportGenerator(state, True).lines()


def test_packages_and_concerns():
    state = ScanState()
    state.add_package(PackageFinding("log4j", "2.14.1"))
    state.add_classification(Classification(
        ArchiveIdentity("/opt/log4j-core-2.16.0.jar"), process_id=7,
        exempt_by_name=True, jndi_reenabled_by_flag=True,
    ))
    lines = ReportGenerator(state).lines()
    assert "log4j-2.14.1" in lines
    assert "/opt/log4j-core-2.16.0.jar (process 7)" in lines
    assert state.suspects == []


def test_exempt_without_flag_is_clean():
    state = ScanState()
    state.add_classification(Classification(
        ArchiveIdentity("/opt/log4j-core-2.17.1.jar"), exempt_by_version=True,
    ))
    assert ReportGenerator(state).exit_code() == EXIT_CLEAN
