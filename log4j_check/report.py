"""Verdict: fold suspect jars, flag overrides, backups and packages into a report."""
import sys

from .models import ScanState
from .output import log_prefix

EXIT_CLEAN = 0
EXIT_FINDINGS = 1


class ReportGenerator:
    def __init__(self, state: ScanState, fix_requested: bool = False):
        self.state = state
        self.fix_requested = fix_requested

    def lines(self) -> list:
        state = self.state
        if state.clean:
            return [f"{log_prefix()}: No obvious indicators of vulnerability found."]

        lines = []
        if state.suspects:
            lines.append("The following jars were found to include 'JndiLookup.class':")
            lines.extend(str(c.identity) for c in state.suspects)
            lines.append("")

            if self.fix_requested:
                lines.append("I tried to fix them by removing that class.")
                fixed = state.fixed
                if fixed:
                    lines.append("Backup copies of the following are left on the system:")
                    lines.extend(fixed)
                    lines.append("")
                    lines.append("Remember to restart any services using those jars.")
                else:
                    lines.append("Looks like I was unable to do that, though.")
                lines.append("")

        if state.concerns:
            lines.append("The following jars normally have JNDI Lookups disabled, "
                         "but a process re-enables them via command-line flags:")
            lines.extend(
                f"{c.identity} (process {c.process_id})" for c in state.concerns
            )
            lines.append("")

        if state.packages:
            lines.append("The following packages might still be vulnerable:")
            lines.extend(str(p) for p in state.packages)
            lines.append("")
        return lines

    def exit_code(self) -> int:
        return EXIT_CLEAN if self.state.clean else EXIT_FINDINGS

    def emit(self, stream=None) -> int:
        stream = stream or sys.stdout
        for line in self.lines():
            print(line, file=stream)
        return self.exit_code()
