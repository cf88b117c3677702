"""CLI entry point for log4j-check."""
import argparse
import sys

from .config import build_options, load_config
from .discovery import SKIP_CHOICES
from .errors import SetupError
from .output import PROGNAME, VERSION, log_prefix, setup_logging
from .report import ReportGenerator
from .scanner import Log4jScanner

EXIT_USAGE = 1
EXIT_SETUP = 1


class UsageParser(argparse.ArgumentParser):
    """Usage errors print the usage and exit 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: {message}", file=sys.stderr)
        sys.exit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog=PROGNAME,
        usage="%(prog)s [-fhv] [-c config] [-j jar] [-s skip] [-p path]",
        description=(
            f"%(prog)s {VERSION} - determine whether this host is likely to be "
            "vulnerable to log4j RCE CVE-2021-44228"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check processes, packages and the whole filesystem
  log4j-check

  # Only look under /opt and /srv, and fix what is found
  log4j-check -f -p /opt -p /srv

  # Check only these jars
  log4j-check -j ./app.jar -j /opt/lib/log4j-core-2.14.1.jar
        """,
    )
    parser.add_argument("-c", dest="config", metavar="config",
                        help="read defaults from this YAML config file")
    parser.add_argument("-f", dest="fix", action="store_true",
                        help="attempt to fix the issue by removing JndiLookup.class")
    parser.add_argument("-j", dest="jars", action="append", default=[], metavar="jar",
                        help="check only this jar (repeatable)")
    parser.add_argument("-p", dest="paths", action="append", default=[], metavar="path",
                        help="limit filesystem traversal to this directory (repeatable)")
    parser.add_argument("-s", dest="skip", action="append", default=[], metavar="skip",
                        choices=SKIP_CHOICES,
                        help="skip these checks (files, packages, processes)")
    parser.add_argument("-v", dest="verbosity", action="count", default=0,
                        help="be verbose (repeatable)")
    return parser


def main(argv=None) -> int:
    for stream in (sys.stdout, sys.stderr):
        # paths that are not valid UTF-8 carry surrogate escapes
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure:
            reconfigure(errors="backslashreplace")

    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else {}
        options = build_options(
            config, args.config or "",
            fix=args.fix, jars=args.jars, search_paths=args.paths,
            skip=args.skip, verbosity=args.verbosity,
        )
        setup_logging(options.verbosity)
        state = Log4jScanner(options).scan()
    except SetupError as exc:
        print(f"{log_prefix()}: {exc}", file=sys.stderr)
        return EXIT_SETUP

    return ReportGenerator(state, fix_requested=options.fix).emit()


if __name__ == "__main__":
    sys.exit(main())
