"""Argument parsing functionality for rubyresolve."""

import argparse


def _check_spec(value):
    """Parse ``name:constraint[,constraint...]`` into (name, [constraints])."""
    name, sep, rest = value.partition(":")
    constraints = [c.strip() for c in rest.split(",") if c.strip()]
    if not name.strip() or not sep or not constraints:
        raise argparse.ArgumentTypeError(
            f"expected NAME:CONSTRAINT[,CONSTRAINT...], got '{value}'"
        )
    return name.strip(), constraints


def _positive_float(value):
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: '{value}'") from e
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="rubyresolve",
        description=(
            "rubyresolve - resolve the Ruby engine, Ruby version and locked gems of an application"
        ),
        add_help=True,
    )

    parser.add_argument("-d", "--directory",
                        dest="BUILD_DIR",
                        help="Application build directory containing the Gemfile",
                        action="store", type=str,
                        default=".")
    parser.add_argument("-m", "--manifest",
                        dest="MANIFEST",
                        help="Buildpack manifest.yml listing installable versions",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-g", "--gem",
                        dest="GEMS",
                        help="Report presence and version of a gem (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-c", "--check",
                        dest="CHECKS",
                        help="Check a gem against constraints, e.g. rails:>=4.1.0.beta1 (repeatable)",
                        action="append", type=_check_spec,
                        default=[])
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the JSON report to this path instead of stdout",
                        action="store",
                        type=str)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="YAML config file (defaults to $RUBYRESOLVE_CONFIG or ./rubyresolve.yml)",
                        action="store",
                        type=str)
    parser.add_argument("--ruby-binary",
                        dest="RUBY_BINARY",
                        help="Ruby interpreter used to evaluate Gemfiles",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Seconds to wait for each ruby evaluation",
                        action="store",
                        type=_positive_float)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
