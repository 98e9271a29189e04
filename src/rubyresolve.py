"""rubyresolve - resolve Ruby engine, version and locked gems for staging."""
import json
import logging
import sys

from constants import Constants, ExitCodes, apply_config
from common.logging_utils import configure_logging, extra_context
from args import parse_args

from buildpack.manifest import BuildpackManifest, ManifestError
from versioning import Versions
from versioning.bridge import RubyBridge
from versioning.errors import MissingLockfile, ResolutionError, UnsupportedEngine
from cli_resolve import build_report

logger = logging.getLogger(__name__)


def _setup_logging(args):
    configure_logging(args.LOG_LEVEL)
    if args.LOG_FILE:
        file_handler = logging.FileHandler(args.LOG_FILE)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)


def _apply_cli_overrides(args):
    if args.RUBY_BINARY:
        Constants.RUBY_BINARY = args.RUBY_BINARY
    if args.TIMEOUT is not None:
        Constants.BRIDGE_TIMEOUT_SEC = args.TIMEOUT


def _write_report(report, path):
    text = json.dumps(report, indent=2, sort_keys=True)
    if not path:
        print(text)
        return
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text + "\n")
    logger.info("Report written to %s", path)


def main(argv=None):
    """Main function of the program.

    Returns:
        int: Exit code
    """
    args = parse_args(argv)
    _setup_logging(args)
    apply_config(args.CONFIG)
    _apply_cli_overrides(args)

    try:
        catalog = BuildpackManifest.load(args.MANIFEST)
    except ManifestError as e:
        logger.error("Unable to load manifest: %s", e)
        return ExitCodes.FILE_ERROR.value

    versions = Versions(args.BUILD_DIR, catalog, RubyBridge())
    try:
        report = build_report(versions, args.GEMS, args.CHECKS)
    except UnsupportedEngine as e:
        logger.error("%s", e, extra=extra_context(event="resolve", outcome="unsupported_engine", engine=e.engine))
        return ExitCodes.UNSUPPORTED_ENGINE.value
    except (MissingLockfile, ManifestError) as e:
        logger.error("%s", e, extra=extra_context(event="resolve", outcome="file_error"))
        return ExitCodes.FILE_ERROR.value
    except ResolutionError as e:
        logger.error("Unable to resolve: %s", e, extra=extra_context(event="resolve", outcome="error"))
        return ExitCodes.RESOLUTION_ERROR.value

    try:
        _write_report(report, args.OUTPUT)
    except OSError as e:
        logger.error("Unable to write report: %s", e)
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.SUCCESS.value


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
