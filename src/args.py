"""Argument parsing functionality for featurebranch."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="featurebranch",
        description=(
            "featurebranch - Pin internal dependencies to the root project's feature branch"
        ),
        add_help=True,
    )

    parser.add_argument("-m", "--manifest",
                        dest="MANIFEST",
                        help="Path to the root manifest (default: composer.json)",
                        action="store", type=str,
                        default=Constants.MANIFEST_FILE)

    pool_group = parser.add_mutually_exclusive_group()
    pool_group.add_argument("-p", "--pool",
                        dest="POOL_FILE",
                        help="Load available package versions from an installed.json or packages.json snapshot",
                        action="store", type=str)
    pool_group.add_argument("-r", "--repository",
                        dest="REPOSITORY",
                        help="Composer v2 repository URL to fetch package versions from",
                        action="store", type=str)

    parser.add_argument("-e", "--event",
                        dest="EVENT",
                        help="Lifecycle event to dispatch (default: install)",
                        action="store", type=str.lower,
                        choices=sorted(Constants.EVENT_CHOICES),
                        default="install")
    parser.add_argument("--root-version",
                        dest="ROOT_VERSION",
                        help="Override the root project version (like COMPOSER_ROOT_VERSION)",
                        action="store", type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Report format printed to stdout (default: text)",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS,
                        default="text")
    parser.add_argument("--error-on-no-match",
                        dest="ERROR_ON_NO_MATCH",
                        help="Exit with a non-zero status code if an eligible dependency was left unchanged.",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: FEATUREBRANCH_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not print the report to the console.",
                        action="store_true")

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON) overriding the manifest extra section",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
