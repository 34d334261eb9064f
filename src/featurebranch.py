"""featurebranch - pin internal dependencies to the root project's feature branch

Loads the root manifest, builds the package pool, dispatches the selected
lifecycle event through the feature branch plugin and reports the effective
requirements.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import ExitCodes, Constants, RewriteOutcome
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from manifest.loader import ManifestError, load_root_package
from plugin.config import EligibilityConfig, load_config_file
from plugin.events import EventDispatcher, PluginEvent
from plugin.feature_branch import FeatureBranchPlugin
from registry.pool import InMemoryPackagePool, load_pool_file
from registry.repository import RepositoryPackagePool
from versioning.parser import InvalidVersionError

logger = logging.getLogger(__name__)


def build_pool(args, config):
    """Builds the package pool selected on the command line.

    Args:
        args (argparse.Namespace): Parsed arguments.
        config (EligibilityConfig): Effective configuration; its repositories are preloaded.

    Returns:
        PackagePool: Pool answering version lookups from memory.
    """
    if getattr(args, "POOL_FILE", None):
        return load_pool_file(args.POOL_FILE)
    if getattr(args, "REPOSITORY", None):
        pool = RepositoryPackagePool(args.REPOSITORY)
        pool.preload(config.repositories)
        if pool.errors and len(pool) == 0:
            logger.error("Repository %s could not be reached, aborting", args.REPOSITORY)
            sys.exit(ExitCodes.CONNECTION_ERROR.value)
        return pool
    logger.warning("No package pool given (--pool or --repository); only fallbacks can apply.")
    return InMemoryPackagePool()


def _constraint_fields(decision):
    if decision.constraint is None:
        return None, None
    return str(decision.constraint), decision.constraint.pretty_string


def render_json(root, event_name, decisions):
    """Renders the run as a JSON document.

    Args:
        root (RootPackage): Root package after the rewrite.
        event_name (str): Dispatched lifecycle event.
        decisions (list): RewriteDecision entries.

    Returns:
        str: JSON text.
    """
    payload = {
        "root": {
            "name": root.name,
            "version": root.version,
            "pretty_version": root.pretty_version,
            "is_dev": root.is_dev,
        },
        "event": event_name,
        "decisions": [],
        "require": {req.target: req.pretty_constraint for req in root.requires.values()},
        "require-dev": {req.target: req.pretty_constraint for req in root.dev_requires.values()},
    }
    for decision in decisions:
        constraint, pretty = _constraint_fields(decision)
        payload["decisions"].append({
            "package": decision.target,
            "outcome": decision.outcome.value,
            "constraint": constraint,
            "pretty_constraint": pretty,
        })
    return json.dumps(payload, indent=2)


def render_text(root, event_name, decisions):
    """Renders the run as plain text lines."""
    lines = [
        f"Root: {root.name} {root.pretty_version} ({'dev' if root.is_dev else 'stable'})",
        f"Event: {event_name}",
    ]
    if decisions:
        lines.append("Decisions:")
        for decision in decisions:
            _, pretty = _constraint_fields(decision)
            suffix = f" -> {pretty}" if pretty else ""
            lines.append(f"  {decision.target}: {decision.outcome.value}{suffix}")
    for title, requirements in (("Requires", root.requires), ("Requires (dev)", root.dev_requires)):
        if requirements:
            lines.append(f"{title}:")
            for req in requirements.values():
                lines.append(f"  {req.target}: {req.pretty_constraint}")
    return "\n".join(lines)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        root = load_root_package(args.MANIFEST, root_version=args.ROOT_VERSION)
        overrides = load_config_file(args.CONFIG) if getattr(args, "CONFIG", None) else None
    except (ManifestError, InvalidVersionError) as e:
        logger.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    plugin = FeatureBranchPlugin()
    try:
        config = EligibilityConfig.from_extra(root.extra).merged(overrides)
    except (TypeError, ValueError) as e:
        logger.error("Invalid feature branch configuration: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        pool = build_pool(args, config)
    except ManifestError as e:
        logger.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    plugin.activate(root, pool, overrides)
    dispatcher = EventDispatcher()
    dispatcher.add_subscriber(plugin)

    event_name = Constants.EVENT_CHOICES[args.EVENT].value
    results = dispatcher.dispatch(event_name, PluginEvent(event_name, root))
    decisions = [decision for result in results for decision in (result or [])]

    if not args.QUIET:
        if args.OUTPUT_FORMAT == "json":
            print(render_json(root, event_name, decisions))
        else:
            print(render_text(root, event_name, decisions))

    unmatched = [d.target for d in decisions if d.outcome == RewriteOutcome.NO_MATCH]
    if unmatched:
        logger.warning("No feature branch or fallback for: %s", ", ".join(unmatched))
        if args.ERROR_ON_NO_MATCH:
            logger.error("Unmatched dependencies present, exiting with non-zero status code.")
            sys.exit(ExitCodes.EXIT_WARNINGS.value)

    sys.exit(ExitCodes.SUCCESS.value)

if __name__ == "__main__":
    main()
