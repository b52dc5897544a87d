"""CLI entrypoint: announce the current commit to downstream Travis CI builds."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from downstream_trigger import __version__
from downstream_trigger.config import TriggerSettings
from downstream_trigger.errors import (
    CommitResolutionError,
    MissingCredentialError,
    TargetConfigError,
)
from downstream_trigger.git import GitRepository
from downstream_trigger.logging import configure_logging
from downstream_trigger.models import TriggerReport
from downstream_trigger.targets import resolve_targets
from downstream_trigger.travis.client import TravisClient
from downstream_trigger.trigger import BuildTrigger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRIGGER_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_COMMIT_UNRESOLVED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="downstream-trigger",
        description="Trigger Travis CI builds of downstream projects for the current git commit",
    )
    parser.add_argument(
        "--version", action="version", version=f"downstream-trigger {__version__}"
    )
    parser.add_argument(
        "--targets",
        type=Path,
        default=None,
        help="JSON file listing downstream targets (overrides TRIGGER_TARGETS_FILE)",
    )
    parser.add_argument(
        "--repo-dir",
        type=Path,
        default=None,
        help="Working copy to read the commit from (overrides TRIGGER_REPO_DIR)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve the commit and log every request body without sending anything",
    )
    return parser


def _print_report(report: TriggerReport) -> None:
    verb = "Would trigger" if report.dry_run else "Triggered"
    for outcome in report.outcomes:
        if outcome.ok:
            print(f"{verb} {outcome.target}")
        else:
            print(f"Failed {outcome.target}: {outcome.error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = TriggerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level, fmt=settings.log_format)

    travis: TravisClient | None = None
    try:
        targets = resolve_targets(args.targets or settings.targets_file)
        repo_dir = args.repo_dir or settings.repo_dir

        if not args.dry_run:
            travis = TravisClient(
                token=settings.travis_api_token,
                base_url=settings.travis_api_url,
                timeout=settings.request_timeout,
            )

        trigger = BuildTrigger(
            git=GitRepository(repo_dir),
            travis=travis,
            message_prefix=settings.message_prefix,
            commit_env_var=settings.commit_env_var,
            max_workers=settings.max_workers,
        )
        report = trigger.run(targets, dry_run=args.dry_run)

    except (MissingCredentialError, TargetConfigError) as e:
        logger.error(str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    except CommitResolutionError as e:
        logger.error("Error getting git commit", extra={"error": str(e)})
        print(f"Error getting git commit: {e}", file=sys.stderr)
        return EXIT_COMMIT_UNRESOLVED

    except Exception:
        logger.exception("Trigger run failed")
        return EXIT_TRIGGER_FAILED

    finally:
        if travis is not None:
            travis.close()

    _print_report(report)
    return EXIT_OK if report.ok else EXIT_TRIGGER_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
