"""
buildpack_notify/runner.py
One batch pass: state -> changed buildpacks -> outdated apps -> owners -> e-mail -> state.
Exports: NotifyRuntime, NotifyRunResult, run_notify
"""

from dataclasses import dataclass
import logging
from typing import Any

from buildpack_notify.buildpack_filter import (
    filter_newly_updated_buildpacks,
    index_buildpacks_by_name,
)
from buildpack_notify.config import NotifyConfig
from buildpack_notify.notify import send_notify_email_to_users
from buildpack_notify.outdated import find_outdated_apps
from buildpack_notify.owners import find_owners_of_apps
from buildpack_notify.state import copy_state, load_state, save_state


@dataclass
class NotifyRuntime:
    """Collaborators injected by the entry point (or by tests)."""

    client: Any
    mailer: Any


@dataclass
class NotifyRunResult:
    """Counters reported at the end of a run."""

    changed_buildpacks: int
    outdated_apps: int
    owners: int
    sent: int
    dry_run: bool


def run_notify(
    *,
    config: NotifyConfig,
    runtime: NotifyRuntime,
    logger: logging.Logger,
) -> NotifyRunResult:
    """
    Execute one notification run end-to-end.

    Args:
        config: State paths and dry-run flag.
        runtime: Platform client and mailer.
        logger: Run logger.
    Returns:
        NotifyRunResult counters.
    Raises:
        StateError: State cannot be loaded or persisted.
        PlatformAPIError: Application or buildpack listing failed.
        OwnerResolutionError: A space or its roles could not be fetched.
        TimestampParseError: A stored or platform timestamp is corrupt.
    Side effects:
        Sends e-mail (unless dry run) and writes the output state file.
    """
    if config.dry_run:
        logger.info("Dry-Run mode activated. No modifications happening")
    state = load_state(config.in_state)
    logger.info("Calculating notifications to send for outdated buildpacks.")

    apps = runtime.client.list_apps()
    buildpack_list = runtime.client.list_buildpacks()
    changed, state = filter_newly_updated_buildpacks(buildpack_list, state)
    buildpacks = index_buildpacks_by_name(changed)

    outdated_apps, updated_buildpacks = find_outdated_apps(
        runtime.client, apps, buildpacks, logger
    )
    owners = find_owners_of_apps(outdated_apps, runtime.client, logger)
    logger.info("Will notify %d owners of outdated apps.", len(owners))
    sent = send_notify_email_to_users(
        owners, updated_buildpacks, runtime.mailer, config.dry_run, logger
    )

    if config.dry_run:
        copy_state(config.in_state, config.out_state)
    else:
        save_state(state, config.out_state)
    return NotifyRunResult(
        changed_buildpacks=len(changed),
        outdated_apps=len(outdated_apps),
        owners=len(owners),
        sent=sent,
        dry_run=config.dry_run,
    )
