"""
buildpack_notify/outdated.py
Finds started applications whose current droplet predates an updated buildpack.
Exports: find_outdated_apps, get_current_droplet_for_app, is_droplet_using_supported_buildpack, is_droplet_using_outdated_buildpack
"""

import logging
from typing import Any

from buildpack_notify.cf.models import Application, Buildpack, Droplet
from buildpack_notify.common.timestamps import parse_rfc3339
from buildpack_notify.errors import PlatformAPIError
from buildpack_notify.releases import BuildpackReleaseInfo, build_release_info


def get_current_droplet_for_app(
    client: Any, app: Application, logger: logging.Logger
) -> Droplet | None:
    """
    Return the single current droplet of an application.

    A running app has exactly one current droplet. A failed lookup, none, or
    more than one all yield None so the caller can skip the app.
    """
    try:
        droplets = client.get_current_droplets(app)
    except PlatformAPIError:
        logger.exception("Unable to get droplet for app. App %s App GUID %s", app.name, app.guid)
        return None
    if len(droplets) != 1:
        return None
    return droplets[0]


def is_droplet_using_supported_buildpack(
    droplet: Droplet, buildpacks: dict[str, Buildpack]
) -> Buildpack | None:
    """Return the first updated buildpack the droplet was staged with, if any."""
    for droplet_buildpack in droplet.buildpacks:
        if droplet_buildpack.name and droplet_buildpack.name in buildpacks:
            return buildpacks[droplet_buildpack.name]
    return None


def is_droplet_using_outdated_buildpack(droplet: Droplet, buildpack: Buildpack) -> bool:
    """
    Return whether the buildpack was updated strictly after the droplet was created.

    Raises:
        TimestampParseError: When either timestamp is not RFC3339.
    """
    last_restage = parse_rfc3339(droplet.created_at, f"droplet {droplet.guid} created_at")
    last_buildpack_update = parse_rfc3339(
        buildpack.updated_at, f"buildpack {buildpack.name} guid {buildpack.guid} updated_at"
    )
    return last_buildpack_update > last_restage


def find_outdated_apps(
    client: Any,
    apps: list[Application],
    buildpacks: dict[str, Buildpack],
    logger: logging.Logger,
) -> tuple[list[Application], list[BuildpackReleaseInfo]]:
    """
    Select applications running on a droplet older than an updated buildpack.

    Args:
        client: Platform client exposing ``get_current_droplets(app)``.
        apps: All applications.
        buildpacks: Buildpacks changed in this run, keyed by name.
        logger: Run logger.
    Returns:
        Outdated applications and one release entry per outdated application.
    Raises:
        TimestampParseError: When a droplet or buildpack timestamp is corrupt.
    """
    outdated_apps: list[Application] = []
    updated_buildpacks: list[BuildpackReleaseInfo] = []
    for app in apps:
        if not app.is_started:
            logger.info("App %s guid %s not in STARTED state", app.name, app.guid)
            continue
        droplet = get_current_droplet_for_app(client, app, logger)
        if droplet is None:
            logger.info("Unable to find current droplet for app %s guid %s. Safely skipping.", app.name, app.guid)
            continue
        buildpack = is_droplet_using_supported_buildpack(droplet, buildpacks)
        if buildpack is None:
            logger.info("App %s guid %s not using supported buildpack", app.name, app.guid)
            continue
        if not is_droplet_using_outdated_buildpack(droplet, buildpack):
            logger.info("App %s Guid %s | Buildpack %s not outdated", app.name, app.guid, buildpack.name)
            continue
        logger.info("App %s Guid %s | Buildpack %s is outdated", app.name, app.guid, buildpack.name)
        updated_buildpacks.append(build_release_info(buildpack.name, buildpack.filename))
        outdated_apps.append(app)
    return outdated_apps, updated_buildpacks
