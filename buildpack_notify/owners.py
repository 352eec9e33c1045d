"""
buildpack_notify/owners.py
Resolves the space managers and developers who own outdated applications.
Exports: APP_OWNER_ROLES, SpaceOwnerCache, filter_for_valid_email_usernames, filter_for_users_with_roles, find_owners_of_apps
"""

import logging
from typing import Any

from email_validator import EmailNotValidError, validate_email

from buildpack_notify.cf.models import Application, SpaceRole
from buildpack_notify.errors import OwnerResolutionError, PlatformAPIError

APP_OWNER_ROLES = frozenset({"space_manager", "space_developer"})


def is_valid_email(username: str) -> bool:
    """Return whether a username is a syntactically valid e-mail address."""
    try:
        validate_email(
            username,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return False
    return True


def filter_for_valid_email_usernames(
    users: list[SpaceRole], app: Application, logger: logging.Logger
) -> list[SpaceRole]:
    """Drop users whose username cannot receive e-mail."""
    valid: list[SpaceRole] = []
    for user in users:
        if is_valid_email(user.username):
            valid.append(user)
        else:
            logger.warning(
                "Dropping notification to user %s about app %s in space %s because invalid e-mail address",
                user.username,
                app.name,
                app.space_guid,
            )
    return valid


def filter_for_users_with_roles(
    users: list[SpaceRole], roles: frozenset[str] = APP_OWNER_ROLES
) -> dict[str, SpaceRole]:
    """Keep users holding at least one of ``roles``, keyed by user GUID."""
    return {user.user_guid: user for user in users if roles.intersection(user.roles)}


class SpaceOwnerCache:
    """
    Owners per space, fetched once per space for the lifetime of one run.

    The first application seen in a space triggers the space and role lookups;
    later applications in that space reuse the result.
    """

    def __init__(self, client: Any, logger: logging.Logger) -> None:
        self._client = client
        self._logger = logger
        self._owners_by_space: dict[str, dict[str, SpaceRole]] = {}

    def __len__(self) -> int:
        return len(self._owners_by_space)

    def get_owners(self, app: Application) -> dict[str, SpaceRole]:
        """
        Return owners of the application's space, populating the cache on first use.

        Raises:
            OwnerResolutionError: When the space or its roles cannot be fetched.
        """
        cached = self._owners_by_space.get(app.space_guid)
        if cached is not None:
            return cached
        try:
            space = self._client.get_space(app)
        except PlatformAPIError as exc:
            raise OwnerResolutionError(f"Unable to get space of app {app.name}. Error: {exc}") from exc
        try:
            space_roles = self._client.get_space_roles(space)
        except PlatformAPIError as exc:
            raise OwnerResolutionError(
                f"Unable to get roles for all users in space {space.name}. Error: {exc}"
            ) from exc
        space_roles = filter_for_valid_email_usernames(space_roles, app, self._logger)
        owners = filter_for_users_with_roles(space_roles)
        self._owners_by_space[app.space_guid] = owners
        return owners


def find_owners_of_apps(
    apps: list[Application], client: Any, logger: logging.Logger
) -> dict[str, list[Application]]:
    """
    Group outdated applications by the username of each owner.

    Args:
        apps: Outdated applications.
        client: Platform client exposing ``get_space`` and ``get_space_roles``.
        logger: Run logger.
    Returns:
        Username -> applications that user owns, in application order.
    Raises:
        OwnerResolutionError: When any space lookup fails.
    """
    owners: dict[str, list[Application]] = {}
    space_cache = SpaceOwnerCache(client, logger)
    for app in apps:
        for owner in space_cache.get_owners(app).values():
            owners.setdefault(owner.username, []).append(app)
    return owners
