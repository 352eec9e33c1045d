"""
tests/test_owners.py
Unit tests for buildpack_notify/owners.py.
"""

from unittest.mock import MagicMock

import pytest


def _app(guid, space_guid):
    from buildpack_notify.cf.models import Application

    return Application(guid=guid, name=f"app-{guid}", state="STARTED", space_guid=space_guid)


def _role(user_guid, username, *roles):
    from buildpack_notify.cf.models import SpaceRole

    return SpaceRole(user_guid=user_guid, username=username, roles=list(roles))


def _client(roles_by_space):
    from buildpack_notify.cf.models import Space

    client = MagicMock()
    client.get_space.side_effect = lambda app: Space(guid=app.space_guid, name=f"name-{app.space_guid}")
    client.get_space_roles.side_effect = lambda space: roles_by_space[space.guid]
    return client


def test_is_valid_email():
    from buildpack_notify.owners import is_valid_email

    assert is_valid_email("alice@agency.gov") is True
    assert is_valid_email("not-an-email") is False
    assert is_valid_email("") is False
    assert is_valid_email("alice@") is False


@pytest.mark.parametrize(
    "username", ["ops@localhost", "dev@agency.local", "admin@example", "svc@cloud.test"]
)
def test_dotless_and_special_use_domains_are_valid(username):
    from buildpack_notify.owners import is_valid_email

    assert is_valid_email(username) is True


def test_invalid_email_user_is_never_an_owner(logger):
    from buildpack_notify.owners import find_owners_of_apps

    client = _client(
        {
            "space-1": [
                _role("u1", "not-an-email", "space_manager"),
                _role("u2", "bob@agency.gov", "space_developer"),
            ]
        }
    )
    owners = find_owners_of_apps([_app("a1", "space-1")], client, logger)

    assert list(owners) == ["bob@agency.gov"]


def test_only_manager_and_developer_roles_are_owners(logger):
    from buildpack_notify.owners import find_owners_of_apps

    client = _client(
        {
            "space-1": [
                _role("u1", "auditor@agency.gov", "space_auditor"),
                _role("u2", "supporter@agency.gov", "space_supporter"),
                _role("u3", "manager@agency.gov", "space_auditor", "space_manager"),
                _role("u4", "dev@agency.gov", "space_developer"),
            ]
        }
    )
    owners = find_owners_of_apps([_app("a1", "space-1")], client, logger)

    assert sorted(owners) == ["dev@agency.gov", "manager@agency.gov"]


def test_space_lookups_are_cached_per_space(logger):
    from buildpack_notify.owners import find_owners_of_apps

    client = _client(
        {
            "space-1": [_role("u1", "alice@agency.gov", "space_manager")],
            "space-2": [_role("u1", "alice@agency.gov", "space_developer")],
        }
    )
    apps = [_app("a1", "space-1"), _app("a2", "space-1"), _app("a3", "space-2")]
    owners = find_owners_of_apps(apps, client, logger)

    assert owners == {"alice@agency.gov": apps}
    assert client.get_space.call_count == 2
    assert client.get_space_roles.call_count == 2


def test_app_with_multiple_owners_appears_once_per_owner(logger):
    from buildpack_notify.owners import find_owners_of_apps

    client = _client(
        {
            "space-1": [
                _role("u1", "alice@agency.gov", "space_manager"),
                _role("u2", "bob@agency.gov", "space_developer"),
            ]
        }
    )
    app = _app("a1", "space-1")
    owners = find_owners_of_apps([app], client, logger)

    assert owners == {"alice@agency.gov": [app], "bob@agency.gov": [app]}


def test_space_owner_cache_get_owners_populates_once(logger):
    from buildpack_notify.owners import SpaceOwnerCache

    client = _client({"space-1": [_role("u1", "alice@agency.gov", "space_manager")]})
    cache = SpaceOwnerCache(client, logger)
    first = cache.get_owners(_app("a1", "space-1"))
    second = cache.get_owners(_app("a2", "space-1"))

    assert first is second
    assert list(first) == ["u1"]
    assert len(cache) == 1


@pytest.mark.parametrize("failing", ["get_space", "get_space_roles"])
def test_space_or_role_failure_is_fatal(logger, failing):
    from buildpack_notify.errors import OwnerResolutionError, PlatformAPIError
    from buildpack_notify.owners import find_owners_of_apps

    client = _client({"space-1": []})
    getattr(client, failing).side_effect = PlatformAPIError("403 Forbidden")

    with pytest.raises(OwnerResolutionError, match="403 Forbidden"):
        find_owners_of_apps([_app("a1", "space-1")], client, logger)


def test_no_outdated_apps_means_no_lookups(logger):
    from buildpack_notify.owners import find_owners_of_apps

    client = _client({})
    assert find_owners_of_apps([], client, logger) == {}
    client.get_space.assert_not_called()
