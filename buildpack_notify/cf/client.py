"""
buildpack_notify/cf/client.py
Minimal Cloud Controller v3 client used by the notifier.
Exports: CloudFoundryClient
"""

import base64
import http.client
import json
import logging
import ssl
from typing import Any, Iterator
import urllib.parse
import urllib.request

from buildpack_notify.cf.models import (
    Application,
    Buildpack,
    Droplet,
    Space,
    SpaceRole,
    _safe_dict,
    _safe_list,
)
from buildpack_notify.config import CFAPIConfig
from buildpack_notify.errors import PlatformAPIError

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 5000


def _build_ssl_context(skip_ssl_validation: bool) -> ssl.SSLContext | None:
    if not skip_ssl_validation:
        return None
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _open_json(
    request: urllib.request.Request,
    *,
    timeout: int,
    context: ssl.SSLContext | None,
) -> Any:
    """Send a request and decode its JSON body, raising PlatformAPIError on any failure."""
    try:
        with urllib.request.urlopen(request, timeout=timeout, context=context) as response:  # noqa: S310 - configured API URL
            body = response.read().decode("utf-8")
    except (OSError, http.client.HTTPException, UnicodeDecodeError) as exc:
        raise PlatformAPIError(f"{request.get_method()} {request.full_url} failed: {exc}") from exc
    try:
        return json.loads(body) if body else {}
    except ValueError as exc:
        raise PlatformAPIError(f"{request.get_method()} {request.full_url} returned invalid JSON") from exc


def _fetch_token(
    config: CFAPIConfig, uaa_url: str, context: ssl.SSLContext | None
) -> str:
    """Obtain a client-credentials access token from UAA."""
    credentials = f"{config.client_id}:{config.client_secret}".encode("utf-8")
    request = urllib.request.Request(
        f"{uaa_url.rstrip('/')}/oauth/token",
        data=urllib.parse.urlencode({"grant_type": "client_credentials"}).encode("ascii"),
        headers={
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": "Basic " + base64.b64encode(credentials).decode("ascii"),
        },
        method="POST",
    )
    payload = _safe_dict(_open_json(request, timeout=config.timeout, context=context))
    token = str(payload.get("access_token") or "")
    if not token:
        raise PlatformAPIError("UAA token response did not include an access_token.")
    return token


class CloudFoundryClient:
    """
    Read-only Cloud Controller client authenticated with a UAA client token.

    Every failure (transport, HTTP status, malformed payload) surfaces as
    PlatformAPIError; callers decide whether it is fatal.
    """

    def __init__(
        self,
        api: str,
        token: str,
        *,
        timeout: int,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self.api = api.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._ssl_context = ssl_context

    @classmethod
    def connect(cls, config: CFAPIConfig) -> "CloudFoundryClient":
        """
        Discover the UAA endpoint and authenticate.

        Args:
            config: Cloud Controller URL and client credentials.
        Returns:
            Authenticated client.
        Raises:
            PlatformAPIError: When discovery or authentication fails.
        """
        context = _build_ssl_context(config.skip_ssl_validation)
        root_request = urllib.request.Request(
            f"{config.api.rstrip('/')}/", headers={"Accept": "application/json"}
        )
        links = _safe_dict(_safe_dict(_open_json(root_request, timeout=config.timeout, context=context)).get("links"))
        uaa_url = str(
            _safe_dict(links.get("uaa")).get("href")
            or _safe_dict(links.get("login")).get("href")
            or ""
        )
        if not uaa_url:
            raise PlatformAPIError(f"Cloud Controller at {config.api} did not advertise a UAA endpoint.")
        token = _fetch_token(config, uaa_url, context)
        logger.info("Authenticated against %s as client %s", config.api, config.client_id)
        return cls(config.api, token, timeout=config.timeout, ssl_context=context)

    def _get(self, path_or_url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        url = path_or_url if path_or_url.startswith("http") else f"{self.api}{path_or_url}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        request = urllib.request.Request(
            url,
            headers={"Accept": "application/json", "Authorization": f"Bearer {self._token}"},
        )
        return _safe_dict(_open_json(request, timeout=self._timeout, context=self._ssl_context))

    def _paginate(
        self, path: str, params: dict[str, str] | None = None
    ) -> Iterator[tuple[dict[str, Any], dict[str, Any]]]:
        """Yield (resource, page) pairs following v3 ``pagination.next.href`` links."""
        query = {"per_page": str(DEFAULT_PER_PAGE), **(params or {})}
        page = self._get(path, query)
        while True:
            for resource in _safe_list(page.get("resources")):
                if isinstance(resource, dict):
                    yield resource, page
            next_url = _safe_dict(_safe_dict(page.get("pagination")).get("next")).get("href")
            if not next_url:
                return
            page = self._get(str(next_url))

    def list_apps(self) -> list[Application]:
        """List every application visible to the client."""
        return [Application.from_resource(resource) for resource, _ in self._paginate("/v3/apps")]

    def list_buildpacks(self) -> list[Buildpack]:
        """List admin buildpacks in platform priority order."""
        return [
            Buildpack.from_resource(resource)
            for resource, _ in self._paginate("/v3/buildpacks", {"order_by": "position"})
        ]

    def get_current_droplets(self, app: Application) -> list[Droplet]:
        """Return the droplets flagged current for an application (normally one)."""
        return [
            Droplet.from_resource(resource)
            for resource, _ in self._paginate(f"/v3/apps/{app.guid}/droplets", {"current": "true"})
        ]

    def get_space(self, app: Application) -> Space:
        """Fetch the space owning an application."""
        if not app.space_guid:
            raise PlatformAPIError(f"App {app.name} guid {app.guid} has no space relationship.")
        return Space.from_resource(self._get(f"/v3/spaces/{app.space_guid}"))

    def get_space_roles(self, space: Space) -> list[SpaceRole]:
        """Return one SpaceRole per user holding any role in the space."""
        by_user: dict[str, SpaceRole] = {}
        usernames: dict[str, str] = {}
        for resource, page in self._paginate(
            "/v3/roles", {"space_guids": space.guid, "include": "user"}
        ):
            for user in _safe_list(_safe_dict(page.get("included")).get("users")):
                if isinstance(user, dict):
                    usernames[str(user.get("guid") or "")] = str(user.get("username") or "")
            user_data = _safe_dict(
                _safe_dict(_safe_dict(resource.get("relationships")).get("user")).get("data")
            )
            user_guid = str(user_data.get("guid") or "")
            if not user_guid:
                continue
            role = by_user.setdefault(user_guid, SpaceRole(user_guid=user_guid, username=""))
            role.roles.append(str(resource.get("type") or ""))
        for user_guid, role in by_user.items():
            role.username = usernames.get(user_guid, "")
        return list(by_user.values())
