"""Dataclasses for the Cloud Controller resources the notifier reads."""

from dataclasses import dataclass, field
from typing import Any

APP_STATE_STARTED = "STARTED"


def _safe_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _safe_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


@dataclass
class Buildpack:
    """Admin buildpack as reported by /v3/buildpacks."""

    guid: str
    name: str
    updated_at: str
    filename: str = ""

    @classmethod
    def from_resource(cls, resource: dict[str, Any]) -> "Buildpack":
        return cls(
            guid=str(resource.get("guid") or ""),
            name=str(resource.get("name") or ""),
            updated_at=str(resource.get("updated_at") or ""),
            filename=str(resource.get("filename") or ""),
        )


@dataclass
class Application:
    """Application with the space it belongs to."""

    guid: str
    name: str
    state: str
    space_guid: str

    @property
    def is_started(self) -> bool:
        return self.state == APP_STATE_STARTED

    @classmethod
    def from_resource(cls, resource: dict[str, Any]) -> "Application":
        space = _safe_dict(_safe_dict(_safe_dict(resource.get("relationships")).get("space")).get("data"))
        return cls(
            guid=str(resource.get("guid") or ""),
            name=str(resource.get("name") or ""),
            state=str(resource.get("state") or ""),
            space_guid=str(space.get("guid") or ""),
        )


@dataclass
class DropletBuildpack:
    """Buildpack entry recorded on a droplet at staging time."""

    name: str
    version: str = ""


@dataclass
class Droplet:
    """Staged artifact of an application."""

    guid: str
    created_at: str
    buildpacks: list[DropletBuildpack] = field(default_factory=list)

    @classmethod
    def from_resource(cls, resource: dict[str, Any]) -> "Droplet":
        buildpacks = [
            DropletBuildpack(
                name=str(item.get("name") or ""),
                version=str(item.get("version") or ""),
            )
            for item in _safe_list(resource.get("buildpacks"))
            if isinstance(item, dict)
        ]
        return cls(
            guid=str(resource.get("guid") or ""),
            created_at=str(resource.get("created_at") or ""),
            buildpacks=buildpacks,
        )


@dataclass
class Space:
    """Organizational grouping of applications."""

    guid: str
    name: str

    @classmethod
    def from_resource(cls, resource: dict[str, Any]) -> "Space":
        return cls(guid=str(resource.get("guid") or ""), name=str(resource.get("name") or ""))


@dataclass
class SpaceRole:
    """All roles one user holds in a space."""

    user_guid: str
    username: str
    roles: list[str] = field(default_factory=list)
