"""
buildpack_notify/releases.py
Release-notes links and version tags for Cloud Foundry system buildpacks.
Exports: BuildpackReleaseInfo, buildpack_release_url, parse_buildpack_version, buildpack_version_url, build_release_info
"""

from dataclasses import dataclass
import logging
import re

logger = logging.getLogger(__name__)

_GITHUB_RELEASES = "https://github.com/cloudfoundry/{repo}/releases"

# For a specific release append /tag/<version>, e.g.
# https://github.com/cloudfoundry/python-buildpack/releases/tag/v1.7.45
BUILDPACK_RELEASE_URLS = {
    "staticfile_buildpack": _GITHUB_RELEASES.format(repo="staticfile-buildpack"),
    "java_buildpack": _GITHUB_RELEASES.format(repo="java-buildpack"),
    "ruby_buildpack": _GITHUB_RELEASES.format(repo="ruby-buildpack"),
    "dotnet_core_buildpack": _GITHUB_RELEASES.format(repo="dotnet-core-buildpack"),
    "nodejs_buildpack": _GITHUB_RELEASES.format(repo="nodejs-buildpack"),
    "go_buildpack": _GITHUB_RELEASES.format(repo="go-buildpack"),
    "python_buildpack": _GITHUB_RELEASES.format(repo="python-buildpack"),
    "php_buildpack": _GITHUB_RELEASES.format(repo="php-buildpack"),
    "binary_buildpack": _GITHUB_RELEASES.format(repo="binary-buildpack"),
    "nginx_buildpack": _GITHUB_RELEASES.format(repo="nginx-buildpack"),
    "r_buildpack": _GITHUB_RELEASES.format(repo="r-buildpack"),
}

_VERSION_RE = re.compile(r"^v[0-9]+\.[0-9]+(\.[0-9]+)?$")
_VERSION_PATH = "/tag/"


@dataclass
class BuildpackReleaseInfo:
    """Buildpack release details rendered into notification e-mails."""

    name: str
    version: str
    url: str


def buildpack_release_url(buildpack_name: str) -> str:
    """Return the release notes page for a system buildpack, or "" when unknown."""
    return BUILDPACK_RELEASE_URLS.get(buildpack_name, "")


def parse_buildpack_version(buildpack_filename: str) -> str:
    """
    Extract the version from a buildpack filename.

    Filenames look like ``python_buildpack-cflinuxfs3-v1.7.43.zip``; the version
    is the third ``-`` separated segment with ``.zip`` removed.

    Args:
        buildpack_filename: Filename reported by the platform.
    Returns:
        Version string, or "" when the filename has no third segment.
    """
    parts = buildpack_filename.split("-")
    if len(parts) < 3:
        logger.warning("Unable to parse version from buildpack filename %r", buildpack_filename)
        return ""
    return parts[2].removesuffix(".zip")


def buildpack_version_url(release_url: str, version: str) -> str:
    """Append ``/tag/<version>`` for vX.Y[.Z] versions; otherwise return release_url."""
    if _VERSION_RE.match(version):
        return release_url + _VERSION_PATH + version
    return release_url


def build_release_info(buildpack_name: str, buildpack_filename: str) -> BuildpackReleaseInfo:
    """Resolve name, version and versioned release URL for one buildpack."""
    version = parse_buildpack_version(buildpack_filename)
    release_url = buildpack_release_url(buildpack_name)
    url = buildpack_version_url(release_url, version) if release_url else ""
    return BuildpackReleaseInfo(name=buildpack_name, version=version, url=url)
