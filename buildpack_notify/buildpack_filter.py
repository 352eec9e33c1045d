"""
buildpack_notify/buildpack_filter.py
Selects buildpacks updated since the previous run and advances their state records.
Exports: filter_newly_updated_buildpacks, index_buildpacks_by_name
"""

import logging

from buildpack_notify.cf.models import Buildpack
from buildpack_notify.common.timestamps import parse_rfc3339
from buildpack_notify.state import BuildpackRecord

logger = logging.getLogger(__name__)


def filter_newly_updated_buildpacks(
    buildpacks: list[Buildpack],
    state: dict[str, BuildpackRecord],
) -> tuple[list[Buildpack], dict[str, BuildpackRecord]]:
    """
    Return buildpacks that changed since their stored record, updating state in place.

    A buildpack never seen before counts as changed. A known buildpack counts as
    changed only when its ``updated_at`` is strictly after the stored
    ``last_updated_at``; its record is then overwritten.

    Args:
        buildpacks: Current buildpack catalog, in platform order.
        state: Records loaded from the state file; mutated in place.
    Returns:
        Changed buildpacks in encounter order, and the same state mapping.
    Raises:
        TimestampParseError: When either timestamp is not RFC3339.
    """
    changed: list[Buildpack] = []
    for buildpack in buildpacks:
        stored = state.get(buildpack.guid)
        if stored is None:
            logger.info("Buildpack %s guid %s seen for the first time", buildpack.name, buildpack.guid)
            changed.append(buildpack)
            state[buildpack.guid] = BuildpackRecord(last_updated_at=buildpack.updated_at)
            continue
        updated_at = parse_rfc3339(
            buildpack.updated_at, f"buildpack {buildpack.guid} updated_at"
        )
        stored_updated_at = parse_rfc3339(
            stored.last_updated_at, f"stored buildpack {buildpack.guid} LastUpdatedAt"
        )
        if updated_at > stored_updated_at:
            changed.append(buildpack)
            state[buildpack.guid] = BuildpackRecord(last_updated_at=buildpack.updated_at)
        else:
            logger.info("Supported Buildpack %s has not been updated", buildpack.name)
    return changed, state


def index_buildpacks_by_name(buildpacks: list[Buildpack]) -> dict[str, Buildpack]:
    """Map buildpack name to buildpack for droplet lookups."""
    return {buildpack.name: buildpack for buildpack in buildpacks}
