"""
tests/test_buildpack_filter.py
Unit tests for buildpack_notify/buildpack_filter.py.
"""

import pytest


def _buildpack(guid, name, updated_at):
    from buildpack_notify.cf.models import Buildpack

    return Buildpack(guid=guid, name=name, updated_at=updated_at, filename=f"{name}-cflinuxfs4-v1.0.0.zip")


def _record(updated_at):
    from buildpack_notify.state import BuildpackRecord

    return BuildpackRecord(last_updated_at=updated_at)


def test_unseen_buildpack_is_changed_and_recorded():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks

    bp = _buildpack("bp-1", "python_buildpack", "2020-06-01T00:00:00Z")
    state = {}
    changed, new_state = filter_newly_updated_buildpacks([bp], state)

    assert changed == [bp]
    assert new_state is state
    assert state["bp-1"] == _record("2020-06-01T00:00:00Z")


def test_newer_buildpack_is_changed_and_older_or_equal_dropped():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks

    newer = _buildpack("bp-1", "python_buildpack", "2020-06-01T00:00:00Z")
    same = _buildpack("bp-2", "ruby_buildpack", "2020-01-01T00:00:00Z")
    older = _buildpack("bp-3", "go_buildpack", "2019-01-01T00:00:00Z")
    state = {
        "bp-1": _record("2020-01-01T00:00:00Z"),
        "bp-2": _record("2020-01-01T00:00:00Z"),
        "bp-3": _record("2020-01-01T00:00:00Z"),
    }
    changed, state = filter_newly_updated_buildpacks([newer, same, older], state)

    assert changed == [newer]
    assert state["bp-1"] == _record("2020-06-01T00:00:00Z")
    assert state["bp-2"] == _record("2020-01-01T00:00:00Z")
    assert state["bp-3"] == _record("2020-01-01T00:00:00Z")


def test_changed_preserves_input_order():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks

    bps = [
        _buildpack("c", "c_buildpack", "2020-01-01T00:00:00Z"),
        _buildpack("a", "a_buildpack", "2020-01-01T00:00:00Z"),
        _buildpack("b", "b_buildpack", "2020-01-01T00:00:00Z"),
    ]
    changed, _ = filter_newly_updated_buildpacks(bps, {})
    assert [bp.guid for bp in changed] == ["c", "a", "b"]


def test_second_pass_with_same_input_is_empty():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks

    bps = [
        _buildpack("bp-1", "python_buildpack", "2020-06-01T00:00:00Z"),
        _buildpack("bp-2", "ruby_buildpack", "2020-07-01T00:00:00Z"),
    ]
    first, state = filter_newly_updated_buildpacks(bps, {"bp-1": _record("2020-01-01T00:00:00Z")})
    second, state = filter_newly_updated_buildpacks(bps, state)

    assert len(first) == 2
    assert second == []


def test_stored_timestamps_never_move_backwards():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks
    from buildpack_notify.common.timestamps import parse_rfc3339

    before = {"bp-1": _record("2020-06-01T00:00:00Z"), "bp-2": _record("2020-06-01T00:00:00Z")}
    after = dict(before)
    filter_newly_updated_buildpacks(
        [
            _buildpack("bp-1", "python_buildpack", "2020-01-01T00:00:00Z"),
            _buildpack("bp-2", "ruby_buildpack", "2021-01-01T00:00:00Z"),
        ],
        after,
    )
    for guid, record in before.items():
        assert parse_rfc3339(after[guid].last_updated_at) >= parse_rfc3339(record.last_updated_at)


def test_corrupt_stored_timestamp_is_fatal():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks
    from buildpack_notify.errors import TimestampParseError

    with pytest.raises(TimestampParseError, match="LastUpdatedAt"):
        filter_newly_updated_buildpacks(
            [_buildpack("bp-1", "python_buildpack", "2020-06-01T00:00:00Z")],
            {"bp-1": _record("yesterday")},
        )


def test_corrupt_buildpack_timestamp_is_fatal():
    from buildpack_notify.buildpack_filter import filter_newly_updated_buildpacks
    from buildpack_notify.errors import TimestampParseError

    with pytest.raises(TimestampParseError, match="updated_at"):
        filter_newly_updated_buildpacks(
            [_buildpack("bp-1", "python_buildpack", "")],
            {"bp-1": _record("2020-06-01T00:00:00Z")},
        )


def test_index_buildpacks_by_name():
    from buildpack_notify.buildpack_filter import index_buildpacks_by_name

    first = _buildpack("bp-1", "python_buildpack", "2020-06-01T00:00:00Z")
    second = _buildpack("bp-2", "ruby_buildpack", "2020-06-01T00:00:00Z")
    assert index_buildpacks_by_name([first, second]) == {
        "python_buildpack": first,
        "ruby_buildpack": second,
    }
