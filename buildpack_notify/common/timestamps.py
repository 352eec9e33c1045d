"""Strict RFC3339 timestamp parsing shared by the change filter and detector."""

from datetime import datetime
import re

from buildpack_notify.errors import TimestampParseError

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str, what: str = "timestamp") -> datetime:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Args:
        value: Timestamp text, e.g. ``2016-06-08T16:41:45Z``.
        what: Description used in the error message.
    Returns:
        Timezone-aware datetime.
    Raises:
        TimestampParseError: When the value is not RFC3339.
    """
    match = _RFC3339_RE.match(value or "")
    if match is None:
        raise TimestampParseError(f"Unable to parse {what} {value!r}: not RFC3339.")
    fraction = (match.group("fraction") or "")[:6]
    offset = match.group("offset")
    if offset == "Z":
        offset = "+00:00"
    text = match.group("base")
    if fraction:
        text += "." + fraction.ljust(6, "0")
    try:
        return datetime.fromisoformat(text + offset)
    except ValueError as exc:
        raise TimestampParseError(f"Unable to parse {what} {value!r}: {exc}") from exc
