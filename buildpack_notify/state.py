"""
buildpack_notify/state.py
Persisted "last seen" buildpack timestamps between runs.
Exports: BuildpackRecord, load_state, save_state, copy_state
"""

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Any

from buildpack_notify.errors import StateError

logger = logging.getLogger(__name__)

_LAST_UPDATED_AT_KEY = "LastUpdatedAt"


def _default_file_mode() -> int:
    """Return the mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@dataclass
class BuildpackRecord:
    """Last observed update time of one buildpack, keyed by buildpack GUID."""

    last_updated_at: str

    def to_json(self) -> dict[str, str]:
        return {_LAST_UPDATED_AT_KEY: self.last_updated_at}

    @classmethod
    def from_json(cls, value: Any) -> "BuildpackRecord":
        if not isinstance(value, dict):
            raise StateError(f"Invalid buildpack record: {value!r}")
        return cls(last_updated_at=str(value.get(_LAST_UPDATED_AT_KEY) or ""))


def load_state(path: str) -> dict[str, BuildpackRecord]:
    """
    Read buildpack records from a JSON state file.

    Args:
        path: State file path.
    Returns:
        Mapping of buildpack GUID to BuildpackRecord.
    Raises:
        StateError: When the file is missing, unreadable or not a JSON object.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise StateError(f"Error reading state {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise StateError(f"Error reading state {path}: expected a JSON object.")
    return {str(guid): BuildpackRecord.from_json(record) for guid, record in raw.items()}


def save_state(state: dict[str, BuildpackRecord], path: str) -> None:
    """
    Atomically write buildpack records to a JSON state file.

    Side effects:
        Writes a temp file next to ``path`` and renames it into place.
    """
    target = Path(path)
    payload = json.dumps({guid: record.to_json() for guid, record in state.items()}) + "\n"
    tmp_name = ""
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
        raise StateError(f"Error saving state {path}: {exc}") from exc
    logger.info("Saved state for %d buildpacks to %s", len(state), path)


def copy_state(in_path: str, out_path: str) -> None:
    """Copy the input state file byte-for-byte to the output path."""
    if Path(in_path).resolve() == Path(out_path).resolve():
        logger.info("State %s is both input and output; leaving it untouched", in_path)
        return
    try:
        shutil.copyfile(in_path, out_path)
    except OSError as exc:
        raise StateError(f"Error copying state {in_path} -> {out_path}: {exc}") from exc
    logger.info("Copied state %s to %s unchanged", in_path, out_path)
