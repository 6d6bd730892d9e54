"""Single-file JSON snapshot of the mirrored forest.

The file is replaced wholesale on every save: content is written to a
temporary file next to the target and moved into place with os.replace, so
readers only ever see the previous or the new complete snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, List, Optional

from pydantic import ValidationError

from notion_mirror.config import get_settings
from notion_mirror.errors import PersistError, SnapshotCorrupt, SnapshotUnavailable
from notion_mirror.models.node import Forest, forest_from_list, forest_to_list

logger = logging.getLogger(__name__)


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


SNAPSHOT_MODE = 0o666 & ~_umask()


class SnapshotStore:
    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def save(self, forest: Forest) -> str:
        """Persist the forest, replacing any prior snapshot. Returns the path."""
        payload = json.dumps(forest_to_list(forest), ensure_ascii=False, indent=2)
        directory = os.path.dirname(self.path)
        tmp_path: Optional[str] = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".snapshot-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600 files; give the snapshot regular file permissions
            os.chmod(tmp_path, SNAPSHOT_MODE)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            logger.exception("Error saving snapshot to %s", self.path)
            raise PersistError(f"Failed to write snapshot {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        logger.info("Snapshot saved to %s (%d top-level items)", self.path, len(forest))
        return self.path

    def _read_document(self) -> List[Any]:
        try:
            with open(self.path, "rb") as f:
                raw = f.read()
        except OSError as exc:
            logger.error("Error reading snapshot %s: %s", self.path, exc)
            raise SnapshotUnavailable(f"Snapshot {self.path} is not available: {exc}") from exc
        try:
            # UnicodeDecodeError is a ValueError too
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            logger.error("Error parsing snapshot %s: %s", self.path, exc)
            raise SnapshotCorrupt(f"Snapshot {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise SnapshotCorrupt(f"Snapshot {self.path} does not contain a list of nodes")
        return data

    def load(self) -> Forest:
        data = self._read_document()
        try:
            return forest_from_list(data)
        except ValidationError as exc:
            logger.error("Snapshot %s does not hold valid nodes: %s", self.path, exc)
            raise SnapshotCorrupt(f"Snapshot {self.path} does not hold valid nodes: {exc}") from exc


def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore(get_settings().snapshot_path)
