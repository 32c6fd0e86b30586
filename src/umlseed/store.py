"""Persisted "current collection" between CLI invocations.

The store is a small JSON object keyed by name. Only one key is used:
``current_collection`` holds the last extracted ``SQLTableCollection``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from umlseed.core.errors import InternalError
from umlseed.core.logging import get_logger
from umlseed.project.models import SQLTableCollection

CURRENT_COLLECTION_KEY = "current_collection"

log = get_logger("store")


class CollectionStore:
    """JSON key-value file holding the current table collection."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise InternalError.unexpected(f"store at {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InternalError.unexpected(f"store at {self.path} is not a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2))
        tmp.replace(self.path)

    def save(self, collection: SQLTableCollection) -> None:
        """Store ``collection``, replacing the previous one."""
        data = self._read()
        data[CURRENT_COLLECTION_KEY] = collection.model_dump(mode="json")
        self._write(data)
        log.debug("collection_saved", path=str(self.path), tables=len(collection.tables))

    def load(self) -> SQLTableCollection | None:
        """Return the stored collection, or None if nothing is stored."""
        raw = self._read().get(CURRENT_COLLECTION_KEY)
        if raw is None:
            return None
        try:
            return SQLTableCollection.model_validate(raw)
        except ValidationError as e:
            raise InternalError.unexpected(
                f"stored collection at {self.path} is invalid", errors=e.error_count()
            ) from e

    def clear(self) -> bool:
        """Remove the stored collection. Returns False if there was none."""
        data = self._read()
        if data.pop(CURRENT_COLLECTION_KEY, None) is None:
            return False
        self._write(data)
        log.debug("collection_cleared", path=str(self.path))
        return True
