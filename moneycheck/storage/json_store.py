"""Mini README: JSON file backend for the document store.

Each document lives in ``<directory>/<name>.json``. Writes go to a sibling
temporary file first and are swapped in with ``os.replace`` so a crash
mid-write leaves the previous document intact.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from ..logging_utils import get_logger
from .base import DocumentStore

LOGGER = get_logger(__name__)


class JsonFileDocumentStore(DocumentStore):
    """Persist documents as pretty-printed UTF-8 JSON files."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("Document directory set to %s", self.directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def load(self, name: str) -> Optional[Any]:
        target = self.path_for(name)
        if not target.exists():
            return None
        try:
            with target.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as error:
            LOGGER.warning("Unable to read document %s (%s); treating as empty", target, error)
            return None

    def save(self, name: str, payload: Any) -> None:
        target = self.path_for(name)
        temporary = target.with_suffix(".json.tmp")
        with temporary.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
        os.replace(temporary, target)
        LOGGER.debug("Saved document %s", target)

    def delete(self, name: str) -> None:
        target = self.path_for(name)
        if target.exists():
            target.unlink()
            LOGGER.info("Deleted document %s", target)
