# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Dream Storage
Persistent storage for the dream journal so it survives restarts.

The whole collection lives under one file as a JSON array, newest dream
first, in the same layout the browser build kept in local storage.
Reads never fail: a missing or corrupt file is an empty journal.
Writes replace the whole file atomically and never raise.
"""

import json
import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from core.paths import get_paths
from journal.schemas import Dream, load_validated_list, save_validated_list

logger = logging.getLogger("dreamweaver.interface.storage")


class DreamStore:
    """Load/save the full dream collection at one path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Dream]:
        """Saved dreams, or [] if there are none or they can't be read."""
        try:
            dreams = load_validated_list(self.path, Dream)
        except (OSError, ValueError, ValidationError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            logger.warning("Ignoring unreadable dream store %s: %s", self.path, e)
            return []
        logger.debug("Loaded %d dreams from %s", len(dreams), self.path)
        return dreams

    def save(self, dreams: Sequence[Dream]) -> bool:
        """Write the whole collection. Returns False (and logs) on failure."""
        try:
            save_validated_list(self.path, list(dreams))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save %d dreams to %s: %s", len(dreams), self.path, e)
            return False
        logger.debug("Saved %d dreams to %s", len(dreams), self.path)
        return True

    def export_json(self, dreams: Sequence[Dream]) -> str:
        """The collection exactly as it would be written to disk."""
        return json.dumps(
            [d.model_dump(mode="json", by_alias=True) for d in dreams],
            indent=2, ensure_ascii=False,
        )


_store: Optional[DreamStore] = None
_store_lock = threading.Lock()


def get_store() -> DreamStore:
    """Store bound to the configured data dir (lazy-init)."""
    global _store
    with _store_lock:
        path = get_paths().dreams_file
        if _store is None or _store.path != path:
            _store = DreamStore(path)
        return _store


def reset_store() -> None:
    global _store
    with _store_lock:
        _store = None
