# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Paths — single source of truth for all data file locations.

Resolution order:
  1. DREAMWEAVER_DATA_DIR environment variable
  2. Default: ~/.dreamweaver/

Usage:
    from core.paths import get_paths
    p = get_paths()
    p.dreams_file       # ~/.dreamweaver/dream-weaver-dreams.json
    p.config_file       # ~/.dreamweaver/dreamweaver-config.json

For tests:
    from core.paths import configure
    configure(tmp_path)  # all paths now rooted under tmp_path
"""

import os
from pathlib import Path
from typing import Optional


class DreamweaverPaths:
    """Central registry of every file and directory Dreamweaver uses."""

    def __init__(self, data_dir: Optional[Path] = None):
        if data_dir is not None:
            self._root = Path(data_dir)
        else:
            env = os.environ.get("DREAMWEAVER_DATA_DIR")
            if env:
                self._root = Path(env).expanduser()
            else:
                self._root = Path.home() / ".dreamweaver"

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------
    @property
    def data_dir(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Journal
    # ------------------------------------------------------------------
    @property
    def dreams_file(self) -> Path:
        # The one well-known key the whole collection lives under
        return self._root / "dream-weaver-dreams.json"

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    @property
    def config_file(self) -> Path:
        return self._root / "dreamweaver-config.json"

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------
    @property
    def log_file(self) -> Path:
        return self._root / "dreamweaver.log"

    # ------------------------------------------------------------------
    # Directory creation
    # ------------------------------------------------------------------
    def ensure_dirs(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# ===========================================================================
# Singleton
# ===========================================================================

_instance: Optional[DreamweaverPaths] = None


def get_paths() -> DreamweaverPaths:
    """Return the global DreamweaverPaths singleton (lazy-init)."""
    global _instance
    if _instance is None:
        _instance = DreamweaverPaths()
    return _instance


def configure(data_dir: Path) -> DreamweaverPaths:
    """
    Override the global paths singleton. Used by tests and CLI --data-dir.

    Returns the new instance for convenience.
    """
    global _instance
    _instance = DreamweaverPaths(data_dir=data_dir)
    return _instance


def reset() -> None:
    """Reset singleton so next get_paths() re-reads env."""
    global _instance
    _instance = None
