"""Base class for JSON-backed stores with thread-safe read/write operations."""
from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional


class BaseJSONStore:
    """Base class for JSON-backed stores with thread-safe operations.

    Provides:
    - Thread-safe file I/O with atomic writes
    - Versioning and timestamp tracking
    - Automatic parent directory creation

    Subclasses should:
    - Define VERSION as a class variable
    - Override _init_data() to provide initial data structure
    - Decide how a missing or corrupt file is treated; _read_payload() only
      distinguishes "absent" from "present" and raises on unparseable content
    """

    VERSION = 1

    def __init__(self, path: Path) -> None:
        """Initialize store with file path.

        Nothing is read until the subclass loads.

        Args:
            path: Path to JSON file for persistence
        """
        self.path = path
        self.lock = threading.Lock()
        self._data: Dict[str, Any] = self._init_data()

    def _init_data(self) -> Dict[str, Any]:
        """Initialize default data structure.

        Returns:
            Dictionary with initial data structure including version and updated_at
        """
        return {
            "version": self.VERSION,
            "updated_at": int(time.time()),
        }

    def _read_payload(self) -> Optional[Any]:
        """Read and parse the JSON file.

        Returns:
            Parsed JSON value, or None when the file is missing or empty

        Raises:
            OSError: If the file exists but cannot be read
            ValueError: If the content is not valid JSON
        """
        if not self.path.exists():
            return None
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return None
        return json.loads(text)

    def _merge_header(self, payload: Dict[str, Any]) -> None:
        """Copy version/updated_at from a loaded payload when valid."""
        version = payload.get("version")
        if isinstance(version, int) and version > 0:
            self._data["version"] = version

        updated = payload.get("updated_at")
        if isinstance(updated, (int, float)):
            self._data["updated_at"] = int(updated)

    def _touch_locked(self) -> None:
        """Update version and timestamp. Must be called with lock held."""
        self._data["version"] = self.VERSION
        self._data["updated_at"] = int(time.time())

    def _write_locked(self) -> None:
        """Write data to disk atomically. Must be called with lock held.

        Uses atomic write pattern:
        1. Serialize fully in memory
        2. Write to temporary file
        3. Replace original file

        A failed write leaves the previous file intact.
        """
        text = json.dumps(self._data, ensure_ascii=False, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        temp_path.write_text(text, encoding="utf-8")
        temp_path.replace(self.path)
