"""Store for the locally minted reporter id."""
from __future__ import annotations

import logging
import time
import uuid
from typing import Dict, Optional

from ..errors import IdentityUnavailable
from .json_store import BaseJSONStore

logger = logging.getLogger(__name__)


class IdentityStore(BaseJSONStore):
    """Hold one opaque user id per data directory.

    The id is created lazily on first access and never regenerated. Any
    failure to read or write the record raises IdentityUnavailable instead
    of minting a replacement, so reports already stamped with the old id
    keep their linkage.
    """

    VERSION = 1

    def _init_data(self) -> Dict[str, object]:
        """Initialize data structure with an empty user_id."""
        return {
            "version": self.VERSION,
            "updated_at": int(time.time()),
            "user_id": None,
        }

    def get_or_create(self) -> str:
        """Return the stored user id, creating it on first call.

        Raises:
            IdentityUnavailable: If the record cannot be read or written
        """
        with self.lock:
            cached = self._data.get("user_id")
            if cached:
                return cached

            stored = self._load_locked()
            if stored:
                self._data["user_id"] = stored
                return stored

            fresh = str(uuid.uuid4())
            self._data["user_id"] = fresh
            self._touch_locked()
            try:
                self._write_locked()
            except OSError as exc:
                self._data["user_id"] = None
                raise IdentityUnavailable(self.path, f"write failed: {exc}") from exc
            logger.info("Created local user id %s at %s", fresh, self.path)
            return fresh

    def peek(self) -> Optional[str]:
        """Return the cached id without touching disk."""
        return self._data.get("user_id")

    def _load_locked(self) -> Optional[str]:
        try:
            payload = self._read_payload()
        except (OSError, ValueError) as exc:
            raise IdentityUnavailable(self.path, f"unreadable record: {exc}") from exc
        if payload is None:
            return None

        if isinstance(payload, str):
            # bare string record
            user_id = payload
        elif isinstance(payload, dict):
            user_id = payload.get("user_id")
            self._merge_header(payload)
        else:
            raise IdentityUnavailable(self.path, "unexpected record shape")

        if not isinstance(user_id, str) or not user_id.strip():
            raise IdentityUnavailable(self.path, "record holds no user id")
        return user_id.strip()
