"""Store for the ordered collection of lost/found reports."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import BoardError, StorageCorrupt, StorageWriteFailed
from ..models import Report
from .json_store import BaseJSONStore

logger = logging.getLogger(__name__)

ConditionListener = Callable[[BoardError], None]


@dataclass(frozen=True)
class PersistResult:
    ok: bool
    error: Optional[StorageWriteFailed] = None


class ReportStore(BaseJSONStore):
    """Own the in-memory report list and its JSON file.

    The store is the only writer of the collection file. It starts
    uninitialized; load() must run exactly once before anything else.
    Every append is followed by a persist attempt, and a failed persist
    keeps the in-memory record: the failure is logged and handed to the
    condition listener instead of being raised.

    Accepts both the versioned envelope and a bare JSON list on load.
    """

    VERSION = 1

    def __init__(self, path: Path, on_condition: Optional[ConditionListener] = None) -> None:
        super().__init__(path)
        self._reports: List[Report] = []
        self._ready = False
        self._on_condition = on_condition

    def _init_data(self) -> Dict[str, object]:
        """Initialize data structure with an empty reports list."""
        return {
            "version": self.VERSION,
            "updated_at": int(time.time()),
            "reports": [],
        }

    @property
    def is_ready(self) -> bool:
        return self._ready

    def load(self) -> Optional[StorageCorrupt]:
        """Read the persisted collection and mark the store ready.

        A missing file yields an empty collection. Unparseable content is
        reported as StorageCorrupt and the store starts empty.

        Returns:
            The StorageCorrupt condition if the file could not be used, else None

        Raises:
            RuntimeError: If the store was already loaded
        """
        with self.lock:
            if self._ready:
                raise RuntimeError("report store already loaded")
            self._ready = True
            try:
                payload = self._read_payload()
                entries = self._entries_from_payload(payload)
            except (OSError, ValueError) as exc:
                self._reports = []
                condition = StorageCorrupt(self.path, str(exc))
            else:
                self._reports = self._parse_entries(entries)
                logger.debug("Loaded %d reports from %s", len(self._reports), self.path)
                return None
        logger.error("Error loading reports: %s", condition)
        self._report(condition)
        return condition

    def append(self, report: Report) -> PersistResult:
        """Add a report at the end of the collection, then persist.

        Args:
            report: Fully built report

        Returns:
            Result of the persist attempt; the report stays in memory either way
        """
        self._require_ready()
        with self.lock:
            self._reports.append(report)
        return self.persist()

    def persist(self) -> PersistResult:
        """Write the whole collection over the durable record.

        Returns:
            PersistResult; failures carry a StorageWriteFailed and are never raised
        """
        self._require_ready()
        with self.lock:
            self._data["reports"] = [report.to_dict() for report in self._reports]
            self._touch_locked()
            try:
                self._write_locked()
            except (OSError, TypeError, ValueError) as exc:
                condition = StorageWriteFailed(self.path, exc)
            else:
                return PersistResult(ok=True)
        logger.warning("Error saving reports: %s", condition)
        self._report(condition)
        return PersistResult(ok=False, error=condition)

    def all(self) -> Tuple[Report, ...]:
        """Return reports in insertion order as an immutable snapshot."""
        self._require_ready()
        return tuple(self._reports)

    def get(self, report_id: str) -> Optional[Report]:
        self._require_ready()
        for report in self._reports:
            if report.id == report_id:
                return report
        return None

    def __len__(self) -> int:
        return len(self._reports)

    def _entries_from_payload(self, payload) -> list:
        if payload is None:
            return []
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            reports = payload.get("reports")
            if not isinstance(reports, list):
                raise ValueError("'reports' is not a list")
            self._merge_header(payload)
            return reports
        raise ValueError(f"unexpected top-level {type(payload).__name__}")

    def _parse_entries(self, entries: list) -> List[Report]:
        reports: List[Report] = []
        for index, raw in enumerate(entries):
            try:
                reports.append(Report.from_dict(raw))
            except ValueError as exc:
                logger.warning("Skipping report #%d in %s: %s", index, self.path, exc)
        return reports

    def _require_ready(self) -> None:
        if not self._ready:
            raise RuntimeError("report store used before load()")

    def _report(self, condition: BoardError) -> None:
        if self._on_condition is not None:
            self._on_condition(condition)
