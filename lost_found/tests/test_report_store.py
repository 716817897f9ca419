"""Unit tests for ReportStore load/append/persist semantics."""
from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from typing import List
from unittest import mock

from lost_found.board_lib.errors import BoardError, StorageCorrupt, StorageWriteFailed
from lost_found.board_lib.models import Report, ReportType
from lost_found.board_lib.stores import ReportStore


def make_report(report_id: str, timestamp: int, report_type: ReportType = ReportType.LOST, **overrides) -> Report:
    values = dict(
        id=report_id,
        type=report_type,
        name=f"Item {report_id}",
        description="black umbrella",
        date="2024-05-01",
        location="Library",
        contact="a@b.com",
        reporter_id="user-1",
        timestamp=timestamp,
        image=None,
    )
    values.update(overrides)
    return Report(**values)


class ReportStoreTests(unittest.TestCase):

    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp_dir.name) / "lost_found_items.json"
        self.conditions: List[BoardError] = []
        self.store = ReportStore(self.path, on_condition=self.conditions.append)

    def tearDown(self) -> None:
        self.tmp_dir.cleanup()

    def _reload(self) -> ReportStore:
        store = ReportStore(self.path)
        store.load()
        return store

    def test_load_missing_file_starts_empty(self) -> None:
        self.assertIsNone(self.store.load())
        self.assertTrue(self.store.is_ready)
        self.assertEqual(self.store.all(), ())
        self.assertEqual(self.conditions, [])

    def test_use_before_load_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            self.store.all()
        with self.assertRaises(RuntimeError):
            self.store.append(make_report("1", 1))

    def test_second_load_raises(self) -> None:
        self.store.load()
        with self.assertRaises(RuntimeError):
            self.store.load()

    def test_corrupt_file_resets_and_reports(self) -> None:
        self.path.write_text("[{\"id\": ", encoding="utf-8")
        condition = self.store.load()
        self.assertIsInstance(condition, StorageCorrupt)
        self.assertEqual(self.conditions, [condition])
        self.assertEqual(self.store.all(), ())
        self.assertTrue(self.store.is_ready)

    def test_wrong_shape_is_corrupt(self) -> None:
        self.path.write_text(json.dumps({"reports": "nope"}), encoding="utf-8")
        self.assertIsInstance(self.store.load(), StorageCorrupt)
        self.assertEqual(len(self.store), 0)

    def test_bare_list_layout_is_accepted(self) -> None:
        entries = [make_report("1", 100).to_dict(), make_report("2", 50).to_dict()]
        self.path.write_text(json.dumps(entries), encoding="utf-8")
        self.assertIsNone(self.store.load())
        self.assertEqual([r.id for r in self.store.all()], ["1", "2"])

    def test_invalid_entries_are_skipped(self) -> None:
        good = make_report("1", 100).to_dict()
        bad = dict(good, id="2")
        del bad["contact"]
        unknown_type = dict(good, id="3", type="Stolen")
        self.path.write_text(json.dumps({"reports": [good, bad, unknown_type]}), encoding="utf-8")
        self.assertIsNone(self.store.load())
        self.assertEqual([r.id for r in self.store.all()], ["1"])

    def test_non_finite_timestamps_are_skipped(self) -> None:
        good = make_report("1", 100).to_dict()
        overflow = dict(good, id="2", timestamp=987654321)
        nan = dict(good, id="3", timestamp=float("nan"))
        text = json.dumps({"reports": [good, overflow, nan]}).replace("987654321", "1e999")
        self.path.write_text(text, encoding="utf-8")
        self.assertIsNone(self.store.load())
        self.assertEqual([r.id for r in self.store.all()], ["1"])

    def test_blank_required_fields_are_skipped(self) -> None:
        good = make_report("1", 100).to_dict()
        blank_name = dict(good, id="2", name="   ")
        empty_contact = dict(good, id="3", contact="")
        null_date = dict(good, id="4", date=None)
        self.path.write_text(json.dumps([good, blank_name, empty_contact, null_date]), encoding="utf-8")
        self.assertIsNone(self.store.load())
        self.assertEqual([r.id for r in self.store.all()], ["1"])

    def test_append_keeps_insertion_order(self) -> None:
        self.store.load()
        self.store.append(make_report("b", 200))
        self.store.append(make_report("a", 100))
        self.store.append(make_report("c", 300))
        self.assertEqual([r.id for r in self.store.all()], ["b", "a", "c"])

    def test_append_persists_immediately(self) -> None:
        self.store.load()
        result = self.store.append(make_report("1", 100))
        self.assertTrue(result.ok)
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(payload["reports"][0]["id"], "1")
        self.assertEqual(payload["version"], ReportStore.VERSION)

    def test_round_trip_preserves_fields_and_order(self) -> None:
        self.store.load()
        image = "data:image/png;base64,iVBORw0KGgo="
        originals = [
            make_report("1", 300, ReportType.FOUND, image=image),
            make_report("2", 100, description="Ünïcode 📎"),
            make_report("3", 200),
        ]
        for report in originals:
            self.store.append(report)
        reloaded = self._reload()
        self.assertEqual(reloaded.all(), tuple(originals))
        self.assertEqual(reloaded.all()[0].image, image)

    def test_stored_entry_has_exact_field_set(self) -> None:
        self.store.load()
        self.store.append(make_report("1", 100))
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(
            set(payload["reports"][0]),
            {"id", "type", "name", "description", "date", "location", "contact", "reporterId", "timestamp", "image"},
        )
        self.assertIsNone(payload["reports"][0]["image"])

    def test_write_failure_keeps_record_and_reports_once(self) -> None:
        self.store.load()
        report = make_report("1", 100)
        with mock.patch.object(self.store, "_write_locked", side_effect=OSError("quota exceeded")):
            result = self.store.append(report)
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, StorageWriteFailed)
        self.assertEqual(self.conditions, [result.error])
        self.assertEqual(self.store.all().count(report), 1)
        self.assertFalse(self.path.exists())

    def test_next_successful_persist_catches_up(self) -> None:
        self.store.load()
        with mock.patch.object(self.store, "_write_locked", side_effect=OSError("quota exceeded")):
            self.store.append(make_report("1", 100))
        self.assertTrue(self.store.append(make_report("2", 200)).ok)
        self.assertEqual([r.id for r in self._reload().all()], ["1", "2"])

    def test_all_is_a_snapshot(self) -> None:
        self.store.load()
        self.store.append(make_report("1", 100))
        snapshot = self.store.all()
        self.store.append(make_report("2", 200))
        self.assertEqual(len(snapshot), 1)
        self.assertIsInstance(snapshot, tuple)

    def test_get_by_id(self) -> None:
        self.store.load()
        self.store.append(make_report("1", 100))
        self.assertEqual(self.store.get("1").name, "Item 1")
        self.assertIsNone(self.store.get("missing"))


if __name__ == "__main__":
    unittest.main()
