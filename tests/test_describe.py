"""Unit tests for the schema descriptor."""

from __future__ import annotations

import unittest

from helpers import FakeCursor

from dbadmin.db.describe import describe, table_names
from dbadmin.db.errors import CursorError


class TestDescribe(unittest.TestCase):
    def test_mapping(self):
        cursor = FakeCursor(["name", "type"], [("id", "INT"), ("total", "FLOAT")])
        self.assertEqual(describe(cursor), {"id": "INT", "total": "FLOAT"})

    def test_duplicate_last_write_wins(self):
        cursor = FakeCursor(["name", "type"], [("id", "INT"), ("id", "TEXT")])
        self.assertEqual(describe(cursor), {"id": "TEXT"})

    def test_malformed_rows_skipped(self):
        rows = [("id", "INT"), ("short",), (None, "TEXT"), ("total", "FLOAT")]
        with self.assertLogs("dbadmin.db.describe", level="WARNING"):
            result = describe(FakeCursor(["name", "type"], rows))
        self.assertEqual(result, {"id": "INT", "total": "FLOAT"})

    def test_broken_cursor(self):
        cursor = FakeCursor(["name", "type"], [("id", "INT")] * 5, fail_at=2)
        with self.assertRaises(CursorError):
            describe(cursor, batch_size=1)


class TestTableNames(unittest.TestCase):
    def test_names_in_order(self):
        cursor = FakeCursor(["name"], [("a",), ("b",), ("c",)])
        self.assertEqual(table_names(cursor), ["a", "b", "c"])

    def test_unparseable_name_skipped(self):
        cursor = FakeCursor(["name"], [("a",), (42,), ()])
        self.assertEqual(table_names(cursor), ["a"])

    def test_empty(self):
        self.assertEqual(table_names(FakeCursor(["name"], [])), [])


if __name__ == "__main__":
    unittest.main()
