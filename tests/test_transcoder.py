"""Unit tests for the result transcoder and scalar codec.

Fake cursors cover the failure paths; a temp-file SQLite database covers
the real driver types.
"""

from __future__ import annotations

import datetime as dt
import sqlite3
import unittest
from decimal import Decimal

from helpers import FakeCursor

from dbadmin.db.errors import CursorError, RowDecodeError
from dbadmin.db.transcoder import encode_scalar, transcode


# ===========================================================================
# 1. Scalar codec
# ===========================================================================

class TestEncodeScalar(unittest.TestCase):
    def test_plain_scalars_pass_through(self):
        for value in (None, True, False, 0, -7, 2 ** 70, 1.5, "", "text"):
            self.assertEqual(encode_scalar(value), value)

    def test_bool_stays_bool(self):
        self.assertIs(encode_scalar(True), True)

    def test_binary_is_base64(self):
        self.assertEqual(encode_scalar(b"\x00\xff"), "AP8=")
        self.assertEqual(encode_scalar(memoryview(b"hi")), "aGk=")

    def test_temporal_is_isoformat(self):
        self.assertEqual(encode_scalar(dt.date(2024, 2, 29)), "2024-02-29")
        self.assertEqual(
            encode_scalar(dt.datetime(2024, 1, 2, 3, 4, 5)), "2024-01-02T03:04:05"
        )

    def test_decimal(self):
        self.assertEqual(encode_scalar(Decimal("12")), 12)
        self.assertEqual(encode_scalar(Decimal("1.25")), 1.25)

    def test_non_finite_float_rejected(self):
        with self.assertRaises(RowDecodeError):
            encode_scalar(float("nan"))
        with self.assertRaises(RowDecodeError):
            encode_scalar(float("inf"))

    def test_nested_value_rejected(self):
        with self.assertRaises(RowDecodeError):
            encode_scalar([1, 2])
        with self.assertRaises(RowDecodeError):
            encode_scalar({"a": 1})


# ===========================================================================
# 2. Table shape
# ===========================================================================

class TestTranscodeShape(unittest.TestCase):
    def test_dimensions_match_cursor(self):
        for n in (1, 2, 5):
            for m in (0, 1, 3, 1201):
                columns = [f"c{i}" for i in range(n)]
                rows = [tuple(range(r, r + n)) for r in range(m)]
                table = transcode(FakeCursor(columns, rows), batch_size=500)
                self.assertEqual(table.columns, columns)
                self.assertEqual(len(table.rows), m)
                self.assertTrue(all(len(r) == n for r in table.rows))

    def test_zero_rows_gives_empty_list(self):
        table = transcode(FakeCursor(["id"], []))
        self.assertEqual(table.rows, [])
        self.assertEqual(table.to_dict(), {"columns": ["id"], "rows": []})

    def test_duplicate_column_names_kept(self):
        table = transcode(FakeCursor(["a", "a"], [(1, 2)]))
        self.assertEqual(table.columns, ["a", "a"])
        self.assertEqual(table.rows, [[1, 2]])

    def test_heterogeneous_values(self):
        table = transcode(FakeCursor(["v"], [(None,), (1,), (2.5,), ("x",), (True,)]))
        self.assertEqual(table.rows, [[None], [1], [2.5], ["x"], [True]])


# ===========================================================================
# 3. Partial failure policy
# ===========================================================================

class TestRowSkipping(unittest.TestCase):
    def test_bad_row_skipped_order_preserved(self):
        rows = [(1, "a"), (2, object()), (3, "c"), (4, "d")]
        with self.assertLogs("dbadmin.db.transcoder", level="WARNING"):
            table = transcode(FakeCursor(["id", "name"], rows))
        self.assertEqual(table.rows, [[1, "a"], [3, "c"], [4, "d"]])
        self.assertEqual(len(table.skipped), 1)
        self.assertEqual(table.skipped[0].index, 1)
        self.assertFalse(table.complete)

    def test_wrong_width_row_skipped(self):
        table = transcode(FakeCursor(["a", "b"], [(1, 2), (3,), (5, 6)]))
        self.assertEqual(table.rows, [[1, 2], [5, 6]])
        self.assertEqual([s.index for s in table.skipped], [1])

    def test_skip_indexes_span_batches(self):
        rows = [(i,) for i in range(10)]
        rows[7] = (float("nan"),)
        table = transcode(FakeCursor(["n"], rows), batch_size=3)
        self.assertEqual(len(table.rows), 9)
        self.assertEqual(table.skipped[0].index, 7)


# ===========================================================================
# 4. Cursor-level failures
# ===========================================================================

class TestCursorErrors(unittest.TestCase):
    def test_missing_metadata(self):
        with self.assertRaises(CursorError):
            transcode(FakeCursor(None, []))

    def test_zero_columns(self):
        with self.assertRaises(CursorError):
            transcode(FakeCursor([], []))

    def test_cursor_breaks_mid_stream(self):
        rows = [(i,) for i in range(10)]
        with self.assertRaises(CursorError):
            transcode(FakeCursor(["n"], rows, fail_at=4), batch_size=2)


# ===========================================================================
# 5. Real SQLite cursor
# ===========================================================================

class TestSQLiteCursor(unittest.TestCase):
    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        self.conn.execute("CREATE TABLE t (i INTEGER, r REAL, s TEXT, b BLOB, n TEXT)")
        self.conn.execute("INSERT INTO t VALUES (1, 1.5, 'x', x'0102', NULL)")

    def tearDown(self):
        self.conn.close()

    def test_native_types(self):
        table = transcode(self.conn.execute("SELECT * FROM t"))
        self.assertEqual(table.columns, ["i", "r", "s", "b", "n"])
        self.assertEqual(table.rows, [[1, 1.5, "x", "AQI=", None]])

    def test_empty_result(self):
        table = transcode(self.conn.execute("SELECT * FROM t WHERE i > 100"))
        self.assertEqual(table.columns, ["i", "r", "s", "b", "n"])
        self.assertEqual(table.rows, [])


if __name__ == "__main__":
    unittest.main()
