"""Tests for text-to-table reconstruction and CSV round-tripping."""

from pathlib import Path

from ocr_gantt.table.csv_io import read_table_csv, write_table_csv
from ocr_gantt.table.reconstruct import TableResult, split_fields, text_to_table, zip_row


class TestSplitFields:
    """Tests for whitespace tokenization."""

    def test_collapses_runs(self) -> None:
        assert split_fields("  a   b\tc  ") == ["a", "b", "c"]

    def test_ideographic_space(self) -> None:
        assert split_fields("マテハン　開始　　終了") == ["マテハン", "開始", "終了"]

    def test_blank_line(self) -> None:
        assert split_fields("   ") == []


class TestZipRow:
    """Tests for positional zipping."""

    def test_short_row_pads_with_none(self) -> None:
        assert zip_row(["A", "B", "C"], ["x"]) == {"A": "x", "B": None, "C": None}

    def test_extra_values_dropped(self) -> None:
        assert zip_row(["A"], ["x", "y"]) == {"A": "x"}

    def test_duplicate_header_keeps_last(self) -> None:
        assert zip_row(["A", "A"], ["x", "y"]) == {"A": "y"}


class TestTextToTable:
    """Tests for text_to_table."""

    def test_empty_text(self) -> None:
        assert text_to_table("").rows == []

    def test_single_line_yields_empty_table(self) -> None:
        table = text_to_table("マテハン 開始 終了")
        assert table.is_empty
        assert table.headers == []

    def test_blank_lines_do_not_count(self) -> None:
        assert text_to_table("\n\nA B\n   \n").is_empty

    def test_basic_zip(self) -> None:
        table = text_to_table("A B\nx y")
        assert table.headers == ["A", "B"]
        assert table.rows == [{"A": "x", "B": "y"}]

    def test_missing_trailing_values_are_none(self) -> None:
        table = text_to_table("A B C\nx")
        assert table.rows == [{"A": "x", "B": None, "C": None}]

    def test_blank_lines_skipped_between_rows(self, sample_text: str) -> None:
        table = text_to_table(sample_text)
        assert table.headers == ["マテハン", "開始", "終了", "数量", "人数"]
        assert len(table.rows) == 3
        assert table.rows[2] == {
            "マテハン": "台車",
            "開始": "2025/01/02",
            "終了": None,
            "数量": None,
            "人数": None,
        }

    def test_embedded_space_shifts_columns(self) -> None:
        table = text_to_table("名称 開始\nBelt conveyor 2025/01/01")
        assert table.rows == [{"名称": "Belt", "開始": "conveyor"}]

    def test_windows_line_endings(self) -> None:
        table = text_to_table("A B\r\nx y\r\n")
        assert table.rows == [{"A": "x", "B": "y"}]


class TestCsvRoundTrip:
    """Tests for writing and reading edited tables."""

    def test_round_trip_preserves_none(self, tmp_path: Path) -> None:
        table = TableResult(
            headers=["マテハン", "開始", "終了"],
            rows=[
                {"マテハン": "A", "開始": "2025/01/01", "終了": None},
                {"マテハン": "B", "開始": None, "終了": "2025/01/04"},
            ],
        )
        path = tmp_path / "nested" / "table.csv"
        write_table_csv(table, path)
        loaded = read_table_csv(path)

        assert loaded.headers == table.headers
        assert loaded.rows == table.rows

    def test_read_skips_blank_records(self, tmp_path: Path) -> None:
        path = tmp_path / "table.csv"
        path.write_text("A,B\nx,y\n,\n", encoding="utf-8")
        assert read_table_csv(path).rows == [{"A": "x", "B": "y"}]

    def test_read_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        assert read_table_csv(path).is_empty
