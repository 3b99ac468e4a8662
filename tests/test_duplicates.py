"""Tests for the duplicate eliminator (first-seen-wins composite keys)."""

from __future__ import annotations

from insightdash.services.duplicates import composite_key, remove_duplicates


class TestCompositeKey:
    def test_joins_in_column_order(self):
        row = {"a": 1, "b": None, "c": True}
        assert composite_key(row, ["a", "b", "c"]) == "1||true"

    def test_missing_field_renders_empty(self):
        assert composite_key({"a": "x"}, ["a", "b"]) == "x|"


class TestRemoveDuplicates:
    def test_later_duplicate_dropped(self):
        rows = [{"a": 1, "b": "x"}, {"a": 1, "b": "x"}, {"a": 1, "b": "y"}]
        result = remove_duplicates(rows, ["a", "b"])
        assert len(result) == 2
        assert result[1] == {"a": 1, "b": "y"}

    def test_first_occurrence_kept(self):
        rows = [{"id": 1, "n": "a"}, {"id": 1, "n": "b"}]
        result = remove_duplicates(rows, ["id"])
        assert result == [{"id": 1, "n": "a"}]
        assert result[0] is rows[0]

    def test_absent_none_and_empty_collapse(self):
        rows = [{"a": None}, {}, {"a": ""}]
        assert len(remove_duplicates(rows, ["a"])) == 1

    def test_number_and_numeric_text_share_a_key(self):
        rows = [{"a": 1}, {"a": "1"}, {"a": 1.0}]
        assert len(remove_duplicates(rows, ["a"])) == 1

    def test_order_preserved(self):
        rows = [{"a": 3}, {"a": 1}, {"a": 3}, {"a": 2}]
        assert remove_duplicates(rows, ["a"]) == [{"a": 3}, {"a": 1}, {"a": 2}]

    def test_input_untouched(self):
        rows = [{"a": 1}, {"a": 1}]
        remove_duplicates(rows, ["a"])
        assert rows == [{"a": 1}, {"a": 1}]

    def test_empty_dataset(self):
        assert remove_duplicates([], ["a"]) == []
