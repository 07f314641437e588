"""Unit tests for JSON document loading and saving."""

import json

from bookstore.storage import load_document, save_document


class TestLoadDocument:
    def test_reads_list_under_key(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({"books": [{"id": "1"}]}), encoding="utf-8")
        assert load_document(path, "books") == [{"id": "1"}]

    def test_missing_file_gives_empty_list(self, tmp_path):
        assert load_document(tmp_path / "absent.json", "books") == []

    def test_corrupt_json_gives_empty_list(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_document(path, "books") == []

    def test_wrong_shape_gives_empty_list(self, tmp_path):
        path = tmp_path / "reviews.json"
        path.write_text(json.dumps({"books": []}), encoding="utf-8")
        assert load_document(path, "reviews") == []

        path.write_text(json.dumps([{"id": "1"}]), encoding="utf-8")
        assert load_document(path, "reviews") == []

        path.write_text(json.dumps({"reviews": {"id": "1"}}), encoding="utf-8")
        assert load_document(path, "reviews") == []


class TestSaveDocument:
    def test_overwrites_whole_document(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({"books": [{"id": "old"}]}), encoding="utf-8")

        assert save_document(path, "books", [{"id": "new", "title": "É"}]) is True
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "books": [{"id": "new", "title": "É"}]
        }

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "data" / "reviews.json"
        assert save_document(path, "reviews", []) is True
        assert load_document(path, "reviews") == []

    def test_write_failure_returns_false(self, tmp_path):
        # A directory in place of the file makes open() fail.
        path = tmp_path / "books.json"
        path.mkdir()
        assert save_document(path, "books", [{"id": "1"}]) is False

    def test_unserialisable_items_leave_file_untouched(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({"books": []}), encoding="utf-8")
        assert save_document(path, "books", [{"id": object()}]) is False
        assert load_document(path, "books") == []
