"""Tests for repertoire and comment files."""
import json

import pytest

from chess_repertoire.data.store import load_comments, load_repertoire, save_repertoire
from chess_repertoire.exceptions import RepertoireFileError
from chess_repertoire.tree import MoveNode
from tests.helpers import add_line


class TestLoadRepertoire:
    def test_missing_file(self, tmp_path):
        with pytest.raises(RepertoireFileError):
            load_repertoire(str(tmp_path / "nonexistent.json"))

    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "rep.json"
        path.write_text("not json")
        with pytest.raises(RepertoireFileError):
            load_repertoire(str(path))

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "rep.json"
        path.write_text("[1, 2]")
        with pytest.raises(RepertoireFileError):
            load_repertoire(str(path))

    def test_fills_missing_keys(self, tmp_path):
        path = tmp_path / "sicilian.json"
        path.write_text('{"orientation": "purple"}')

        document = load_repertoire(str(path))

        assert document["name"] == "sicilian"
        assert document["orientation"] == "white"
        assert document["moveNodes"]["id"] == "initial"
        assert document["moveNodes"]["children"] == []


class TestSaveRepertoire:
    def test_creates_directory_and_round_trips(self, tmp_path):
        root = MoveNode()
        add_line(root, ["e4", "c5", "Nf3"], name="Sicilian")
        path = tmp_path / "sub" / "dir" / "rep.json"

        save_repertoire(str(path), "Sicilian", "black", root)
        document = load_repertoire(str(path))

        assert document["name"] == "Sicilian"
        assert document["orientation"] == "black"
        rebuilt = MoveNode.from_plain(document["moveNodes"])
        assert [v.full_name for v in rebuilt.get_variants()] == ["Sicilian"]
        assert rebuilt.children[0].children[0].children[0].lan_path() == ["e2e4", "c7c5", "g1f3"]

    def test_no_parent_or_comment_on_disk(self, tmp_path):
        root = MoveNode()
        node = add_line(root, ["d4"])
        node.comment = "legacy"
        path = tmp_path / "rep.json"

        save_repertoire(str(path), "QP", "white", root)

        raw = path.read_text(encoding="utf-8")
        assert '"parent"' not in raw
        assert '"comment"' not in raw


class TestLoadComments:
    def test_keeps_string_comments(self, tmp_path):
        path = tmp_path / "comments.json"
        path.write_text(json.dumps({"fen a": "Good", "fen b": 3}))

        assert load_comments(str(path)) == {"fen a": "Good"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(RepertoireFileError):
            load_comments(str(tmp_path / "missing.json"))
