"""Tests for the command line interface."""
import json

import pytest

from chess_repertoire.cli import main
from chess_repertoire.data.store import save_repertoire
from chess_repertoire.tree import MoveNode
from tests.helpers import add_line, fen_after


@pytest.fixture(autouse=True)
def no_remote_comments(monkeypatch):
    monkeypatch.delenv("REPERTOIRE_API_URL", raising=False)


@pytest.fixture
def repertoire_file(tmp_path):
    root = MoveNode()
    add_line(root, ["e4", "e5", "Nf3"], name="Open")
    add_line(root, ["e4", "c5"])
    path = tmp_path / "rep.json"
    save_repertoire(str(path), "My Repertoire", "white", root)
    return str(path)


def test_variants_lists_every_line(repertoire_file, capsys):
    assert main(["variants", repertoire_file]) == 0

    out = capsys.readouterr().out
    assert "Open (1. ...e5): 1. e4 1. ...e5 2. Nf3" in out
    assert "Open (1. ...c5): 1. e4 1. ...c5" in out


def test_variants_unknown_name(repertoire_file, capsys):
    assert main(["variants", repertoire_file, "--variant", "Missing"]) == 1
    assert "No variants found." in capsys.readouterr().out


def test_pgn_to_stdout_with_comments(repertoire_file, tmp_path, capsys):
    comments = tmp_path / "comments.json"
    comments.write_text(json.dumps({fen_after(["e4", "c5"]): "Sicilian"}))

    assert main(["pgn", repertoire_file, "--comments", str(comments)]) == 0

    out = capsys.readouterr().out
    assert '[Event "My Repertoire"]' in out
    assert "1. e4 e5 (1... c5 {Sicilian}) 2. Nf3 *" in out


def test_pgn_single_variant_to_file(repertoire_file, tmp_path):
    output = tmp_path / "out.pgn"

    assert main(["pgn", repertoire_file, "--variant", "Open (1. ...c5)", "--output", str(output)]) == 0

    pgn = output.read_text(encoding="utf-8")
    assert '[Event "Open (1. ...c5)"]' in pgn
    assert pgn.endswith("1. e4 c5 *\n")


def test_pgn_unknown_variant(repertoire_file, capsys):
    assert main(["pgn", repertoire_file, "--variant", "Missing"]) == 1
    assert "Variant 'Missing' not found." in capsys.readouterr().out


def test_find_position(repertoire_file, capsys):
    assert main(["find", repertoire_file, "--fen", fen_after(["e4", "c5"])]) == 0
    assert "1. ...c5 (Open (1. ...c5))" in capsys.readouterr().out


def test_find_unknown_position(repertoire_file, capsys):
    assert main(["find", repertoire_file, "--fen", fen_after(["d4"])]) == 1
    assert "Position not found." in capsys.readouterr().out


def test_missing_file_returns_error(tmp_path):
    assert main(["variants", str(tmp_path / "missing.json")]) == 1


def test_corrupt_move_returns_error(repertoire_file):
    with open(repertoire_file, encoding="utf-8") as f:
        document = json.load(f)
    del document["moveNodes"]["children"][0]["children"][0]["move"]["san"]
    with open(repertoire_file, "w", encoding="utf-8") as f:
        json.dump(document, f)

    assert main(["variants", repertoire_file]) == 1
