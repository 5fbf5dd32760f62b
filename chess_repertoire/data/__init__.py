"""Local JSON storage of repertoire documents and comment maps."""

from chess_repertoire.data.store import load_repertoire, save_repertoire, load_comments

__all__ = [
    "load_repertoire",
    "save_repertoire",
    "load_comments",
]
