"""PGN export."""

from chess_repertoire.pgn.writer import (
    to_pgn,
    variant_to_pgn,
    build_header,
    collect_fens,
    collect_variant_fens,
    fetch_comments,
    format_move_token,
    render_node,
    render_variant,
)

__all__ = [
    "to_pgn",
    "variant_to_pgn",
    "build_header",
    "collect_fens",
    "collect_variant_fens",
    "fetch_comments",
    "format_move_token",
    "render_node",
    "render_variant",
]
