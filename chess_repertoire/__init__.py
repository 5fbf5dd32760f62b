"""Opening repertoire trees: variant naming, FEN deep links and PGN export."""

from chess_repertoire.models import MoveRecord, Variant
from chess_repertoire.tree import MoveNode, extract_inline_comments
from chess_repertoire.variants import get_variants
from chess_repertoire.matcher import (
    find_best_variant,
    is_variant_compatible_with_path,
    select_initial_variant,
)
from chess_repertoire.fen_index import build_fen_node_index, find_node_by_fen, normalize_fen
from chess_repertoire.engine import PositionEngine, PythonChessEngine
from chess_repertoire.pgn import to_pgn, variant_to_pgn
from chess_repertoire.editor import RepertoireEditor
from chess_repertoire.utils import setup_logging

__all__ = [
    "MoveRecord",
    "Variant",
    "MoveNode",
    "extract_inline_comments",
    "get_variants",
    "find_best_variant",
    "is_variant_compatible_with_path",
    "select_initial_variant",
    "build_fen_node_index",
    "find_node_by_fen",
    "normalize_fen",
    "PositionEngine",
    "PythonChessEngine",
    "to_pgn",
    "variant_to_pgn",
    "RepertoireEditor",
    "setup_logging",
]
