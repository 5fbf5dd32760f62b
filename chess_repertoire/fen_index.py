"""FEN to node lookup, for opening a repertoire at a linked position."""
import logging
from typing import Dict, Optional, Sequence

from chess_repertoire.engine import PositionEngine, PythonChessEngine
from chess_repertoire.models import Variant
from chess_repertoire.tree import MoveNode

logger = logging.getLogger("chess_repertoire")


def normalize_fen(fen: str) -> str:
    """Board, side to move, castling and en passant fields; move counters dropped."""
    return " ".join(fen.split()[:4])


def build_fen_node_index(
    variants: Sequence[Variant],
    variant_name: Optional[str] = None,
    engine: Optional[PositionEngine] = None,
) -> Dict[str, MoveNode]:
    """
    Maps the normalized FEN after every move of the matching variants to its node.

    Only variants whose name or full name equals `variant_name` are indexed,
    all of them when no name is given. When two nodes reach the same
    position the first one in traversal order is kept.
    """
    engine = engine or PythonChessEngine()
    index: Dict[str, MoveNode] = {}
    for variant in variants:
        if variant_name and variant_name not in (variant.name, variant.full_name):
            continue
        position = engine.initial_position()
        for node in variant.moves:
            position = engine.apply(position, node.get_move())
            index.setdefault(normalize_fen(engine.to_fen(position)), node)
    logger.debug(f"Indexed {len(index)} positions")
    return index


def find_node_by_fen(index: Dict[str, MoveNode], fen: str) -> Optional[MoveNode]:
    return index.get(normalize_fen(fen))
