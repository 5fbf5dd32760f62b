"""
PGN export of repertoire trees and single variants.

Comments are not stored on the nodes: they live in an external store keyed by
the FEN reached after each move. Export therefore runs in two passes:
1. walk the tree once to collect every FEN it will visit and fetch all their
   comments in a single batched lookup;
2. walk it again to write the movetext, splicing in the fetched comments.
"""
import logging
from datetime import date as date_type, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from chess_repertoire.api.comments import CommentSource
from chess_repertoire.engine import PositionEngine, PythonChessEngine
from chess_repertoire.fen_index import normalize_fen
from chess_repertoire.models import Variant
from chess_repertoire.tree import MoveNode
from chess_repertoire.utils import get_setting

logger = logging.getLogger("chess_repertoire")

DEFAULT_SITE = "?"
DEFAULT_ANNOTATOR = "chess_repertoire"


class _SideLineStart:
    """Stand-in parent whose only child is the first move of a side line."""
    __slots__ = ['children']

    def __init__(self, node: MoveNode):
        self.children = [node]


# =====================================================
# COMMENT PREFETCH
# =====================================================

def collect_fens(
    node: MoveNode,
    engine: Optional[PositionEngine] = None,
    position: Any = None,
) -> List[str]:
    """FENs reached after every move below `node`, deduplicated, in rendering order."""
    engine = engine or PythonChessEngine()
    if position is None:
        position = engine.initial_position()
    fens: Dict[str, None] = {}

    def walk(current, board):
        if not current.children:
            return
        first = current.children[0]
        branch_point = engine.copy(board)
        board = engine.apply(board, first.get_move())
        fens.setdefault(engine.to_fen(board))
        for side in current.children[1:]:
            walk(_SideLineStart(side), engine.copy(branch_point))
        walk(first, board)

    walk(node, position)
    return list(fens)


def collect_variant_fens(variant: Variant, engine: Optional[PositionEngine] = None) -> List[str]:
    engine = engine or PythonChessEngine()
    position = engine.initial_position()
    fens: Dict[str, None] = {}
    for node in variant.moves:
        position = engine.apply(position, node.get_move())
        fens.setdefault(engine.to_fen(position))
    return list(fens)


def fetch_comments(fens: List[str], comment_source: Optional[CommentSource]) -> Dict[str, str]:
    """
    One batched comment lookup for all of `fens`.

    A failing source does not fail the export: the PGN is still valid without
    comments, so the error is logged and an empty mapping returned.
    """
    if comment_source is None:
        return {}
    try:
        comments = dict(comment_source.get_comments(fens))
    except Exception as e:
        logger.warning(f"Comment lookup failed, exporting PGN without comments: {e}")
        return {}

    # Stores keyed by normalized FEN must match too.
    for fen, text in list(comments.items()):
        comments.setdefault(normalize_fen(fen), text)
    logger.info(f"Fetched {len(comments)} comments for {len(fens)} positions")
    return comments


def _comment_for(node: MoveNode, fen: str, comments: Dict[str, str]) -> str:
    comment = comments.get(fen) or comments.get(normalize_fen(fen)) or node.comment or ""
    # PGN comments cannot contain a closing brace.
    return comment.strip().replace("}", "]")


# =====================================================
# MOVETEXT
# =====================================================

def format_move_token(node: MoveNode, is_main_line: bool) -> str:
    """
    "N. san" for white; bare SAN for black inside a running line;
    "N... san" when black's move opens a line.
    """
    move = node.get_move()
    if move.color == "w":
        return f"{node.turn}. {move.san}"
    if is_main_line:
        return move.san
    return f"{node.turn}... {move.san}"


def _with_comment(token: str, comment: str) -> str:
    if not comment:
        return token
    return f"{token} {{{comment}}}"


def render_node(
    node: Union[MoveNode, _SideLineStart],
    is_main_line: bool,
    position: Any,
    comments: Dict[str, str],
    engine: Optional[PositionEngine] = None,
) -> str:
    """
    Movetext for everything below `node`.

    The first child continues the line. Every other child becomes a
    parenthesised side line, played on a copy of the position before the
    first child's move, so `position` only ever follows the line itself.
    Once a branch point has produced a side line, the continuation no longer
    counts as a running line and a black move there restates its number.
    """
    if not node.children:
        return ""
    engine = engine or PythonChessEngine()

    first = node.children[0]
    side_lines = node.children[1:]
    branch_point = engine.copy(position)

    position = engine.apply(position, first.get_move())
    fen = engine.to_fen(position)
    move_text = _with_comment(format_move_token(first, is_main_line), _comment_for(first, fen, comments))

    side_texts = []
    for side in side_lines:
        side_text = render_node(_SideLineStart(side), False, engine.copy(branch_point), comments, engine)
        side_texts.append(f"({side_text})")

    next_moves = render_node(first, not side_lines, position, comments, engine)

    return " ".join(part for part in [move_text] + side_texts + [next_moves] if part)


def render_variant(
    variant: Variant,
    position: Any,
    comments: Dict[str, str],
    engine: Optional[PositionEngine] = None,
) -> str:
    """Movetext of a single line, with the same numbering rules as `render_node`."""
    engine = engine or PythonChessEngine()
    tokens = []
    for index, node in enumerate(variant.moves):
        position = engine.apply(position, node.get_move())
        fen = engine.to_fen(position)
        token = format_move_token(node, is_main_line=index > 0)
        tokens.append(_with_comment(token, _comment_for(node, fen, comments)))
    return " ".join(tokens)


# =====================================================
# DOCUMENT
# =====================================================

def _escape_tag(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_header(
    name: str,
    orientation: str,
    date: Union[date_type, datetime],
    site: Optional[str] = None,
    annotator: Optional[str] = None,
) -> str:
    """Tag pair section. The repertoire name is the player on the `orientation` side."""
    site = site or get_setting("PGN_SITE", DEFAULT_SITE)
    annotator = annotator or get_setting("PGN_ANNOTATOR", DEFAULT_ANNOTATOR)
    tags = [
        ("Event", name),
        ("Site", site),
        ("Date", date.strftime("%Y.%m.%d")),
        ("Round", "?"),
        ("White", name if orientation == "white" else "?"),
        ("Black", name if orientation == "black" else "?"),
        ("Result", "*"),
        ("Variant", "Standard"),
        ("Opening", name),
        ("Annotator", annotator),
    ]
    return "".join(f'[{key} "{_escape_tag(value)}"]\n' for key, value in tags)


def _today() -> date_type:
    return datetime.now(timezone.utc).date()


def to_pgn(
    name: str,
    date: Optional[Union[date_type, datetime]],
    orientation: str,
    tree: MoveNode,
    comment_source: Optional[CommentSource] = None,
    engine: Optional[PositionEngine] = None,
) -> str:
    """Whole repertoire as one PGN game with nested variations."""
    engine = engine or PythonChessEngine()
    fens = collect_fens(tree, engine)
    comments = fetch_comments(fens, comment_source)
    movetext = render_node(tree, True, engine.initial_position(), comments, engine)
    logger.info(f"Exported repertoire '{name}' ({len(fens)} positions) to PGN")
    return build_header(name, orientation, date or _today()) + "\n" + movetext + " *"


def variant_to_pgn(
    variant: Variant,
    orientation: str,
    date: Optional[Union[date_type, datetime]] = None,
    comment_source: Optional[CommentSource] = None,
    engine: Optional[PositionEngine] = None,
) -> str:
    """A single variant as a PGN game, named after its full name."""
    engine = engine or PythonChessEngine()
    fens = collect_variant_fens(variant, engine)
    comments = fetch_comments(fens, comment_source)
    movetext = render_variant(variant, engine.initial_position(), comments, engine)
    logger.info(f"Exported variant '{variant.full_name}' to PGN")
    return build_header(variant.full_name, orientation, date or _today()) + "\n" + movetext + " *"
