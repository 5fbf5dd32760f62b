"""Editing session over one repertoire tree."""
import logging
from datetime import date as date_type, datetime
from typing import Any, Dict, List, Optional, Union

from chess_repertoire.api.comments import CommentSource
from chess_repertoire.engine import PositionEngine, PythonChessEngine
from chess_repertoire.exceptions import IllegalMoveError
from chess_repertoire.fen_index import build_fen_node_index, find_node_by_fen
from chess_repertoire.matcher import find_best_variant, select_initial_variant
from chess_repertoire.models import MoveRecord, Variant
from chess_repertoire.pgn.writer import to_pgn, variant_to_pgn
from chess_repertoire.tree import MoveNode
from chess_repertoire.variants import get_variants

logger = logging.getLogger("chess_repertoire")


class RepertoireEditor:
    """
    The single editing context of a repertoire.

    Tracks the node on the board, the variant being followed and whether the
    tree has unsaved changes. After every structural change the variant list
    is rebuilt from scratch and the followed variant re-selected so that it
    still goes through the current node whenever possible.

    Not thread-safe: mutate and export from one place at a time.
    """

    def __init__(
        self,
        name: str,
        root: Optional[MoveNode] = None,
        orientation: str = "white",
        variant_name: Optional[str] = None,
        fen: Optional[str] = None,
        engine: Optional[PositionEngine] = None,
    ):
        self.name = name
        self.orientation = orientation
        self.engine = engine or PythonChessEngine()
        self.root = root or MoveNode()
        # Deep-link parameters
        self.variant_name = variant_name
        self.fen_link = fen
        self.has_changes = False

        self.current = self.root
        self.board = self.engine.initial_position()
        self.variants: List[Variant] = get_variants(self.root)
        self.selected_variant: Optional[Variant] = select_initial_variant(self.variants, variant_name)

    @classmethod
    def from_document(cls, document: Dict[str, Any], **kwargs) -> "RepertoireEditor":
        """Opens a persisted repertoire document (see chess_repertoire.data.store)."""
        root = MoveNode.from_plain(document.get("moveNodes") or {})
        return cls(
            document.get("name", "Repertoire"),
            root=root,
            orientation=document.get("orientation", "white"),
            **kwargs,
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "orientation": self.orientation,
            "moveNodes": self.root.to_plain_subtree(),
        }

    def mark_saved(self):
        self.has_changes = False

    def _mark_changes(self, node: Optional[MoveNode] = None):
        self.has_changes = True

    # --- variants ---

    def update_variants(self, target: Optional[MoveNode] = None):
        self.variants = get_variants(self.root)
        self.selected_variant = find_best_variant(
            self.variants,
            target or self.current,
            self.selected_variant,
            self.variant_name,
        )

    def select_variant(self, variant: Optional[Variant]):
        self.selected_variant = variant

    # --- navigation ---

    def fen(self) -> str:
        return self.engine.to_fen(self.board)

    def init_board(self):
        self.current = self.root
        self.board = self.engine.initial_position()

    def go_to_move(self, node: MoveNode) -> MoveNode:
        board = self.engine.initial_position()
        for move in node.move_path():
            board = self.engine.apply(board, move)
        self.board = board
        self.current = node
        self.update_variants(node)
        return node

    def prev(self) -> Optional[MoveNode]:
        if self.current.parent is None:
            return None
        return self.go_to_move(self.current.parent)

    def next_following_variant(self) -> Optional[MoveNode]:
        """
        Steps forward along the followed variant.

        Falls back to the only child, then to the principal continuation.
        """
        if not self.current.children:
            return None

        selected = self.selected_variant
        if selected is not None and self.current.position < len(selected.moves):
            wanted = selected.moves[self.current.position]
            for child in self.current.children:
                if child.id == wanted.id:
                    return self._step(child)

        return self._step(self.current.children[0])

    def _step(self, child: MoveNode) -> MoveNode:
        self.board = self.engine.apply(self.board, child.get_move())
        self.current = child
        self.update_variants(child)
        return child

    def navigate_to_fen(self) -> Optional[MoveNode]:
        """
        Opens the position given by the `fen` deep link.

        Only variants matching the `variant_name` deep link are searched, if one
        was given. Returns None (and leaves the board alone) when no variant
        reaches that position.
        """
        if not self.fen_link or not self.variants:
            return None

        index = build_fen_node_index(self.variants, self.variant_name, self.engine)
        node = find_node_by_fen(index, self.fen_link)
        if node is None:
            if self.variant_name:
                logger.warning(f"FEN position not found in variant \"{self.variant_name}\".")
            else:
                logger.warning("FEN position not found in any variant.")
            return None
        return self.go_to_move(node)

    # --- mutations ---

    def add_move(self, move: MoveRecord) -> MoveNode:
        node = self.current.add_move(move, on_new_node=self._mark_changes)
        self.board = self.engine.apply(self.board, move)
        self.current = node
        self.update_variants(node)
        return node

    def add_san(self, san: str) -> MoveNode:
        """Adds the move written `san` in the current position."""
        for move in self.engine.legal_moves(self.board):
            if move.san == san:
                return self.add_move(move)
        raise IllegalMoveError(f"{san} is not a legal move in {self.fen()}")

    def add_line(self, sans: List[str]) -> MoveNode:
        """Adds a sequence of SAN moves from the current node on."""
        node = self.current
        for san in sans:
            node = self.add_san(san)
        return node

    def rename_move(self, node: MoveNode, name: Optional[str]) -> MoveNode:
        node.rename(name)
        self._mark_changes(node)
        return self.go_to_move(node)

    def delete_move(self, node: MoveNode) -> Optional[MoveNode]:
        """Deletes `node` and its subtree; the board moves to its parent."""
        if node.parent is None:
            return None
        parent = node.remove()
        self._mark_changes(parent)
        return self.go_to_move(parent)

    # --- export ---

    def to_pgn(
        self,
        date: Optional[Union[date_type, datetime]] = None,
        comment_source: Optional[CommentSource] = None,
    ) -> str:
        return to_pgn(self.name, date, self.orientation, self.root, comment_source, self.engine)

    def selected_variant_to_pgn(
        self,
        date: Optional[Union[date_type, datetime]] = None,
        comment_source: Optional[CommentSource] = None,
    ) -> Optional[str]:
        if self.selected_variant is None:
            return None
        return variant_to_pgn(self.selected_variant, self.orientation, date, comment_source, self.engine)
