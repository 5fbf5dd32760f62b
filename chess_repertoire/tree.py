"""The repertoire move tree."""
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from chess_repertoire.exceptions import MissingMoveError, TreeStructureError
from chess_repertoire.models import MoveRecord, Variant

logger = logging.getLogger("chess_repertoire")

ROOT_ID = "initial"


class MoveNode:
    """
    A node of a repertoire tree.

    The root carries no move and stands for the starting position. Every other
    node holds the move that leads to it; its `id` is the move's LAN, which is
    unique among siblings. The first child is the principal continuation.

    Nodes are only ever created as fresh leaves by `add_move`, so the tree
    cannot grow a cycle.
    """

    def __init__(self):
        self.id: str = ROOT_ID
        self.move: Optional[MoveRecord] = None
        self.children: List["MoveNode"] = []
        self.parent: Optional["MoveNode"] = None
        self.variant_name: Optional[str] = None
        # Legacy inline comment. Position comments live in an external store
        # keyed by FEN; this is only a fallback when the store has none.
        self.comment: Optional[str] = None
        self.turn: int = 0
        self.position: int = 0
        self.circles: List[str] = []
        self.arrows: List[List[str]] = []

    @classmethod
    def from_plain(cls, record: Dict[str, Any]) -> "MoveNode":
        """
        Rebuilds a live tree from its persisted, parent-free shape.

        Parent links, `turn` and `position` are recomputed relative to the
        rebuilt root, which starts at turn 0 whatever move it carries: a
        subtree rebuilt from a white move numbers its black replies "0. ...".
        Raises MissingMoveError as soon as a non-root record without a move,
        or with an incomplete move, is met.
        """
        root = cls()
        root.id = record.get("id", ROOT_ID)
        move = record.get("move")
        root.move = _as_move_record(move, root.id) if move else None
        root.variant_name = record.get("variantName") or None
        root.comment = record.get("comment") or None
        root.circles = list(record.get("circles") or [])
        root.arrows = [list(arrow) for arrow in record.get("arrows") or []]
        _attach_children(root, record.get("children") or [])
        return root

    def get_move(self) -> MoveRecord:
        if self.move is None:
            raise MissingMoveError(f"Node '{self.id}' has no move")
        return self.move

    def is_root(self) -> bool:
        return self.parent is None

    def add_move(
        self,
        move: MoveRecord,
        name: Optional[str] = None,
        comment: Optional[str] = None,
        on_new_node: Optional[Callable[["MoveNode"], None]] = None,
    ) -> "MoveNode":
        """
        Returns the child reached by `move`, creating it if needed.

        Adding a move that already exists under this node returns the existing
        child untouched, so replaying a line never duplicates nodes.
        `on_new_node` is only called when a node was actually created.
        """
        for child in self.children:
            if child.id == move.lan:
                return child

        node = MoveNode()
        node.move = move
        node.parent = self
        node.id = move.lan
        node.variant_name = name or None
        node.comment = comment or None
        if self.move is None or self.move.color == "b":
            node.turn = self.turn + 1
        else:
            node.turn = self.turn
        node.position = self.position + 1
        self.children.append(node)
        logger.debug(f"Added {node} under '{self.id}'")
        if on_new_node:
            on_new_node(node)
        return node

    def rename(self, name: Optional[str]):
        """Sets the variant name; an empty name clears it."""
        self.variant_name = name or None

    def remove(self) -> "MoveNode":
        """Detaches this node and its subtree from the tree. Returns the former parent."""
        if self.parent is None:
            raise TreeStructureError("The root of a repertoire cannot be removed")
        parent = self.parent
        parent.children = [child for child in parent.children if child is not self]
        self.parent = None
        logger.debug(f"Removed {self} from '{parent.id}'")
        return parent

    def get_root(self) -> "MoveNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def move_path(self) -> List[MoveRecord]:
        """Moves from the root down to this node, in playing order."""
        moves = []
        node = self
        while node.parent is not None:
            moves.append(node.get_move())
            node = node.parent
        moves.reverse()
        return moves

    def lan_path(self) -> List[str]:
        return [move.lan for move in self.move_path()]

    def iter_nodes(self) -> Iterator["MoveNode"]:
        """Pre-order walk of this subtree, this node included."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_variants(self) -> List[Variant]:
        from chess_repertoire.variants import get_variants
        return get_variants(self)

    def to_plain_subtree(self) -> Dict[str, Any]:
        """Parent-free copy of this subtree, in the persisted shape. Comments are not included."""
        return {
            "id": self.id,
            "move": self.move.to_dict() if self.move else None,
            "variantName": self.variant_name,
            "children": [child.to_plain_subtree() for child in self.children],
            "circles": list(self.circles),
            "arrows": [list(arrow) for arrow in self.arrows],
        }

    def unique_key(self) -> str:
        move = self.get_move()
        return f"{self.turn}. {move.color}#{move.san}"

    def __str__(self) -> str:
        move = self.get_move()
        ellipsis = "..." if move.color == "b" else ""
        return f"{self.turn}. {ellipsis}{move.san}"

    def __repr__(self) -> str:
        if self.move is None:
            return f"MoveNode(root, children={len(self.children)})"
        return f"MoveNode({self}, children={len(self.children)})"


def _as_move_record(move: Union[MoveRecord, Dict[str, Any]], node_id: str) -> MoveRecord:
    if isinstance(move, MoveRecord):
        return move
    try:
        return MoveRecord.from_dict(move)
    except KeyError as e:
        raise MissingMoveError(f"Persisted node '{node_id}' has a move without {e}") from e


def _attach_children(node: MoveNode, records: List[Dict[str, Any]]):
    for record in records:
        move = record.get("move")
        if not move:
            raise MissingMoveError(
                f"Persisted node '{record.get('id', '?')}' under '{node.id}' has no move"
            )
        child = node.add_move(
            _as_move_record(move, record.get("id", "?")),
            record.get("variantName"),
            record.get("comment"),
        )
        child.circles = list(record.get("circles") or [])
        child.arrows = [list(arrow) for arrow in record.get("arrows") or []]
        _attach_children(child, record.get("children") or [])


def extract_inline_comments(root: MoveNode) -> Dict[str, str]:
    """
    Collects legacy inline comments keyed by the FEN reached after each move.

    Used to move old repertoires' comments into the position comment store.
    When two nodes reach the same FEN the longest comment is kept.
    """
    comments: Dict[str, str] = {}
    for node in root.iter_nodes():
        if node.move is None or not node.comment:
            continue
        fen = node.move.after
        existing = comments.get(fen)
        if existing is None or len(node.comment) > len(existing):
            comments[fen] = node.comment
    logger.info(f"Extracted {len(comments)} inline comments")
    return comments
