from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING
import chess

if TYPE_CHECKING:
    from chess_repertoire.tree import MoveNode


@dataclass(frozen=True)
class MoveRecord:
    """
    A move as it was applied to a position, in the shape repertoires are persisted in.

    Attributes:
        color: "w" or "b", the side that made the move.
        piece: Lowercase piece letter of the moving piece (e.g. "p", "n").
        from_square: Origin square name (e.g. "e2").
        to_square: Destination square name (e.g. "e4").
        san: Standard Algebraic Notation (e.g. "Nf3").
        lan: Long algebraic / UCI notation (e.g. "g1f3"). Used as the node id.
        before: FEN of the position before the move.
        after: FEN of the position after the move.
        flags: Move kind: n(ormal), b(ig pawn push), c(apture), e(n passant),
            k/q (king/queen side castling), p(romotion), combined when needed.
        promotion: Lowercase piece letter promoted to, if any.
        captured: Lowercase piece letter captured, if any.
    """
    color: str
    piece: str
    from_square: str
    to_square: str
    san: str
    lan: str
    before: str
    after: str
    flags: str = "n"
    promotion: Optional[str] = None
    captured: Optional[str] = None

    @classmethod
    def from_board(cls, board: chess.Board, move: chess.Move) -> "MoveRecord":
        """Describe `move` played from `board`. The board is left untouched."""
        piece = board.piece_at(move.from_square)
        if piece is None:
            raise ValueError(f"No piece on {chess.square_name(move.from_square)} for move {move.uci()}")

        captured = None
        flags = ""
        if board.is_en_passant(move):
            captured = "p"
            flags += "e"
        elif board.is_capture(move):
            captured_piece = board.piece_at(move.to_square)
            captured = captured_piece.symbol().lower() if captured_piece else None
            flags += "c"
        if board.is_kingside_castling(move):
            flags += "k"
        elif board.is_queenside_castling(move):
            flags += "q"
        if piece.piece_type == chess.PAWN and abs(move.to_square - move.from_square) == 16:
            flags += "b"
        if move.promotion:
            flags += "p"

        san = board.san(move)
        after_board = board.copy(stack=False)
        after_board.push(move)

        return cls(
            color="w" if board.turn == chess.WHITE else "b",
            piece=piece.symbol().lower(),
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            san=san,
            lan=move.uci(),
            before=board.fen(),
            after=after_board.fen(),
            flags=flags or "n",
            promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
            captured=captured,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveRecord":
        """Builds a record from its persisted JSON shape."""
        return cls(
            color=data["color"],
            piece=data.get("piece", ""),
            from_square=data.get("from", ""),
            to_square=data.get("to", ""),
            san=data["san"],
            lan=data["lan"],
            before=data.get("before", ""),
            after=data.get("after", ""),
            flags=data.get("flags", "n"),
            promotion=data.get("promotion"),
            captured=data.get("captured"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "color": self.color,
            "piece": self.piece,
            "from": self.from_square,
            "to": self.to_square,
            "san": self.san,
            "lan": self.lan,
            "before": self.before,
            "after": self.after,
            "flags": self.flags,
        }
        if self.promotion:
            data["promotion"] = self.promotion
        if self.captured:
            data["captured"] = self.captured
        return data

    def to_chess_move(self) -> chess.Move:
        return chess.Move.from_uci(self.lan)


@dataclass(frozen=True)
class Variant:
    """
    One root-to-leaf line of a repertoire tree plus its display names.

    Attributes:
        moves: The nodes of the line, root excluded, in playing order.
        name: The explicit or inherited variant name, or "Variant N".
        full_name: `name` plus the disambiguating suffix, when there is one.
        different_moves: The disambiguating suffix alone, e.g. "(3. ...Nf6)".
    """
    moves: Tuple["MoveNode", ...]
    name: str
    full_name: str
    different_moves: str = ""

    def lan_path(self) -> Tuple[str, ...]:
        return tuple(node.get_move().lan for node in self.moves)
