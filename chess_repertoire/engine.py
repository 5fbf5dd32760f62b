"""Position engine used to replay repertoire moves."""
from abc import ABC, abstractmethod
from typing import Any, List
import chess

from chess_repertoire.models import MoveRecord


class PositionEngine(ABC):
    """
    Abstract board simulator.

    Legality is the engine's business: the tree and the PGN writer only apply
    moves that were produced by the engine in the first place.
    """

    @abstractmethod
    def initial_position(self) -> Any:
        pass

    @abstractmethod
    def apply(self, position: Any, move: MoveRecord) -> Any:
        """Plays `move` on `position` and returns the resulting position."""
        pass

    @abstractmethod
    def to_fen(self, position: Any) -> str:
        pass

    @abstractmethod
    def copy(self, position: Any) -> Any:
        pass

    @abstractmethod
    def legal_moves(self, position: Any) -> List[MoveRecord]:
        pass


class PythonChessEngine(PositionEngine):
    """python-chess implementation. Positions are `chess.Board` objects mutated in place."""

    def __init__(self, starting_fen: str = chess.STARTING_FEN):
        self.starting_fen = starting_fen

    def initial_position(self) -> chess.Board:
        return chess.Board(self.starting_fen)

    def apply(self, position: chess.Board, move: MoveRecord) -> chess.Board:
        position.push(move.to_chess_move())
        return position

    def to_fen(self, position: chess.Board) -> str:
        return position.fen()

    def copy(self, position: chess.Board) -> chess.Board:
        return position.copy(stack=False)

    def legal_moves(self, position: chess.Board) -> List[MoveRecord]:
        return [MoveRecord.from_board(position, move) for move in position.legal_moves]
