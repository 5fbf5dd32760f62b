"""Tree-building helpers shared by the test modules."""
from typing import List, Optional

import chess

from chess_repertoire.models import MoveRecord
from chess_repertoire.tree import MoveNode


def board_at(node: MoveNode) -> chess.Board:
    board = chess.Board()
    for move in node.move_path():
        board.push(move.to_chess_move())
    return board


def move_record(sans_before: List[str], san: str) -> MoveRecord:
    board = chess.Board()
    for previous in sans_before:
        board.push_san(previous)
    return MoveRecord.from_board(board, board.parse_san(san))


def add_line(node: MoveNode, sans: List[str], name: Optional[str] = None) -> MoveNode:
    """Plays `sans` from `node`, returns the last node. `name` goes on the first new move."""
    board = board_at(node)
    for index, san in enumerate(sans):
        move = MoveRecord.from_board(board, board.parse_san(san))
        board.push(move.to_chess_move())
        node = node.add_move(move, name if index == 0 else None)
    return node


def fen_after(sans: List[str]) -> str:
    board = chess.Board()
    for san in sans:
        board.push_san(san)
    return board.fen()
