"""Clients for the external position comment store."""

from chess_repertoire.api.comments import (
    CommentSource,
    InMemoryCommentSource,
    HttpCommentSource,
)

__all__ = [
    "CommentSource",
    "InMemoryCommentSource",
    "HttpCommentSource",
]
