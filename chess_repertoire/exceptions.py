"""Errors raised by the repertoire tree, its storage and the comment lookup."""


class RepertoireError(Exception):
    """Base class for every error raised by chess_repertoire."""


class MissingMoveError(RepertoireError):
    """A node that must carry a move has none (the root, or a corrupt persisted node)."""


class TreeStructureError(RepertoireError):
    """A mutation would break the single-root tree shape."""


class IllegalMoveError(RepertoireError):
    """The position engine does not know the requested move in the current position."""


class CommentLookupError(RepertoireError):
    """The batched position comment lookup failed."""


class RepertoireFileError(RepertoireError):
    """A persisted repertoire document could not be read."""
