import requests
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from chess_repertoire.exceptions import CommentLookupError
from chess_repertoire.utils import check_env_var, get_setting

logger = logging.getLogger("chess_repertoire")


class CommentSource(ABC):
    """Bulk lookup of position comments keyed by FEN."""

    @abstractmethod
    def get_comments(self, fens: Iterable[str]) -> Dict[str, str]:
        """
        Returns the comments known for `fens`.

        Positions without a comment are simply absent from the result.
        An empty input yields an empty mapping.
        """
        pass


class InMemoryCommentSource(CommentSource):
    """Comment store backed by a plain dict (local files, tests)."""

    def __init__(self, comments: Optional[Dict[str, str]] = None):
        self.comments = dict(comments or {})

    def get_comments(self, fens: Iterable[str]) -> Dict[str, str]:
        return {fen: self.comments[fen] for fen in fens if self.comments.get(fen)}

    def update_comments(self, comments: Dict[str, str]):
        self.comments.update(comments)


class HttpCommentSource(CommentSource):
    """Fetches position comments from the repertoire REST API in a single request."""

    def __init__(self, api_url: str, token: Optional[str] = None, timeout: float = 10.0):
        self.base_url = api_url.rstrip("/")
        self.timeout = timeout
        self.headers = {'Accept': 'application/json'}
        if token:
            self.headers['Authorization'] = f'Bearer {token}'

    @classmethod
    def from_env(cls) -> "HttpCommentSource":
        """Builds a source from REPERTOIRE_API_URL / REPERTOIRE_API_TOKEN. Exits if the URL is missing."""
        api_url = check_env_var("REPERTOIRE_API_URL")
        token = get_setting("REPERTOIRE_API_TOKEN", "")
        return cls(api_url, token or None)

    def get_comments(self, fens: Iterable[str]) -> Dict[str, str]:
        fens = list(fens)
        if not fens:
            return {}

        url = f"{self.base_url}/positions/comments"
        try:
            resp = requests.get(url, params={'fens': fens}, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise CommentLookupError(f"Request error fetching comments for {len(fens)} positions: {e}") from e
        except ValueError as e:
            raise CommentLookupError(f"Invalid JSON in comments response: {e}") from e

        if not isinstance(data, dict):
            raise CommentLookupError(f"Unexpected comments payload: {type(data).__name__}")

        logger.debug(f"Fetched {len(data)} comments for {len(fens)} positions")
        return {fen: comment for fen, comment in data.items() if isinstance(comment, str) and comment}
