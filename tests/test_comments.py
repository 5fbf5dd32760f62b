import os
import unittest
from unittest.mock import Mock, patch

import requests

from chess_repertoire.api.comments import HttpCommentSource, InMemoryCommentSource
from chess_repertoire.exceptions import CommentLookupError

FEN_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
FEN_D4 = "rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b KQkq - 0 1"


class TestInMemoryCommentSource(unittest.TestCase):

    def test_returns_only_known_positions(self):
        source = InMemoryCommentSource({FEN_E4: "Best by test", FEN_D4: ""})
        self.assertEqual(source.get_comments([FEN_E4, FEN_D4, "unknown"]), {FEN_E4: "Best by test"})

    def test_empty_input(self):
        self.assertEqual(InMemoryCommentSource({FEN_E4: "x"}).get_comments([]), {})

    def test_update_comments(self):
        source = InMemoryCommentSource()
        source.update_comments({FEN_D4: "Queen's pawn"})
        self.assertEqual(source.get_comments([FEN_D4]), {FEN_D4: "Queen's pawn"})


class TestHttpCommentSource(unittest.TestCase):

    @patch('chess_repertoire.api.comments.requests.get')
    def test_get_comments_success(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = {FEN_E4: "Best by test", FEN_D4: None}
        mock_response.raise_for_status.return_value = None
        mock_get.return_value = mock_response

        source = HttpCommentSource("https://api.example.org/", timeout=5)
        comments = source.get_comments([FEN_E4, FEN_D4])

        self.assertEqual(comments, {FEN_E4: "Best by test"})
        mock_get.assert_called_once()
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "https://api.example.org/positions/comments")
        self.assertEqual(kwargs['params'], {'fens': [FEN_E4, FEN_D4]})
        self.assertEqual(kwargs['timeout'], 5)
        self.assertNotIn('Authorization', kwargs['headers'])

    @patch('chess_repertoire.api.comments.requests.get')
    def test_empty_input_makes_no_request(self, mock_get):
        source = HttpCommentSource("https://api.example.org")
        self.assertEqual(source.get_comments([]), {})
        mock_get.assert_not_called()

    @patch('chess_repertoire.api.comments.requests.get')
    def test_token_sent_as_bearer(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = {}
        mock_get.return_value = mock_response

        HttpCommentSource("https://api.example.org", token="secret").get_comments([FEN_E4])

        headers = mock_get.call_args[1]['headers']
        self.assertEqual(headers['Authorization'], "Bearer secret")

    @patch('chess_repertoire.api.comments.requests.get')
    def test_request_failure_raises(self, mock_get):
        mock_get.side_effect = requests.RequestException("Connection refused")

        source = HttpCommentSource("https://api.example.org")
        with self.assertRaises(CommentLookupError):
            source.get_comments([FEN_E4])

    @patch('chess_repertoire.api.comments.requests.get')
    def test_http_error_raises(self, mock_get):
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = mock_response

        with self.assertRaises(CommentLookupError):
            HttpCommentSource("https://api.example.org").get_comments([FEN_E4])

    @patch('chess_repertoire.api.comments.requests.get')
    def test_invalid_json_raises(self, mock_get):
        mock_response = Mock()
        mock_response.json.side_effect = ValueError("No JSON object could be decoded")
        mock_get.return_value = mock_response

        with self.assertRaises(CommentLookupError):
            HttpCommentSource("https://api.example.org").get_comments([FEN_E4])

    @patch('chess_repertoire.api.comments.requests.get')
    def test_unexpected_payload_raises(self, mock_get):
        mock_response = Mock()
        mock_response.json.return_value = ["not", "a", "mapping"]
        mock_get.return_value = mock_response

        with self.assertRaises(CommentLookupError):
            HttpCommentSource("https://api.example.org").get_comments([FEN_E4])

    @patch.dict(os.environ, {'REPERTOIRE_API_URL': 'https://api.example.org', 'REPERTOIRE_API_TOKEN': 'tok'})
    def test_from_env(self):
        source = HttpCommentSource.from_env()
        self.assertEqual(source.base_url, 'https://api.example.org')
        self.assertEqual(source.headers['Authorization'], 'Bearer tok')

    @patch('chess_repertoire.api.comments.check_env_var', side_effect=SystemExit(1))
    def test_from_env_exits_without_url(self, mock_check):
        with self.assertRaises(SystemExit):
            HttpCommentSource.from_env()
        mock_check.assert_called_once_with("REPERTOIRE_API_URL")


if __name__ == '__main__':
    unittest.main()
