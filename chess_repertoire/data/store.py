import json
import os
import logging
from typing import Dict

from chess_repertoire.exceptions import RepertoireFileError
from chess_repertoire.tree import MoveNode

logger = logging.getLogger("chess_repertoire")

ORIENTATIONS = ("white", "black")


def load_repertoire(path: str) -> Dict:
    """
    Loads a repertoire document from a JSON file.

    The document holds `name`, `orientation` and `moveNodes` (the tree in its
    persisted shape). Missing optional keys are filled in.
    """
    if not os.path.exists(path):
        raise RepertoireFileError(f"Repertoire file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise RepertoireFileError(f"Could not read repertoire file {path}: {e}") from e

    if not isinstance(data, dict):
        raise RepertoireFileError(f"Repertoire file {path} does not hold a JSON object")

    # Ensure schema validity
    data.setdefault("name", os.path.splitext(os.path.basename(path))[0])
    if data.get("orientation") not in ORIENTATIONS:
        data["orientation"] = "white"
    if not data.get("moveNodes"):
        data["moveNodes"] = MoveNode().to_plain_subtree()
    return data


def save_repertoire(path: str, name: str, orientation: str, root: MoveNode):
    """Saves the tree rooted at `root` to a JSON file. Comments are not part of the document."""
    document = {
        "name": name,
        "orientation": orientation,
        "moveNodes": root.to_plain_subtree(),
    }
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    logger.info(f"Repertoire '{name}' saved: {path}")


def load_comments(path: str) -> Dict[str, str]:
    """Loads a FEN -> comment mapping from a JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise RepertoireFileError(f"Could not read comments file {path}: {e}") from e
    if not isinstance(data, dict):
        raise RepertoireFileError(f"Comments file {path} does not hold a JSON object")
    return {fen: comment for fen, comment in data.items() if isinstance(comment, str)}
