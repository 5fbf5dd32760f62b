import sys

from chess_repertoire.cli import main
from chess_repertoire.utils import setup_logging

if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
