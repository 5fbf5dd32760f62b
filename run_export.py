import sys

from chess_repertoire.utils import setup_logging
from chess_repertoire.cli import main

if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
