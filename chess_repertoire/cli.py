"""
chess_repertoire/cli.py

List variants, export PGN and resolve FEN links for a repertoire JSON document.
"""

import argparse
import logging
import os
from typing import List, Optional

from chess_repertoire.api.comments import CommentSource, HttpCommentSource, InMemoryCommentSource
from chess_repertoire.data.store import load_comments, load_repertoire
from chess_repertoire.editor import RepertoireEditor
from chess_repertoire.exceptions import RepertoireError
from chess_repertoire.matcher import select_initial_variant

logger = logging.getLogger("chess_repertoire")


def _comment_source(args) -> Optional[CommentSource]:
    if args.comments:
        return InMemoryCommentSource(load_comments(args.comments))
    if os.getenv("REPERTOIRE_API_URL"):
        return HttpCommentSource.from_env()
    return None


def _cmd_variants(editor: RepertoireEditor, args) -> int:
    variants = editor.variants
    if args.variant:
        variants = [v for v in variants if args.variant in (v.name, v.full_name)]
    if not variants:
        print("No variants found.")
        return 1
    for variant in variants:
        line = " ".join(str(node) for node in variant.moves)
        print(f"{variant.full_name}: {line}")
    return 0


def _cmd_pgn(editor: RepertoireEditor, args) -> int:
    comment_source = _comment_source(args)
    if args.variant:
        variant = select_initial_variant(
            [v for v in editor.variants if args.variant in (v.name, v.full_name)]
        )
        if variant is None:
            print(f"Variant '{args.variant}' not found.")
            return 1
        editor.select_variant(variant)
        pgn = editor.selected_variant_to_pgn(comment_source=comment_source)
    else:
        pgn = editor.to_pgn(comment_source=comment_source)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(pgn)
            f.write("\n")
        print(f"PGN written to {args.output}")
    else:
        print(pgn)
    return 0


def _cmd_find(editor: RepertoireEditor, args) -> int:
    node = editor.navigate_to_fen()
    if node is None:
        print("Position not found.")
        return 1
    variant = editor.selected_variant
    print(f"{node} ({variant.full_name if variant else '-'})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Work with an opening repertoire JSON document')
    subparsers = parser.add_subparsers(dest='command', required=True)

    variants_parser = subparsers.add_parser('variants', help='List the variants of the repertoire')
    variants_parser.add_argument('file', help='Repertoire JSON file')
    variants_parser.add_argument('--variant', help='Only show variants with this name')

    pgn_parser = subparsers.add_parser('pgn', help='Export the repertoire (or one variant) as PGN')
    pgn_parser.add_argument('file', help='Repertoire JSON file')
    pgn_parser.add_argument('--variant', help='Export only this variant')
    pgn_parser.add_argument('--output', help='Output PGN file path (default: stdout)')
    pgn_parser.add_argument('--comments', help='JSON file mapping FEN to comment (default: REPERTOIRE_API_URL)')

    find_parser = subparsers.add_parser('find', help='Find the move reaching a FEN position')
    find_parser.add_argument('file', help='Repertoire JSON file')
    find_parser.add_argument('--fen', required=True, help='Position to look for')
    find_parser.add_argument('--variant', help='Only search this variant')

    args = parser.parse_args(argv)

    try:
        document = load_repertoire(args.file)
        editor = RepertoireEditor.from_document(
            document,
            variant_name=args.variant,
            fen=getattr(args, 'fen', None),
        )
        if args.command == 'variants':
            return _cmd_variants(editor, args)
        if args.command == 'pgn':
            return _cmd_pgn(editor, args)
        return _cmd_find(editor, args)
    except RepertoireError as e:
        logger.error(str(e))
        return 1
