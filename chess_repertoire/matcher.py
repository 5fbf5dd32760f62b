"""Keep the selected variant stable while the tree changes under it."""
import logging
from typing import Optional, Sequence

from chess_repertoire.models import Variant
from chess_repertoire.tree import MoveNode

logger = logging.getLogger("chess_repertoire")


def is_variant_compatible_with_path(variant: Variant, lan_path: Sequence[str]) -> bool:
    """True when the variant starts with every move of `lan_path`."""
    if len(variant.moves) < len(lan_path):
        return False
    return all(
        variant.moves[index].get_move().lan == lan
        for index, lan in enumerate(lan_path)
    )


def select_initial_variant(
    variants: Sequence[Variant], variant_name: Optional[str] = None
) -> Optional[Variant]:
    """The deep-linked variant (by name or full name) if present, else the first one."""
    if not variants:
        return None
    if variant_name:
        for variant in variants:
            if variant_name in (variant.name, variant.full_name):
                return variant
        logger.debug(f"Deep-linked variant '{variant_name}' not found, using the first variant")
    return variants[0]


def find_best_variant(
    variants: Sequence[Variant],
    target: MoveNode,
    selected: Optional[Variant] = None,
    variant_name: Optional[str] = None,
) -> Optional[Variant]:
    """
    Picks the variant the user should stay on after the tree changed.

    Preference order:
    1. the previously selected variant (matched by full name in the new list)
       if it still goes through `target`;
    2. the first variant that goes through `target`;
    3. the deep-linked variant, else the first variant.

    Returns None only when `variants` is empty.
    """
    if not variants:
        return None

    lan_path = target.lan_path()

    if selected is not None:
        for variant in variants:
            if variant.full_name == selected.full_name:
                if is_variant_compatible_with_path(variant, lan_path):
                    return variant
                break

    for variant in variants:
        if is_variant_compatible_with_path(variant, lan_path):
            return variant

    return select_initial_variant(variants, variant_name)
