"""Flatten a repertoire tree into named root-to-leaf variants."""
from typing import List, Optional

from chess_repertoire.models import Variant
from chess_repertoire.tree import MoveNode


def _different_nodes_string(different_nodes: List[MoveNode]) -> str:
    if not different_nodes:
        return ""
    return "(" + " ".join(str(node) for node in different_nodes) + ")"


def get_variants(root: MoveNode) -> List[Variant]:
    """
    Returns one Variant per leaf, in depth-first order of the tree.

    Naming rules for a leaf:
    - its own variant name, if it has one;
    - otherwise the nearest named ancestor's name, and in `full_name` that
      name followed by the unnamed siblings taken on the way down from
      every branch point, e.g. "Italian (3. ...Nf6)";
    - otherwise "Variant N", numbered across the whole tree in traversal order.
    """
    variants: List[Variant] = []
    anonymous_counter = [0]  # mutable counter shared across recursion

    def traverse(
        node: MoveNode,
        path: List[MoveNode],
        inherited_name: Optional[str],
        different_nodes: List[MoveNode],
    ):
        if not node.children:
            suffix = _different_nodes_string(different_nodes)
            if node.variant_name:
                name = full_name = node.variant_name
                different_moves = ""
            elif inherited_name:
                name = inherited_name
                full_name = " ".join(part for part in (inherited_name, suffix) if part)
                different_moves = suffix
            else:
                anonymous_counter[0] += 1
                name = full_name = f"Variant {anonymous_counter[0]}"
                different_moves = ""
            variants.append(Variant(
                moves=tuple(path + [node]),
                name=name,
                full_name=full_name,
                different_moves=different_moves,
            ))
            return

        is_branch_point = len(node.children) > 1
        for child in node.children:
            child_name = child.variant_name or inherited_name
            current_different = [] if child.variant_name else different_nodes
            if is_branch_point and not child.variant_name:
                child_different = current_different + [child]
            else:
                child_different = current_different
            traverse(child, path + [node], child_name, child_different)

    for child in root.children:
        traverse(child, [], child.variant_name, [])
    return variants
