"""
Forest reconstruction from the flat item list.

Pure derivation with no state of its own: group items by parent, order
each group folders-first then oldest-first, and materialize every subtree
eagerly. Recompute whenever the flat list changes.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Set

from ainotes.models.item import Item, TreeNode

ROOT_KEY = "root"


def sort_siblings(items: Iterable[Item]) -> List[Item]:
    """Folders before notes/ai-notes, then by creation time ascending.

    Equal timestamps fall back to id, so the order never depends on input order.
    """
    return sorted(items, key=lambda item: (not item.is_folder, item.created_at, item.id))


def group_by_parent(items: Iterable[Item]) -> Dict[str, List[Item]]:
    """Adjacency map keyed by parent id; root items under ROOT_KEY."""
    groups: Dict[str, List[Item]] = defaultdict(list)
    for item in items:
        groups[item.parent_id or ROOT_KEY].append(item)
    return dict(groups)


def build_tree(items: Iterable[Item]) -> List[TreeNode]:
    """Build the nested forest of root items.

    Items whose parent is not in the list are unreachable and omitted.
    A revisited id is not expanded again, so corrupt input cannot recurse
    forever.
    """
    groups = group_by_parent(items)
    visited: Set[str] = set()

    def build(parent_key: str) -> List[TreeNode]:
        nodes = []
        for child in sort_siblings(groups.get(parent_key, [])):
            if child.id in visited:
                continue
            visited.add(child.id)
            nodes.append(TreeNode(item=child, children=build(child.id)))
        return nodes

    return build(ROOT_KEY)

