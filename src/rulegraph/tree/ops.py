"""Traversal and expansion operations over RenderNode trees.

Expansion changes are copy-on-write: only the nodes on the path from the
root to a changed node are rebuilt, every other subtree is shared with the
input tree. The input tree is never modified, so a caller holding the old
root keeps seeing the old state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import replace

from rulegraph.tree.nodes import RenderNode

__all__ = [
    "collapse_all",
    "expand_all",
    "find_node",
    "flatten_tree",
    "iter_nodes",
    "map_tree",
    "path_to_node",
    "toggle_expansion",
    "visible_nodes",
]


def iter_nodes(root: RenderNode) -> Iterator[RenderNode]:
    """Yield every node in pre-order (parent before children, left to right)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten_tree(root: RenderNode) -> list[RenderNode]:
    return list(iter_nodes(root))


def visible_nodes(root: RenderNode) -> list[RenderNode]:
    """Pre-order nodes, not descending below collapsed nodes."""
    result: list[RenderNode] = []
    stack = [root]
    while stack:
        node = stack.pop()
        result.append(node)
        if node.expanded:
            stack.extend(reversed(node.children))
    return result


def find_node(root: RenderNode, node_id: str) -> RenderNode | None:
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def path_to_node(root: RenderNode, node_id: str) -> list[RenderNode]:
    """Return the nodes from ``root`` down to ``node_id``; empty when absent."""
    if root.id == node_id:
        return [root]
    for child in root.children:
        sub_path = path_to_node(child, node_id)
        if sub_path:
            return [root, *sub_path]
    return []


def map_tree(root: RenderNode, fn: Callable[[RenderNode], RenderNode]) -> RenderNode:
    """Rebuild the tree bottom-up, applying ``fn`` to each node.

    ``fn`` receives the node with its children already mapped. Subtrees where
    nothing changed are returned as the original objects.
    """
    children = tuple(map_tree(child, fn) for child in root.children)
    if any(new is not old for new, old in zip(children, root.children, strict=True)):
        root = replace(root, children=children)
    return fn(root)


def toggle_expansion(root: RenderNode, node_id: str) -> RenderNode:
    """Return a tree where only ``node_id``'s ``expanded`` flag is flipped.

    Returns ``root`` itself when no node has that id.
    """
    path = path_to_node(root, node_id)
    if not path:
        return root

    target = path[-1]
    rebuilt = replace(target, expanded=not target.expanded)
    # Walk back up, replacing the one changed child at each level
    for parent, old_child in zip(reversed(path[:-1]), reversed(path[1:]), strict=True):
        children = tuple(rebuilt if c is old_child else c for c in parent.children)
        rebuilt = replace(parent, children=children)
    return rebuilt


def _set_expanded(node: RenderNode, expanded: bool) -> RenderNode:
    if node.expanded == expanded:
        return node
    return replace(node, expanded=expanded)


def expand_all(root: RenderNode) -> RenderNode:
    return map_tree(root, lambda node: _set_expanded(node, True))


def collapse_all(root: RenderNode) -> RenderNode:
    """Collapse every node except the root, which stays expanded."""
    collapsed = map_tree(root, lambda node: _set_expanded(node, False))
    return _set_expanded(collapsed, True)
