"""Tree subpackage: rule expression -> rendering tree.

Re-exports the public API for the tree module:
- RenderNode: immutable dataclass representing a node in the rendering tree
- NodeKind: StrEnum of the six node kinds
- TreeBuilder: compiles a rule expression into a RenderNode tree
- toggle_expansion / expand_all / collapse_all: copy-on-write expansion changes
- flatten_tree / find_node / path_to_node / visible_nodes: lookups
"""

from rulegraph.tree.builder import TreeBuilder
from rulegraph.tree.nodes import NodeKind, RenderNode
from rulegraph.tree.ops import (
    collapse_all,
    expand_all,
    find_node,
    flatten_tree,
    iter_nodes,
    map_tree,
    path_to_node,
    toggle_expansion,
    visible_nodes,
)

__all__ = [
    "NodeKind",
    "RenderNode",
    "TreeBuilder",
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
