"""Layout subpackage: pixel geometry for rendering trees.

Re-exports:
- LayoutConfig / Orientation: immutable sizing constants and growth direction
- LayoutEngine / layout_tree: centered tree layout with S-curve edges
- TreeLayout / Edge: layout output
- fit_zoom: zoom factor fitting a layout into a viewport
"""

from rulegraph.layout.config import LayoutConfig, Orientation
from rulegraph.layout.engine import LayoutEngine, fit_zoom, layout_tree
from rulegraph.layout.result import Edge, TreeLayout

__all__ = [
    "Edge",
    "LayoutConfig",
    "LayoutEngine",
    "Orientation",
    "TreeLayout",
    "fit_zoom",
    "layout_tree",
]
