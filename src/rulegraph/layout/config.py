"""LayoutConfig and Orientation for the tree layout engine.

LayoutConfig is a frozen (immutable) dataclass holding the sizing constants.
Orientation selects whether the tree grows downwards (vertical) or to the
right (horizontal, the transpose of vertical).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class Orientation(StrEnum):
    """Direction in which the tree grows.

    - VERTICAL:   root at the top, children below.
    - HORIZONTAL: root at the left, children to the right.
    """

    VERTICAL = auto()
    HORIZONTAL = auto()


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Immutable sizing constants for the layout engine.

    Attributes:
        node_height: Fixed height of every node box.
        horizontal_spacing: Gap between sibling subtrees (vertical layout) or
            between levels (horizontal layout). Also the right canvas margin.
        vertical_spacing: Gap between levels (vertical layout) or between
            sibling subtrees (horizontal layout). Also the bottom canvas margin.
        char_width: Estimated width of one label character.
        node_padding: Extra width for icons and the expand control.
        min_node_width: Lower clamp for a node's width.
        max_node_width: Upper clamp for a node's width.
        orientation: Direction in which the tree grows.
    """

    node_height: float = 44.0
    horizontal_spacing: float = 24.0
    vertical_spacing: float = 50.0
    char_width: float = 8.0
    node_padding: float = 60.0
    min_node_width: float = 120.0
    max_node_width: float = 400.0
    orientation: Orientation = Orientation.VERTICAL

    def __post_init__(self) -> None:
        if self.node_height <= 0.0:
            msg = f"node_height must be > 0, got {self.node_height}"
            raise ValueError(msg)
        if self.horizontal_spacing < 0.0 or self.vertical_spacing < 0.0:
            msg = (
                "spacing must be >= 0, got "
                f"horizontal={self.horizontal_spacing}, vertical={self.vertical_spacing}"
            )
            raise ValueError(msg)
        if self.char_width < 0.0 or self.node_padding < 0.0:
            msg = (
                "char_width and node_padding must be >= 0, got "
                f"{self.char_width}, {self.node_padding}"
            )
            raise ValueError(msg)
        if not 0.0 < self.min_node_width <= self.max_node_width:
            msg = (
                "need 0 < min_node_width <= max_node_width, got "
                f"{self.min_node_width}, {self.max_node_width}"
            )
            raise ValueError(msg)
        if not isinstance(self.orientation, Orientation):
            object.__setattr__(self, "orientation", Orientation(self.orientation))

    def node_width(self, label: str) -> float:
        """Width of a node box: proportional to label length, clamped."""
        text_width = len(label) * self.char_width + self.node_padding
        return min(max(text_width, self.min_node_width), self.max_node_width)
