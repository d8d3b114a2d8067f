"""FlowchartOptions plus the FlowOrientation and Theme enums.

FlowchartOptions is a frozen (immutable) dataclass. ``mermaid_config`` returns
the renderer initialisation settings for a theme.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

__all__ = ["FlowOrientation", "FlowchartOptions", "Theme", "mermaid_config"]


class FlowOrientation(StrEnum):
    """Flowchart direction keywords.

    - TD: top-down
    - TB: top to bottom (same as TD)
    - LR: left to right
    - RL: right to left
    """

    TD = "TD"
    TB = "TB"
    LR = "LR"
    RL = "RL"


class Theme(StrEnum):
    DEFAULT = "default"
    DARK = "dark"
    FOREST = "forest"
    NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class FlowchartOptions:
    """Immutable options for the flowchart emitter.

    Attributes:
        orientation: Direction keyword written in the document header.
        include_values: When True, literal arrays get one edge per element.
        theme: When set, an init directive selecting the theme is written
            before the header.
        max_label_length: Free text in node labels is truncated to this many
            characters before escaping.
    """

    orientation: FlowOrientation = FlowOrientation.TD
    include_values: bool = True
    theme: Theme | None = None
    max_label_length: int = 50

    def __post_init__(self) -> None:
        if self.max_label_length <= 0:
            msg = f"max_label_length must be > 0, got {self.max_label_length}"
            raise ValueError(msg)
        if not isinstance(self.orientation, FlowOrientation):
            object.__setattr__(self, "orientation", FlowOrientation(self.orientation))
        if self.theme is not None and not isinstance(self.theme, Theme):
            object.__setattr__(self, "theme", Theme(self.theme))


def mermaid_config(theme: Theme | str = Theme.DEFAULT) -> dict[str, Any]:
    """Initialisation settings for the diagram renderer.

    Unknown theme names fall back to the default theme.
    """
    try:
        selected = Theme(theme)
    except ValueError:
        selected = Theme.DEFAULT
    return {"theme": selected.value}
