"""RenderNode dataclass and NodeKind StrEnum for the rendering tree.

The rendering tree is what the tree builder compiles a rule expression into
and what the layout engine positions. Nodes are immutable: expansion toggles,
layout geometry and evaluation results all produce new nodes via
``dataclasses.replace``, so untouched subtrees can be shared between the old
and the new tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from rulegraph.rules import Rule


class NodeKind(StrEnum):
    """Enumeration of the six rendering-tree node kinds.

    - OPERATOR      -> "operator"      : an operation, or a decision (if/ternary)
    - VARIABLE      -> "variable"      : a ``var`` data reference
    - LITERAL       -> "literal"       : a primitive value or ``{}``
    - ARRAY_LITERAL -> "array_literal" : a literal array
    - TRUE_BRANCH   -> "true_branch"   : leaf result of a decision's "then" side
    - FALSE_BRANCH  -> "false_branch"  : leaf result of a decision's "else" side
    """

    OPERATOR = auto()
    VARIABLE = auto()
    LITERAL = auto()
    ARRAY_LITERAL = auto()
    TRUE_BRANCH = auto()
    FALSE_BRANCH = auto()


@dataclass(frozen=True, slots=True)
class RenderNode:
    """A node in the rendering tree.

    Attributes:
        id:        Identifier unique within one build pass.
        kind:      Which kind of node this is (see NodeKind).
        label:     Precomputed display string.
        raw_value: The rule fragment this node represents.
        operator:  Source operator name; None for plain literals and arrays.
        children:  Child nodes in argument order.
        expanded:  Whether the children are shown.
        parent_id: Id of the parent node, for lookup only. None at the root.
        depth:     Distance from the root.
        path:      Human-readable path segments (operator names, ``[i]``,
                   ``then``/``else``) from the root.
        leaf_kind: For branch leaves, the kind the value would otherwise have
                   (LITERAL, ARRAY_LITERAL or VARIABLE). None elsewhere.
        x, y, width, height: Geometry, None until the layout engine runs.
        highlighted, selected: UI flags owned by the rendering collaborator.
        evaluation_result: Value annotated by an external evaluator, if any.
    """

    id: str
    kind: NodeKind
    label: str
    raw_value: Rule
    operator: str | None = None
    children: tuple[RenderNode, ...] = ()
    expanded: bool = True
    parent_id: str | None = None
    depth: int = 0
    path: tuple[str, ...] = ()
    leaf_kind: NodeKind | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    highlighted: bool = False
    selected: bool = False
    evaluation_result: Any = None

    @property
    def is_branch(self) -> bool:
        return self.kind in (NodeKind.TRUE_BRANCH, NodeKind.FALSE_BRANCH)

    @property
    def is_leaf(self) -> bool:
        return not self.children
