"""Label formatting: rule expression -> short, deterministic inline string.

``format_label`` is total: every ``Rule`` variant has a textual form and the
function never raises. Both the tree builder and the flowchart emitter rely on
it returning the same string for the same input regardless of call order.

Examples::

    format_label(parse_rule({">=": [{"var": "age"}, 18]}))   # '$age >= 18'
    format_label(parse_rule({"and": ["adult", {"!!": [{"var": "x"}]}]}))
    # '"adult" AND BOOL $x'
    format_label(parse_rule({"map": [{"var": "items"}, {"var": ""}]}))  # 'MAP(...)'

``LabelFormatter`` wraps the function with a per-instance LRU cache.
"""

from __future__ import annotations

import threading

from cachetools import LRUCache, cached

from rulegraph.rules import (
    ARITHMETIC_OPERATORS,
    COMPARISON_OPERATORS,
    ITERATION_OPERATORS,
    TRUNCATED_OPERATOR,
    Bool,
    EmptyObject,
    List,
    Null,
    Number,
    Operation,
    Rule,
    String,
)

__all__ = ["ITEM_SENTINEL", "LabelFormatter", "format_label", "format_number"]

# Label of a bare ``var`` with an empty path (the current element of an iteration)
ITEM_SENTINEL = "(item)"

# Lists longer than this are summarised even in non-compact mode
_MAX_INLINE_ITEMS = 3

# Operands nested deeper than this inside one label collapse to "..."
_MAX_LABEL_DEPTH = 16


def format_number(value: int | float) -> str:
    """Render a number canonically: integral floats drop the trailing ``.0``.

    Floats at or beyond 1e21 keep exponent notation (``1e+300``).
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _items_summary(count: int) -> str:
    return f"[{count} items]"


def format_label(rule: Rule, compact: bool = False) -> str:
    """Return the inline display label for ``rule``.

    Args:
        rule:    Any ``Rule`` variant.
        compact: Summarise literal lists as ``[N items]`` regardless of length.
                 Nested operands are always formatted compactly.

    Returns:
        A non-empty string.
    """
    return _label(rule, compact, 0)


def _label(rule: Rule, compact: bool, depth: int) -> str:
    if depth > _MAX_LABEL_DEPTH:
        return TRUNCATED_OPERATOR
    if isinstance(rule, Null):
        return "null"
    if isinstance(rule, String):
        return f'"{rule.value}"'
    if isinstance(rule, Bool):
        return "true" if rule.value else "false"
    if isinstance(rule, Number):
        return format_number(rule.value)
    if isinstance(rule, EmptyObject):
        return "{}"
    if isinstance(rule, List):
        if compact or len(rule.items) > _MAX_INLINE_ITEMS:
            return _items_summary(len(rule.items))
        return "[" + ", ".join(_label(item, True, depth + 1) for item in rule.items) + "]"
    return _format_operation(rule, depth)


def _format_operation(op: Operation, depth: int) -> str:
    operator = op.operator
    args = op.args

    def operand(arg: Rule) -> str:
        return _label(arg, True, depth + 1)

    if operator == TRUNCATED_OPERATOR:
        return TRUNCATED_OPERATOR

    if operator == "var":
        return _format_var(op, depth)

    if operator in COMPARISON_OPERATORS and op.has_arg_list and len(args) >= 2:
        left = operand(args[0])
        right = operand(args[1])
        return f"{left} {operator} {right}"

    if operator in ("and", "or") and op.has_arg_list and args:
        joiner = " AND " if operator == "and" else " OR "
        return joiner.join(operand(arg) for arg in args)

    if operator in ("!", "!!"):
        prefix = "NOT " if operator == "!" else "BOOL "
        return prefix + (operand(args[0]) if args else "?")

    if operator == "in" and op.has_arg_list and len(args) >= 2:
        needle = operand(args[0])
        haystack = args[1]
        # Haystacks are usually long lookup tables: never inline them
        if isinstance(haystack, List):
            haystack_label = _items_summary(len(haystack.items))
        else:
            haystack_label = operand(haystack)
        return f"{needle} in {haystack_label}"

    if operator in ARITHMETIC_OPERATORS and op.has_arg_list and args:
        return f" {operator} ".join(operand(arg) for arg in args)

    if operator in ITERATION_OPERATORS:
        return f"{operator.upper()}(...)"

    return f"{operator}(...)"


def _format_var(op: Operation, depth: int) -> str:
    path = op.args[0] if op.args else Null()
    if isinstance(path, String):
        return ITEM_SENTINEL if path.value == "" else f"${path.value}"
    if isinstance(path, Number):
        return f"${format_number(path.value)}"
    if isinstance(path, Null):
        return ITEM_SENTINEL
    return _label(path, True, depth + 1)


class LabelFormatter:
    """LRU-backed caching proxy around ``format_label``.

    Each instance owns its own ``LRUCache``; two formatters never share
    entries. The cache is guarded by a lock, so one formatter can serve
    several threads. Caching does not affect results: ``format_label`` is
    pure, so a cached label is always the label that would have been
    computed.

    Args:
        max_size: Maximum number of ``(rule, compact)`` entries held in
            memory. Least-recently-used entries are evicted silently.
    """

    def __init__(self, max_size: int = 1024) -> None:
        self._cache: LRUCache[tuple[Rule, bool], str] = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()
        self._format = cached(self._cache, lock=self._lock)(format_label)

    @property
    def max_size(self) -> int:
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        return int(self._cache.currsize)

    def format(self, rule: Rule, compact: bool = False) -> str:
        return self._format(rule, compact)
