"""Rule model: an explicit tagged union for JSON-shaped rule expressions.

A rule expression is a primitive (null, bool, number, string), a literal
array of rules, or an operation pairing one named operator with either a
single operand or an ordered list of operands.

``parse_rule`` converts the output of ``json.loads`` into this union exactly
once, so every downstream component matches on the variant class instead of
re-deriving the operator from dict key order:

- ``{"var": "age"}``            -> ``Operation("var", String("age"))``
- ``{">=": [{"var": "age"}, 18]}`` -> ``Operation(">=", (Operation(...), Number(18)))``
- ``[1, 2]``                    -> ``List((Number(1), Number(2)))``

Objects with several keys are accepted; only the first key is interpreted
and the remaining key names are kept in ``Operation.extra_keys``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeAlias

__all__ = [
    "ARITHMETIC_OPERATORS",
    "COMPARISON_OPERATORS",
    "CONDITIONAL_OPERATORS",
    "ITERATION_OPERATORS",
    "LOGICAL_OPERATORS",
    "MAX_RULE_DEPTH",
    "PRIMITIVE_TYPES",
    "TRUNCATED",
    "TRUNCATED_OPERATOR",
    "Bool",
    "EmptyObject",
    "List",
    "Null",
    "Number",
    "Operation",
    "Rule",
    "String",
    "as_rule",
    "is_conditional",
    "is_primitive",
    "is_simple",
    "is_var",
    "limit_depth",
    "parse_rule",
]

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = frozenset({"==", "===", "!=", "!==", ">", ">=", "<", "<="})
ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/", "%"})
ITERATION_OPERATORS = frozenset({"map", "filter", "reduce", "all", "some", "none"})
CONDITIONAL_OPERATORS = frozenset({"if", "?:"})
LOGICAL_OPERATORS = frozenset({"and", "or"})


@dataclass(frozen=True, slots=True)
class Null:
    """JSON ``null``."""

    def to_json(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool

    def to_json(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class Number:
    """A JSON number. ``int`` and ``float`` are kept as parsed."""

    value: int | float

    def to_json(self) -> int | float:
        return self.value


@dataclass(frozen=True, slots=True)
class String:
    value: str

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class List:
    """A literal array. Distinct from an operation's argument list."""

    items: tuple[Rule, ...] = ()

    def to_json(self) -> list[Any]:
        return _to_json(self)


@dataclass(frozen=True, slots=True)
class EmptyObject:
    """The degenerate ``{}`` value: an object carrying no operator."""

    def to_json(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True, slots=True)
class Operation:
    """A named operator applied to one operand or an ordered operand list.

    Attributes:
        operator:   The operator name (first key of the source object).
        operands:   A single ``Rule`` when the source value was not an array,
                    otherwise a tuple of ``Rule`` (one per argument).
        extra_keys: Names of any further keys on the source object. They are
                    ignored by every consumer.
    """

    operator: str
    operands: Rule | tuple[Rule, ...]
    extra_keys: tuple[str, ...] = ()

    @property
    def has_arg_list(self) -> bool:
        return isinstance(self.operands, tuple)

    @property
    def args(self) -> tuple[Rule, ...]:
        """Operands as a tuple; a single operand becomes a 1-tuple."""
        if isinstance(self.operands, tuple):
            return self.operands
        return (self.operands,)

    def to_json(self) -> dict[str, Any]:
        return _to_json(self)


Rule: TypeAlias = Null | Bool | Number | String | List | EmptyObject | Operation

PRIMITIVE_TYPES = (Null, Bool, Number, String, EmptyObject)
_RULE_TYPES = (*PRIMITIVE_TYPES, List, Operation)

# Operator of the placeholder standing in for subtrees cut by ``limit_depth``
TRUNCATED_OPERATOR = "..."
TRUNCATED = Operation(operator=TRUNCATED_OPERATOR, operands=())

# Nesting depth kept by the transforms; deeper containers become ``TRUNCATED``
MAX_RULE_DEPTH = 64


@dataclass(slots=True)
class _Pending:
    """A container whose ``count`` children are on the results stack.

    ``operator`` is None for a literal list.
    """

    operator: str | None
    count: int
    arg_list: bool = True
    extra_keys: tuple[str, ...] = ()

    def finish(self, results: list[Any]) -> Any:
        split = len(results) - self.count
        args = tuple(results[split:])
        del results[split:]
        if self.operator is None:
            return List(args)
        if self.arg_list:
            return Operation(operator=self.operator, operands=args, extra_keys=self.extra_keys)
        return Operation(operator=self.operator, operands=args[0], extra_keys=self.extra_keys)


def parse_rule(value: Any) -> Rule:
    """Convert a JSON-shaped Python value into a ``Rule``.

    The walk keeps its own stack, so arbitrarily deep input is accepted.

    Args:
        value: Any value produced by ``json.loads`` (dict, list, str, int,
               float, bool, None). Tuples are accepted as arrays.

    Returns:
        The equivalent ``Rule`` variant.

    Raises:
        TypeError: If ``value`` (or anything nested in it) is not a JSON type.
    """
    results: list[Rule] = []
    work: list[Any] = [value]
    while work:
        item = work.pop()
        if isinstance(item, _Pending):
            results.append(item.finish(results))
            continue

        # bool MUST be checked before int: bool subclasses int in Python
        if isinstance(item, bool):
            results.append(Bool(item))
        elif item is None:
            results.append(Null())
        elif isinstance(item, (int, float)):
            results.append(Number(item))
        elif isinstance(item, str):
            results.append(String(item))
        elif isinstance(item, (list, tuple)):
            work.append(_Pending(operator=None, count=len(item)))
            work.extend(reversed(item))
        elif isinstance(item, dict):
            if not item:
                results.append(EmptyObject())
                continue
            operator, raw, extra_keys = _split_object(item)
            if isinstance(raw, (list, tuple)):
                work.append(_Pending(operator, len(raw), True, extra_keys))
                work.extend(reversed(raw))
            else:
                work.append(_Pending(operator, 1, False, extra_keys))
                work.append(raw)
        else:
            raise TypeError(f"Unsupported rule value type: {type(item)!r}")
    return results[0]


def _split_object(obj: dict[str, Any]) -> tuple[str, Any, tuple[str, ...]]:
    keys = list(obj)
    operator = str(keys[0])
    extra_keys = tuple(str(k) for k in keys[1:])
    if extra_keys:
        logger.debug(
            "Operator %r: ignoring additional keys %s", operator, ", ".join(extra_keys)
        )
    return operator, obj[keys[0]], extra_keys


def _children(rule: Rule) -> tuple[Rule, ...]:
    if isinstance(rule, List):
        return rule.items
    if isinstance(rule, Operation):
        return rule.args
    return ()


def _to_json(rule: Rule) -> Any:
    """Iterative inverse of ``parse_rule``."""
    results: list[Any] = []
    work: list[Any] = [rule]
    while work:
        item = work.pop()
        if isinstance(item, _Pending):
            split = len(results) - item.count
            args = results[split:]
            del results[split:]
            if item.operator is None:
                results.append(args)
            elif item.arg_list:
                results.append({item.operator: args})
            else:
                results.append({item.operator: args[0]})
        elif isinstance(item, List):
            work.append(_Pending(operator=None, count=len(item.items)))
            work.extend(reversed(item.items))
        elif isinstance(item, Operation):
            work.append(_Pending(item.operator, len(item.args), item.has_arg_list))
            work.extend(reversed(item.args))
        else:
            results.append(item.to_json())
    return results[0]


def limit_depth(rule: Rule, max_depth: int = MAX_RULE_DEPTH) -> Rule:
    """Return ``rule`` with every list or operation nested ``max_depth`` levels
    deep (or deeper) replaced by ``TRUNCATED``.

    The root is at depth 0. ``rule`` itself is returned when nothing needs
    cutting, so shallow rules keep their identity.
    """
    stack: list[tuple[Rule, int]] = [(rule, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, (List, Operation)) and depth >= max_depth:
            break
        stack.extend((child, depth + 1) for child in _children(node))
    else:
        return rule

    logger.debug("Rule nested deeper than %d levels: cutting deeper subtrees", max_depth)
    results: list[Rule] = []
    work: list[Any] = [(rule, 0)]
    while work:
        item = work.pop()
        if isinstance(item, _Pending):
            results.append(item.finish(results))
            continue
        node, depth = item
        if isinstance(node, PRIMITIVE_TYPES):
            results.append(node)
        elif depth >= max_depth:
            results.append(TRUNCATED)
        elif isinstance(node, List):
            work.append(_Pending(operator=None, count=len(node.items)))
            work.extend((child, depth + 1) for child in reversed(node.items))
        else:
            work.append(_Pending(node.operator, len(node.args), node.has_arg_list, node.extra_keys))
            work.extend((child, depth + 1) for child in reversed(node.args))
    return results[0]


def as_rule(value: Any) -> Rule:
    """Return ``value`` unchanged when it is already a ``Rule``, else parse it."""
    if isinstance(value, _RULE_TYPES):
        return value
    return parse_rule(value)


def is_primitive(rule: Rule) -> bool:
    """True for null, booleans, numbers, strings and the empty object."""
    return isinstance(rule, PRIMITIVE_TYPES)


def is_var(rule: Rule) -> bool:
    return isinstance(rule, Operation) and rule.operator == "var"


def is_conditional(rule: Rule) -> bool:
    return isinstance(rule, Operation) and rule.operator in CONDITIONAL_OPERATORS


def is_simple(rule: Rule) -> bool:
    """True for values that read fine inline: primitives and bare ``var``."""
    return is_primitive(rule) or is_var(rule)
