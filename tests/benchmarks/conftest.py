"""Deterministic rule generators for performance benchmarks.

All generators produce fixed, reproducible rules. No random values.
Three tiers: a 10-branch decision chain, a 100-clause eligibility rule and
a 500-leaf nested arithmetic/logic rule.
"""

from __future__ import annotations

from typing import Any

import pytest


def generate_chain(num_branches: int) -> dict[str, Any]:
    """``if`` chain with ``num_branches`` threshold tests and a default."""
    args: list[Any] = []
    for i in range(num_branches):
        args.append({"<": [{"var": "score"}, i * 10]})
        args.append(f"band_{i}")
    args.append("top")
    return {"if": args}


def generate_eligibility(num_clauses: int) -> dict[str, Any]:
    """``and`` of ``num_clauses`` comparisons and membership tests."""
    clauses: list[Any] = []
    for i in range(num_clauses):
        if i % 2:
            clauses.append({"in": [{"var": f"field_{i}"}, [f"v{i}", f"w{i}", f"x{i}", f"y{i}"]]})
        else:
            clauses.append({">=": [{"var": f"field_{i}"}, i]})
    return {"if": [{"and": clauses}, "eligible", "ineligible"]}


def generate_nested(depth: int, fanout: int) -> Any:
    """Balanced tree of ``and``/``+`` operations with ``fanout`` operands."""
    if depth == 0:
        return {"var": "x"}
    operator = "and" if depth % 2 else "+"
    return {operator: [generate_nested(depth - 1, fanout) for _ in range(fanout)]}


@pytest.fixture
def rule_chain_10() -> dict[str, Any]:
    return generate_chain(10)


@pytest.fixture
def rule_eligibility_100() -> dict[str, Any]:
    return generate_eligibility(100)


@pytest.fixture
def rule_nested_500() -> Any:
    """8^3 = 512 leaves."""
    return generate_nested(3, 8)
