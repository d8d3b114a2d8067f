"""Evaluator Protocol: the extension point for annotating trees with results.

Rule evaluation belongs to an external collaborator. Any object with a
conformant ``evaluate`` method passes ``isinstance`` checks, without
inheriting from a base class.

Example::

    from rulegraph.protocols import Evaluator

    class Truthy:
        def evaluate(self, rule, data):
            return bool(rule)

    isinstance(Truthy(), Evaluator)  # True
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["Evaluator"]


@runtime_checkable
class Evaluator(Protocol):
    """Structural protocol for rule evaluators.

    ``evaluate`` receives a JSON-shaped rule (as produced by ``json.loads``)
    and the data object it is evaluated against, and returns the result.
    """

    def evaluate(self, rule: Any, data: Any) -> Any: ...
