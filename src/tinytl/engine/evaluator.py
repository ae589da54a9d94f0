"""Evaluator - walks a parsed template and renders it against a context."""

from __future__ import annotations

import logging
from typing import Any, Optional

from tinytl.ast.node import (
    EqualsOperator,
    IfDirective,
    JoinDirective,
    Node,
    Reference,
    Sequence,
    Text,
)
from tinytl.config import EngineConfig
from tinytl.errors import EvaluationError
from tinytl.values import List, Map, Scalar, Value, resolve, to_context, truthy

log = logging.getLogger(__name__)


class Evaluator:
    """Renders AST nodes to text and tests conditions.

    The instance holds configuration only, so one evaluator can serve
    any number of concurrent calls.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def evaluate(self, node: Node, context: Any = None) -> str:
        """Render `node` against `context`.

        Args:
            node: Root node, usually the `Sequence` returned by the parser.
            context: A `Map` or plain dict data.

        Returns:
            The rendered text.

        Raises:
            EvaluationError: On missing intermediate parameters, type
                mismatches, unsupported node capabilities, or excessive
                nesting. No partial output is returned.
        """
        return self._evaluate(node, to_context(context), 0)

    def test(self, node: Node, context: Any = None) -> bool:
        """Evaluate `node` as an #if condition."""
        return self._test(node, to_context(context), 0)

    def _enter(self, depth: int) -> int:
        depth += 1
        if depth > self.config.max_depth:
            raise EvaluationError("maximum nesting depth exceeded")
        return depth

    def _evaluate(self, node: Node, context: Map, depth: int) -> str:
        depth = self._enter(depth)

        if isinstance(node, Text):
            return node.literal
        if isinstance(node, Sequence):
            return "".join(
                self._evaluate(child, context, depth) for child in node.children
            )
        if isinstance(node, Reference):
            return self._evaluate_reference(node, context)
        if isinstance(node, IfDirective):
            return self._evaluate_if(node, context, depth)
        if isinstance(node, JoinDirective):
            return self._evaluate_join(node, context, depth)
        if isinstance(node, EqualsOperator):
            raise EvaluationError("condition cannot be evaluated")
        raise EvaluationError(f"unknown node type: {type(node).__name__}")

    def _evaluate_reference(self, node: Reference, context: Map) -> str:
        scalar = resolve(context, node.path).as_scalar()
        if scalar is None:
            raise EvaluationError("wrong type")
        return scalar.value

    def _evaluate_if(self, node: IfDirective, context: Map, depth: int) -> str:
        if not node.is_well_formed:
            raise EvaluationError("malformed #if directive")

        for condition, branch in zip(node.conditions, node.branches):
            if self._test(condition, context, depth):
                return self._evaluate(branch, context, depth)

        else_branch = node.else_branch
        if else_branch is not None:
            return self._evaluate(else_branch, context, depth)
        return ""

    def _evaluate_join(self, node: JoinDirective, context: Map, depth: int) -> str:
        if not isinstance(node.collection, Reference):
            raise EvaluationError("malformed #join directive")

        collection = resolve(context, node.collection.path)
        items = collection.as_list()
        if items is None:
            if self.config.join_scalar == "verbatim":
                scalar = collection.as_scalar()
                return scalar.value if scalar is not None else ""
            items = List((collection,))

        parts: list[str] = []
        separator: Optional[str] = None
        for index, item in enumerate(items):
            if index > 0 and node.separator is not None:
                if separator is None:
                    separator = self._evaluate(node.separator, context, depth)
                parts.append(separator)
            shadow = context.bind(node.iterator, item)
            parts.append(self._evaluate(node.body, shadow, depth))

        log.debug("Joined %d item(s) over $%s", len(items), node.collection.dotted)
        return "".join(parts)

    def _test(self, node: Node, context: Map, depth: int) -> bool:
        depth = self._enter(depth)

        if isinstance(node, Reference):
            try:
                value: Value = resolve(context, node.path)
            except EvaluationError:
                return False
            return truthy(value)
        if isinstance(node, EqualsOperator):
            left = self._operand(node.left, context, depth)
            right = self._operand(node.right, context, depth)
            if left is None or right is None:
                return False
            return left == right
        if isinstance(node, Text):
            return truthy(Scalar(node.literal))
        if isinstance(node, IfDirective):
            raise EvaluationError("#if directive cannot be tested")
        if isinstance(node, JoinDirective):
            raise EvaluationError("#join directive cannot be tested")
        if isinstance(node, Sequence):
            raise EvaluationError("sequence cannot be tested")
        raise EvaluationError(f"unknown node type: {type(node).__name__}")

    def _operand(self, node: Node, context: Map, depth: int) -> Optional[str]:
        """Scalar text of an == operand, or None if its path does not resolve."""
        if isinstance(node, Reference):
            try:
                value = resolve(context, node.path)
            except EvaluationError:
                return None
            scalar = value.as_scalar()
            if scalar is None:
                raise EvaluationError("wrong type")
            return scalar.value
        return self._evaluate(node, context, depth)


def evaluate(
    node: Node, context: Any = None, config: Optional[EngineConfig] = None
) -> str:
    """Render `node` against `context` with a one-off `Evaluator`."""
    return Evaluator(config).evaluate(node, context)


def test(
    node: Node, context: Any = None, config: Optional[EngineConfig] = None
) -> bool:
    """Truthiness test of a condition node against `context`."""
    return Evaluator(config).test(node, context)
