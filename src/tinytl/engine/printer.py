"""Printer - converts a parsed template back to canonical template text."""

from typing import Optional

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


class Printer:
    """Renders AST nodes to template source.

    The output is not byte-identical to the parsed source (whitespace in
    directives is normalized) but parses back to an equivalent tree.
    Nesting is bounded by `config.max_depth`, as in the evaluator.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def debug(self, node: Node) -> str:
        """Render a node in its template form.

        Args:
            node: Any AST node. References print as `{$a.b}`, conditions
                as `$a == 'b'`.

        Returns:
            Template text.

        Raises:
            EvaluationError: If an #if directive is malformed or the tree
                is nested deeper than `max_depth`.
        """
        return self._debug(node, 0)

    def _enter(self, depth: int) -> int:
        depth += 1
        if depth > self.config.max_depth:
            raise EvaluationError("maximum nesting depth exceeded")
        return depth

    def _debug(self, node: Node, depth: int) -> str:
        depth = self._enter(depth)

        if isinstance(node, Text):
            return node.literal
        if isinstance(node, Sequence):
            return "".join(self._debug(child, depth) for child in node.children)
        if isinstance(node, Reference):
            return "{" + self._value(node) + "}"
        if isinstance(node, EqualsOperator):
            return self._condition(node)
        if isinstance(node, IfDirective):
            return self._if(node, depth)
        if isinstance(node, JoinDirective):
            return self._join(node, depth)
        raise TypeError(f"unknown node type: {type(node).__name__}")

    def _value(self, node: Node) -> str:
        if isinstance(node, Reference):
            return "$" + node.dotted
        if isinstance(node, Text):
            return f"'{node.literal}'"
        raise TypeError(f"{type(node).__name__} is not a value")

    def _condition(self, node: Node) -> str:
        if isinstance(node, EqualsOperator):
            return f"{self._value(node.left)} == {self._value(node.right)}"
        return self._value(node)

    def _if(self, node: IfDirective, depth: int) -> str:
        if not node.is_well_formed:
            raise EvaluationError("malformed #if directive")

        parts = []
        arms = zip(node.conditions, node.branches)
        for i, (condition, branch) in enumerate(arms):
            keyword = "#if" if i == 0 else "#elseif"
            parts.append(f"{{{keyword} {self._condition(condition)}}}")
            parts.append(self._debug(branch, depth))

        else_branch = node.else_branch
        if else_branch is not None:
            parts.append("{#else}")
            parts.append(self._debug(else_branch, depth))

        parts.append("{#end}")
        return "".join(parts)

    def _join(self, node: JoinDirective, depth: int) -> str:
        header = f"{{#join ${node.iterator} in {self._value(node.collection)}"
        if node.separator is not None:
            header += f" with {self._value(node.separator)}"
        return header + "}" + self._debug(node.body, depth) + "{#end}"


def debug(node: Node, config: Optional[EngineConfig] = None) -> str:
    """Canonical template text for `node`."""
    return Printer(config).debug(node)
