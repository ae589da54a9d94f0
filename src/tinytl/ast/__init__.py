"""tinytl AST - node types and the template parser."""

from tinytl.ast.node import (
    EqualsOperator,
    IfDirective,
    JoinDirective,
    Node,
    Reference,
    Sequence,
    Text,
)
from tinytl.ast.parser import Parser, parse

__all__ = [
    "EqualsOperator",
    "IfDirective",
    "JoinDirective",
    "Node",
    "Reference",
    "Sequence",
    "Text",
    "Parser",
    "parse",
]
