"""Template parser.

The grammar is run by lark's LALR parser with an inline transformer, so
AST nodes are built while the text is scanned and no intermediate parse
tree is kept.
"""

from __future__ import annotations

import functools
import logging
from typing import NamedTuple

from lark import Lark, Transformer
from lark.exceptions import (
    LarkError,
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedToken,
    VisitError,
)

from tinytl.ast.node import (
    EqualsOperator,
    IfDirective,
    JoinDirective,
    Node,
    Reference,
    Sequence,
    Text,
)
from tinytl.errors import ParsingError

log = logging.getLogger(__name__)

GRAMMAR = r"""
start: sequence

sequence: _part*
_part: variable
     | if_directive
     | join_directive
     | text

variable: "{" reference "}"

if_directive: "{#if" _WS condition "}" sequence elseif_arm* else_arm? "{#end}"
elseif_arm: "{#elseif" _WS condition "}" sequence
else_arm: "{#else}" sequence

condition: value _WS? ("==" _WS? value _WS?)?

join_directive: "{#join" _WS reference _WS "in" _WS reference (_WS "with" _WS value)? "}" sequence "{#end}"

?value: reference
      | literal

reference: "$" IDENTIFIER ("." IDENTIFIER)*
literal: LITERAL
text: TEXT

IDENTIFIER: /[A-Za-z0-9_]+/
LITERAL: /'[^']+'/
TEXT: /[^{]+/
_WS: /\s+/
"""


class _Arm(NamedTuple):
    condition: Node
    body: Node


class _ElseArm(NamedTuple):
    body: Node


class _NodeBuilder(Transformer):
    """Semantic actions, one per grammar rule."""

    def start(self, children):
        return children[0]

    def sequence(self, children):
        return Sequence(tuple(children))

    def text(self, children):
        return Text(str(children[0]))

    def literal(self, children):
        return Text(str(children[0])[1:-1])

    def reference(self, children):
        return Reference(tuple(str(c) for c in children))

    def variable(self, children):
        return children[0]

    def condition(self, children):
        if len(children) == 1:
            return children[0]
        left, right = children
        return EqualsOperator(left, right)

    def elseif_arm(self, children):
        return _Arm(children[0], children[1])

    def else_arm(self, children):
        return _ElseArm(children[0])

    def if_directive(self, children):
        conditions = [children[0]]
        branches = [children[1]]
        for arm in children[2:]:
            if isinstance(arm, _Arm):
                conditions.append(arm.condition)
                branches.append(arm.body)
            else:
                branches.append(arm.body)

        node = IfDirective(tuple(conditions), tuple(branches))
        if not node.is_well_formed:
            raise ParsingError("malformed #if directive")
        return node

    def join_directive(self, children):
        if len(children) == 4:
            iterator, collection, separator, body = children
        else:
            iterator, collection, body = children
            separator = None

        for ref in (iterator, collection):
            if not isinstance(ref, Reference) or not ref.is_simple:
                raise ParsingError("malformed #join directive")

        return JoinDirective(
            iterator=iterator.path[0],
            collection=collection,
            body=body,
            separator=separator,
        )


@functools.cache
def get_lark() -> Lark:
    return Lark(GRAMMAR, parser="lalr", transformer=_NodeBuilder())


def _position(exc: LarkError) -> tuple[int | None, int | None]:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    if not isinstance(line, int) or line < 1:
        return None, None
    return line, column


def _describe(exc: LarkError) -> str:
    if isinstance(exc, UnexpectedEOF):
        return "unexpected end of template"
    if isinstance(exc, UnexpectedCharacters):
        return f"unexpected character {exc.char!r}"
    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "unexpected end of template"
        return f"unexpected {str(exc.token)!r}"
    return "parsing error"


class Parser:
    def parse(self, text: str) -> Sequence:
        """Parse template text into a `Sequence` root node.

        Raises:
            ParsingError: If the text does not match the grammar, or a
                directive is structurally invalid.
        """
        if not isinstance(text, str):
            raise TypeError("`text` must be a string containing a template")

        try:
            root = get_lark().parse(text)
        except VisitError as exc:
            if isinstance(exc.orig_exc, ParsingError):
                raise exc.orig_exc from None
            raise
        except LarkError as exc:
            line, column = _position(exc)
            raise ParsingError(_describe(exc), line, column) from exc

        log.debug(
            "Parsed template (%d chars, %d top-level nodes)",
            len(text),
            len(root.children),
        )
        return root


def parse(text: str) -> Sequence:
    """Parse template text with a default `Parser`."""
    return Parser().parse(text)
