from __future__ import annotations

from typing import Optional, Tuple, Union

import msgspec


class NodeBase(msgspec.Struct, frozen=True):
    pass


class Text(NodeBase, frozen=True, tag="text"):
    literal: str


class Reference(NodeBase, frozen=True, tag="reference"):
    """Dotted path into the context, e.g. `$user.name` -> ("user", "name")."""

    path: Tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.path)

    @property
    def is_simple(self) -> bool:
        return len(self.path) == 1


class EqualsOperator(NodeBase, frozen=True, tag="equals"):
    """`left == right` condition. Can be tested, never rendered."""

    left: "Node"
    right: "Node"


class IfDirective(NodeBase, frozen=True, tag="if"):
    """`{#if}` / `{#elseif}` / `{#else}` chain.

    `branches` pairs with `conditions` by index; one trailing extra branch
    is the else branch.
    """

    conditions: Tuple["Node", ...]
    branches: Tuple["Node", ...]

    @property
    def is_well_formed(self) -> bool:
        n = len(self.conditions)
        return n > 0 and len(self.branches) in (n, n + 1)

    @property
    def else_branch(self) -> Optional["Node"]:
        if len(self.branches) == len(self.conditions) + 1:
            return self.branches[-1]
        return None


class JoinDirective(NodeBase, frozen=True, tag="join"):
    """`{#join $it in $coll with 'sep'}body{#end}`."""

    iterator: str
    collection: "Node"
    body: "Node"
    separator: Optional["Node"] = None


class Sequence(NodeBase, frozen=True, tag="sequence"):
    children: Tuple["Node", ...] = ()


Node = Union[Text, Reference, EqualsOperator, IfDirective, JoinDirective, Sequence]
