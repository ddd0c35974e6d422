"""Parsed grammar rules whose expressions keep their source spans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Optional, TypeVar

from .ast import RuleType
from .grammar_error import Span

T = TypeVar("T")


class ParserExpr:
    """Base class of every parsed expression."""

    _children: ClassVar[tuple[str, ...]] = ()

    def _child_nodes(self) -> tuple["ParserNode", ...]:
        return tuple(getattr(self, name) for name in self._children)


@dataclass(frozen=True)
class ParserNode:
    """An expression together with the span of source it was parsed from."""

    expr: ParserExpr
    span: Span

    def filter_map_top_down(self, f: Callable[["ParserNode"], Optional[T]]) -> list[T]:
        """Apply ``f`` to every node in pre-order and keep the results that are not None."""
        result: list[T] = []
        stack: list[ParserNode] = [self]
        while stack:
            node = stack.pop()
            value = f(node)
            if value is not None:
                result.append(value)
            stack.extend(reversed(node.expr._child_nodes()))
        return result


@dataclass(frozen=True)
class Str(ParserExpr):
    """Matches an exact string."""

    value: str


@dataclass(frozen=True)
class Insens(ParserExpr):
    """Matches an exact string, ASCII case-insensitively."""

    value: str


@dataclass(frozen=True)
class Range(ParserExpr):
    """Matches one character between ``start`` and ``end``."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(ParserExpr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(ParserExpr):
    """Matches a slice of the stack."""

    start: int
    end: Optional[int]


@dataclass(frozen=True)
class PosPred(ParserExpr):
    """Positive lookahead."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class NegPred(ParserExpr):
    """Negative lookahead."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class Seq(ParserExpr):
    """Matches ``lhs`` followed by ``rhs``."""

    lhs: ParserNode
    rhs: ParserNode
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(ParserExpr):
    """Matches ``lhs`` or, failing that, ``rhs``."""

    lhs: ParserNode
    rhs: ParserNode
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(ParserExpr):
    """Optionally matches a node."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class Rep(ParserExpr):
    """Matches a node zero or more times."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class RepOnce(ParserExpr):
    """Matches a node one or more times."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class RepExact(ParserExpr):
    """Matches a node exactly ``count`` times."""

    node: ParserNode
    count: int
    _children = ("node",)


@dataclass(frozen=True)
class RepMin(ParserExpr):
    """Matches a node at least ``min`` times."""

    node: ParserNode
    min: int
    _children = ("node",)


@dataclass(frozen=True)
class RepMax(ParserExpr):
    """Matches a node at most ``max`` times."""

    node: ParserNode
    max: int
    _children = ("node",)


@dataclass(frozen=True)
class RepMinMax(ParserExpr):
    """Matches a node between ``min`` and ``max`` times."""

    node: ParserNode
    min: int
    max: int
    _children = ("node",)


@dataclass(frozen=True)
class Push(ParserExpr):
    """Matches a node and pushes the match onto the stack."""

    node: ParserNode
    _children = ("node",)


@dataclass(frozen=True)
class ParserRule:
    """A parsed rule with the span of its name."""

    name: str
    span: Span
    ty: RuleType
    node: ParserNode