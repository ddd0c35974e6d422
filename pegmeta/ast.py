"""Abstract syntax tree of a grammar: rules and their expressions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Callable, ClassVar, Iterator, Optional


class RuleType(enum.Enum):
    """How a rule produces tokens and handles implicit whitespace."""

    NORMAL = "normal"
    SILENT = "silent"
    ATOMIC = "atomic"
    COMPOUND_ATOMIC = "compound_atomic"
    NON_ATOMIC = "non_atomic"


class Expr:
    """Base class of every grammar expression."""

    _children: ClassVar[tuple[str, ...]] = ()

    def _child_nodes(self) -> tuple["Expr", ...]:
        return tuple(getattr(self, name) for name in self._children)

    def _with_children(self, children: list["Expr"]) -> "Expr":
        return replace(self, **dict(zip(self._children, children)))

    def iter_top_down(self) -> Iterator["Expr"]:
        """Yield this expression and all sub-expressions in pre-order, left first."""
        stack: list[Expr] = [self]
        while stack:
            expr = stack.pop()
            yield expr
            stack.extend(reversed(expr._child_nodes()))

    def map_top_down(self, f: Callable[["Expr"], "Expr"]) -> "Expr":
        """Apply ``f`` to a node, then descend into the children of its result."""
        expr = f(self)
        children = expr._child_nodes()
        if not children:
            return expr
        return expr._with_children([child.map_top_down(f) for child in children])

    def map_bottom_up(self, f: Callable[["Expr"], "Expr"]) -> "Expr":
        """Map the children first, then apply ``f`` to the rebuilt node."""
        children = self._child_nodes()
        if children:
            node = self._with_children([child.map_bottom_up(f) for child in children])
        else:
            node = self
        return f(node)


@dataclass(frozen=True)
class Str(Expr):
    """Matches an exact string."""

    value: str


@dataclass(frozen=True)
class Insens(Expr):
    """Matches an exact string, ASCII case-insensitively."""

    value: str


@dataclass(frozen=True)
class Range(Expr):
    """Matches one character between ``start`` and ``end``."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(Expr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(Expr):
    """Matches a slice of the stack, e.g. ``PEEK[..]``."""

    start: int
    end: Optional[int]


@dataclass(frozen=True)
class PosPred(Expr):
    """Positive lookahead."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class NegPred(Expr):
    """Negative lookahead."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class Seq(Expr):
    """Matches ``lhs`` followed by ``rhs``."""

    lhs: Expr
    rhs: Expr
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(Expr):
    """Matches ``lhs`` or, failing that, ``rhs``."""

    lhs: Expr
    rhs: Expr
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(Expr):
    """Optionally matches an expression."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class Rep(Expr):
    """Matches an expression zero or more times."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class RepOnce(Expr):
    """Matches an expression one or more times."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class RepExact(Expr):
    """Matches an expression exactly ``count`` times."""

    expr: Expr
    count: int
    _children = ("expr",)


@dataclass(frozen=True)
class RepMin(Expr):
    """Matches an expression at least ``min`` times."""

    expr: Expr
    min: int
    _children = ("expr",)


@dataclass(frozen=True)
class RepMax(Expr):
    """Matches an expression at most ``max`` times."""

    expr: Expr
    max: int
    _children = ("expr",)


@dataclass(frozen=True)
class RepMinMax(Expr):
    """Matches an expression between ``min`` and ``max`` times."""

    expr: Expr
    min: int
    max: int
    _children = ("expr",)


@dataclass(frozen=True)
class Skip(Expr):
    """Consumes input until one of ``strings`` is found."""

    strings: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "strings", tuple(self.strings))


@dataclass(frozen=True)
class Push(Expr):
    """Matches an expression and pushes the match onto the stack."""

    expr: Expr
    _children = ("expr",)


@dataclass(frozen=True)
class Rule:
    """A named grammar rule."""

    name: str
    ty: RuleType
    expr: Expr