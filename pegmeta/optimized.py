"""Expressions of optimized rules and their conversion from the plain AST."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Callable, ClassVar, Iterable, Iterator, Optional

from . import ast
from .ast import RuleType


class OptimizedExpr:
    """Base class of every optimized expression."""

    _children: ClassVar[tuple[str, ...]] = ()

    def _child_nodes(self) -> tuple["OptimizedExpr", ...]:
        return tuple(getattr(self, name) for name in self._children)

    def _with_children(self, children: list["OptimizedExpr"]) -> "OptimizedExpr":
        return replace(self, **dict(zip(self._children, children)))

    def iter_top_down(self) -> Iterator["OptimizedExpr"]:
        """Yield this expression and its sub-expressions in pre-order, left first."""
        stack: list[OptimizedExpr] = [self]
        while stack:
            expr = stack.pop()
            yield expr
            stack.extend(reversed(expr._child_nodes()))

    def map_top_down(self, f: Callable[["OptimizedExpr"], "OptimizedExpr"]) -> "OptimizedExpr":
        """Apply ``f`` to a node, then descend into the children of its result."""
        expr = f(self)
        children = expr._child_nodes()
        if not children:
            return expr
        return expr._with_children([child.map_top_down(f) for child in children])

    def map_bottom_up(self, f: Callable[["OptimizedExpr"], "OptimizedExpr"]) -> "OptimizedExpr":
        """Map the children first, then apply ``f`` to the rebuilt node."""
        children = self._child_nodes()
        node = self._with_children([c.map_bottom_up(f) for c in children]) if children else self
        return f(node)


@dataclass(frozen=True)
class Str(OptimizedExpr):
    """Matches an exact string."""

    value: str


@dataclass(frozen=True)
class Insens(OptimizedExpr):
    """Matches an exact string, ASCII case-insensitively."""

    value: str


@dataclass(frozen=True)
class Range(OptimizedExpr):
    """Matches one character between ``start`` and ``end``."""

    start: str
    end: str


@dataclass(frozen=True)
class Ident(OptimizedExpr):
    """Matches the rule with the given name."""

    name: str


@dataclass(frozen=True)
class PeekSlice(OptimizedExpr):
    """Matches a slice of the stack."""

    start: int
    end: Optional[int]


@dataclass(frozen=True)
class PosPred(OptimizedExpr):
    """Positive lookahead."""

    expr: OptimizedExpr
    _children = ("expr",)


@dataclass(frozen=True)
class NegPred(OptimizedExpr):
    """Negative lookahead."""

    expr: OptimizedExpr
    _children = ("expr",)


@dataclass(frozen=True)
class Seq(OptimizedExpr):
    """Matches ``lhs`` followed by ``rhs``."""

    lhs: OptimizedExpr
    rhs: OptimizedExpr
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Choice(OptimizedExpr):
    """Matches ``lhs`` or, failing that, ``rhs``."""

    lhs: OptimizedExpr
    rhs: OptimizedExpr
    _children = ("lhs", "rhs")


@dataclass(frozen=True)
class Opt(OptimizedExpr):
    """Optionally matches an expression."""

    expr: OptimizedExpr
    _children = ("expr",)


@dataclass(frozen=True)
class Rep(OptimizedExpr):
    """Matches an expression zero or more times."""

    expr: OptimizedExpr
    _children = ("expr",)


@dataclass(frozen=True)
class Skip(OptimizedExpr):
    """Consumes input until one of ``strings`` is found."""

    strings: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "strings", tuple(self.strings))


@dataclass(frozen=True)
class Push(OptimizedExpr):
    """Matches an expression and pushes the match onto the stack."""

    expr: OptimizedExpr
    _children = ("expr",)


@dataclass(frozen=True)
class RestoreOnErr(OptimizedExpr):
    """Restores the stack if the wrapped expression fails.

    Traversals treat it as a leaf and do not descend into it.
    """

    expr: OptimizedExpr


@dataclass(frozen=True)
class OptimizedRule:
    """A named rule whose expression has been optimized."""

    name: str
    ty: RuleType
    expr: OptimizedExpr


_LEAVES: dict[type, type] = {
    ast.Str: Str,
    ast.Insens: Insens,
    ast.Range: Range,
    ast.Ident: Ident,
    ast.PeekSlice: PeekSlice,
    ast.Skip: Skip,
}
_UNARIES: dict[type, type] = {
    ast.PosPred: PosPred,
    ast.NegPred: NegPred,
    ast.Opt: Opt,
    ast.Rep: Rep,
    ast.Push: Push,
}
_BINARIES: dict[type, type] = {ast.Seq: Seq, ast.Choice: Choice}


def to_optimized(expr: ast.Expr) -> OptimizedExpr:
    """Convert an AST expression; counted repetitions must already be unrolled."""
    kind = type(expr)
    if kind in _LEAVES:
        return _LEAVES[kind](**{f.name: getattr(expr, f.name) for f in fields(expr)})
    if kind in _UNARIES:
        return _UNARIES[kind](to_optimized(expr.expr))
    if kind in _BINARIES:
        return _BINARIES[kind](to_optimized(expr.lhs), to_optimized(expr.rhs))
    raise ValueError(f"no valid transformation of {kind.__name__} to an optimized expression")


def to_optimized_rule(rule: ast.Rule) -> OptimizedRule:
    """Convert an AST rule to an optimized rule."""
    return OptimizedRule(rule.name, rule.ty, to_optimized(rule.expr))


def to_hash_map(rules: Iterable[OptimizedRule]) -> dict[str, OptimizedExpr]:
    """Map rule names to their expressions."""
    return {rule.name: rule.expr for rule in rules}