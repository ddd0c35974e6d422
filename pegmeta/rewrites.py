"""Structural rewrites of rules: rotation, skip detection and loop unrolling."""

from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import Optional

from .ast import (
    Choice,
    Expr,
    Ident,
    NegPred,
    Opt,
    Rep,
    RepExact,
    RepMax,
    RepMin,
    RepMinMax,
    RepOnce,
    Rule,
    RuleType,
    Seq,
    Skip,
    Str,
)


def _rotate_expr(expr: Expr) -> Expr:
    while True:
        if isinstance(expr, Seq) and isinstance(expr.lhs, Seq):
            expr = Seq(expr.lhs.lhs, Seq(expr.lhs.rhs, expr.rhs))
        elif isinstance(expr, Choice) and isinstance(expr.lhs, Choice):
            expr = Choice(expr.lhs.lhs, Choice(expr.lhs.rhs, expr.rhs))
        else:
            return expr


def rotate(rule: Rule) -> Rule:
    """Make sequences and choices right-associative."""
    return replace(rule, expr=rule.expr.map_top_down(_rotate_expr))


def _skip_choices(expr: Expr) -> Optional[Skip]:
    choices: list[str] = []
    while isinstance(expr, Choice):
        if not isinstance(expr.lhs, Str):
            return None
        choices.append(expr.lhs.value)
        expr = expr.rhs
    if isinstance(expr, Str):
        choices.append(expr.value)
        return Skip(choices)
    return None


def _skip_expr(expr: Expr) -> Expr:
    if (
        isinstance(expr, Rep)
        and isinstance(expr.expr, Seq)
        and isinstance(expr.expr.lhs, NegPred)
        and expr.expr.rhs == Ident("ANY")
    ):
        skipped = _skip_choices(expr.expr.lhs.expr)
        if skipped is not None:
            return skipped
    return expr


def skip(rule: Rule) -> Rule:
    """In atomic rules, turn ``(!("a" | "b") ~ ANY)*`` into a skip."""
    if rule.ty is not RuleType.ATOMIC:
        return rule
    return replace(rule, expr=rule.expr.map_top_down(_skip_expr))


def _chain(items: list[Expr]) -> Expr:
    if not items:
        raise ValueError("cannot unroll a repetition of zero expressions")
    return reduce(lambda rest, item: Seq(item, rest), reversed(items[:-1]), items[-1])


def _unroll_expr(expr: Expr) -> Expr:
    if isinstance(expr, RepOnce):
        return Seq(expr.expr, Rep(expr.expr))
    if isinstance(expr, RepExact):
        return _chain([expr.expr] * expr.count)
    if isinstance(expr, RepMin):
        return _chain([expr.expr] * expr.min + [Rep(expr.expr)])
    if isinstance(expr, RepMax):
        return _chain([Opt(expr.expr)] * expr.max)
    if isinstance(expr, RepMinMax):
        return _chain(
            [expr.expr if i <= expr.min else Opt(expr.expr) for i in range(1, expr.max + 1)]
        )
    return expr


def unroll(rule: Rule) -> Rule:
    """Replace counted repetitions with sequences of plain, optional and repeated parts."""
    return replace(rule, expr=rule.expr.map_bottom_up(_unroll_expr))