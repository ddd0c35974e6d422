"""Rewrites that merge neighbouring expressions: concatenation, factoring, listing."""

from __future__ import annotations

from dataclasses import replace

from .ast import Choice, Expr, Insens, Opt, Rep, Rule, RuleType, Seq, Str


def _concatenate_expr(expr: Expr) -> Expr:
    if isinstance(expr, Seq):
        lhs, rhs = expr.lhs, expr.rhs
        if isinstance(lhs, Str) and isinstance(rhs, Str):
            return Str(lhs.value + rhs.value)
        if isinstance(lhs, Insens) and isinstance(rhs, Insens):
            return Insens(lhs.value + rhs.value)
    return expr


def concatenate(rule: Rule) -> Rule:
    """In atomic rules, join sequences of literal strings into one string."""
    if rule.ty is not RuleType.ATOMIC:
        return rule
    return replace(rule, expr=rule.expr.map_bottom_up(_concatenate_expr))


def _factor_expr(expr: Expr) -> Expr:
    if not isinstance(expr, Choice):
        return expr
    lhs, rhs = expr.lhs, expr.rhs
    if isinstance(lhs, Seq) and isinstance(rhs, Seq):
        if lhs.lhs == rhs.lhs:
            return Seq(lhs.lhs, Choice(lhs.rhs, rhs.rhs))
        return expr
    if isinstance(lhs, Seq):
        # `(rule ~ rest) | rule` becomes `rule ~ rest?`, matching `rule` only once.
        if lhs.lhs == rhs:
            return Seq(lhs.lhs, Opt(lhs.rhs))
        return expr
    if isinstance(rhs, Seq):
        # `rule | (rule ~ rest)` becomes `rule`: the second branch can never be reached.
        if lhs == rhs.lhs:
            return lhs
        return expr
    return expr


def factor(rule: Rule) -> Rule:
    """Pull common prefixes out of choices."""
    return replace(rule, expr=rule.expr.map_top_down(_factor_expr))


def _list_expr(expr: Expr) -> Expr:
    # `(rule ~ rest)* ~ rule` becomes `rule ~ (rest ~ rule)*`.
    if (
        isinstance(expr, Seq)
        and isinstance(expr.lhs, Rep)
        and isinstance(expr.lhs.expr, Seq)
        and expr.lhs.expr.lhs == expr.rhs
    ):
        inner = expr.lhs.expr
        return Seq(inner.lhs, Rep(Seq(inner.rhs, expr.rhs)))
    return expr


def list_rule(rule: Rule) -> Rule:
    """Rewrite separated lists so the trailing element is not matched twice."""
    return replace(rule, expr=rule.expr.map_bottom_up(_list_expr))