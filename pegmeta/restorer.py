"""Wrap branching expressions whose children touch the stack in RestoreOnErr."""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Optional

from .optimized import (
    Choice,
    Ident,
    OptimizedExpr,
    OptimizedRule,
    Opt,
    Push,
    Rep,
    RestoreOnErr,
)


def child_modifies_state(
    expr: OptimizedExpr,
    rules: Mapping[str, OptimizedExpr],
    cache: Optional[dict[str, Optional[bool]]] = None,
) -> bool:
    """Tell whether ``expr`` or any rule it calls pushes to or pops from the stack.

    ``cache`` maps rule names to their result, or to ``None`` while a rule is
    being examined; a recursive call into such a rule counts as ``False``.
    """
    if cache is None:
        cache = {}

    def modifies(node: OptimizedExpr) -> bool:
        if isinstance(node, Push):
            return True
        if not isinstance(node, Ident):
            return False
        name = node.name
        if name in ("DROP", "POP"):
            return True
        if name in cache:
            cached = cache[name]
            if cached is None:
                cache[name] = False
                return False
            return cached
        cache[name] = None
        target = rules.get(name)
        result = target is not None and child_modifies_state(target, rules, cache)
        cache[name] = result
        return result

    return any(modifies(node) for node in expr.iter_top_down())


def _wrap(expr: OptimizedExpr, rules: Mapping[str, OptimizedExpr]) -> OptimizedExpr:
    if child_modifies_state(expr, rules, {}):
        return RestoreOnErr(expr)
    return expr


def _wrap_branching(expr: OptimizedExpr, rules: Mapping[str, OptimizedExpr]) -> OptimizedExpr:
    if isinstance(expr, Opt):
        return Opt(_wrap(expr.expr, rules))
    if isinstance(expr, Rep):
        return Rep(_wrap(expr.expr, rules))
    if isinstance(expr, Choice):
        return Choice(_wrap(expr.lhs, rules), _wrap(expr.rhs, rules))
    return expr


def restore_on_err(rule: OptimizedRule, rules: Mapping[str, OptimizedExpr]) -> OptimizedRule:
    """Return ``rule`` with stack-modifying branches wrapped in RestoreOnErr."""
    return replace(rule, expr=rule.expr.map_bottom_up(lambda e: _wrap_branching(e, rules)))