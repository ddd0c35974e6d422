"""The optimization pipeline that turns AST rules into optimized rules."""

from __future__ import annotations

from typing import Iterable

from .ast import Rule
from .merges import concatenate, factor, list_rule
from .optimized import OptimizedRule, to_hash_map, to_optimized_rule
from .restorer import restore_on_err
from .rewrites import rotate, skip, unroll

_PASSES = (rotate, skip, unroll, concatenate, factor, list_rule)


def _optimize_rule(rule: Rule) -> OptimizedRule:
    for rewrite in _PASSES:
        rule = rewrite(rule)
    return to_optimized_rule(rule)


def optimize(rules: Iterable[Rule]) -> list[OptimizedRule]:
    """Run every rewrite over each rule, then guard stack-modifying branches."""
    optimized = [_optimize_rule(rule) for rule in rules]
    by_name = to_hash_map(optimized)
    return [restore_on_err(rule, by_name) for rule in optimized]