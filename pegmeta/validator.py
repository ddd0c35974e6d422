"""Semantic checks on parsed rules: endless repetition, unreachable choices, left recursion."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from .grammar_error import GrammarError
from .nodes import (
    Choice,
    Ident,
    NegPred,
    Opt,
    ParserExpr,
    ParserNode,
    ParserRule,
    PosPred,
    Push,
    Rep,
    RepMin,
    RepOnce,
    Seq,
    Str,
)

Rules = Mapping[str, ParserNode]


def _to_map(rules: Iterable[ParserRule]) -> dict[str, ParserNode]:
    return {rule.name: rule.node for rule in rules}


def _follow(
    name: str, rules: Rules, trace: list[str], check
) -> Optional[bool]:
    """Evaluate ``check`` on the body of rule ``name`` unless it is already being traced."""
    if name in trace or name not in rules:
        return None
    trace.append(name)
    try:
        return check(rules[name].expr, rules, trace)
    finally:
        trace.pop()


def is_non_progressing(
    expr: ParserExpr, rules: Rules, trace: Optional[list[str]] = None
) -> bool:
    """Tell whether ``expr`` may succeed without consuming any input."""
    if trace is None:
        trace = []
    match expr:
        case Str(value):
            return value == ""
        case Ident(name):
            if name in ("soi", "eoi"):
                return True
            result = _follow(name, rules, trace, is_non_progressing)
            return bool(result)
        case PosPred() | NegPred():
            return True
        case Seq(lhs, rhs):
            return is_non_progressing(lhs.expr, rules, trace) and is_non_progressing(
                rhs.expr, rules, trace
            )
        case Choice(lhs, rhs):
            return is_non_progressing(lhs.expr, rules, trace) or is_non_progressing(
                rhs.expr, rules, trace
            )
    return False


def is_non_failing(
    expr: ParserExpr, rules: Rules, trace: Optional[list[str]] = None
) -> bool:
    """Tell whether ``expr`` can never fail to match."""
    if trace is None:
        trace = []
    match expr:
        case Str(value):
            return value == ""
        case Ident(name):
            result = _follow(name, rules, trace, is_non_failing)
            return bool(result)
        case Opt() | Rep():
            return True
        case Seq(lhs, rhs):
            return is_non_failing(lhs.expr, rules, trace) and is_non_failing(
                rhs.expr, rules, trace
            )
        case Choice(lhs, rhs):
            return is_non_failing(lhs.expr, rules, trace) or is_non_failing(
                rhs.expr, rules, trace
            )
    return False


def _validate_repetition(rules: Sequence[ParserRule], by_name: Rules) -> list[GrammarError]:
    def check(node: ParserNode) -> Optional[GrammarError]:
        match node.expr:
            case Rep(node=inner) | RepOnce(node=inner) | RepMin(node=inner):
                if is_non_failing(inner.expr, by_name, []):
                    return GrammarError(
                        "expression inside repetition cannot fail and will repeat infinitely",
                        node.span,
                    )
                if is_non_progressing(inner.expr, by_name, []):
                    return GrammarError(
                        "expression inside repetition is non-progressing and will repeat "
                        "infinitely",
                        node.span,
                    )
        return None

    return [error for rule in rules for error in rule.node.filter_map_top_down(check)]


def _validate_choices(rules: Sequence[ParserRule], by_name: Rules) -> list[GrammarError]:
    def check(node: ParserNode) -> Optional[GrammarError]:
        if not isinstance(node.expr, Choice):
            return None
        lhs = node.expr.lhs
        candidate = lhs.expr.rhs if isinstance(lhs.expr, Choice) else lhs
        if is_non_failing(candidate.expr, by_name, []):
            return GrammarError(
                "expression cannot fail; following choices cannot be reached",
                candidate.span,
            )
        return None

    return [error for rule in rules for error in rule.node.filter_map_top_down(check)]


def _validate_whitespace_comment(
    rules: Sequence[ParserRule], by_name: Rules
) -> list[GrammarError]:
    errors = []
    for rule in rules:
        if rule.name not in ("WHITESPACE", "COMMENT"):
            continue
        if is_non_failing(rule.node.expr, by_name, []):
            errors.append(
                GrammarError(
                    f"{rule.name} cannot fail and will repeat infinitely", rule.node.span
                )
            )
        elif is_non_progressing(rule.node.expr, by_name, []):
            errors.append(
                GrammarError(
                    f"{rule.name} is non-progressing and will repeat infinitely",
                    rule.node.span,
                )
            )
    return errors


def _left_recursion_at(
    node: ParserNode, rules: Rules, trace: list[str]
) -> Optional[GrammarError]:
    match node.expr:
        case Ident(name):
            if trace[0] == name:
                chain = " -> ".join([*trace, name])
                return GrammarError(
                    f"rule {node.span.as_str()} is left-recursive ({chain}); "
                    "pest::prec_climber might be useful in this case",
                    node.span,
                )
            if name not in trace and name in rules:
                trace.append(name)
                try:
                    return _left_recursion_at(rules[name], rules, trace)
                finally:
                    trace.pop()
            return None
        case Seq(lhs, rhs):
            if is_non_failing(lhs.expr, rules, [trace[-1]]):
                return _left_recursion_at(rhs, rules, trace)
            return _left_recursion_at(lhs, rules, trace)
        case Choice(lhs, rhs):
            found = _left_recursion_at(lhs, rules, trace)
            if found is not None:
                return found
            return _left_recursion_at(rhs, rules, trace)
        case (
            Rep(node=inner)
            | RepOnce(node=inner)
            | Opt(node=inner)
            | PosPred(node=inner)
            | NegPred(node=inner)
            | Push(node=inner)
        ):
            return _left_recursion_at(inner, rules, trace)
    return None


def _validate_left_recursion(by_name: Rules) -> list[GrammarError]:
    errors = []
    for name, node in by_name.items():
        error = _left_recursion_at(node, by_name, [name])
        if error is not None:
            errors.append(error)
    return errors


def validate_ast(rules: Iterable[ParserRule]) -> list[GrammarError]:
    """Return every semantic error in ``rules``, ordered by position in the source."""
    rules = list(rules)
    by_name = _to_map(rules)
    errors = [
        *_validate_repetition(rules, by_name),
        *_validate_choices(rules, by_name),
        *_validate_whitespace_comment(rules, by_name),
        *_validate_left_recursion(by_name),
    ]
    return sorted(errors, key=lambda error: error.span)