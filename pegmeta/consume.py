"""Turn parsed rules into validated AST rules."""

from __future__ import annotations

from typing import Iterable

from . import ast
from .convert import convert_rule
from .grammar_error import GrammarErrors
from .nodes import ParserRule
from .validator import validate_ast


def consume_rules(rules: Iterable[ParserRule]) -> list[ast.Rule]:
    """Validate ``rules`` and convert them to AST rules.

    Raise GrammarErrors listing every problem when validation fails.
    """
    rules = list(rules)
    errors = validate_ast(rules)
    if errors:
        raise GrammarErrors(errors)
    return [convert_rule(rule) for rule in rules]