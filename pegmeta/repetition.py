"""Building parsed nodes for postfix repetition operators and infix combinators."""

from __future__ import annotations

import re

from .grammar_error import GrammarError, Span
from .nodes import (
    Choice,
    Opt,
    ParserNode,
    Rep,
    RepExact,
    RepMax,
    RepMin,
    RepMinMax,
    RepOnce,
    Seq,
)

U32_MAX = 2**32 - 1

_NUMBER = re.compile(r"\+?[0-9]+")


def parse_count(number: Span, allow_zero: bool) -> int:
    """Parse the repetition count covered by ``number``.

    Raise GrammarError when it does not fit an unsigned 32-bit integer, or
    when it is zero and ``allow_zero`` is false.
    """
    text = number.as_str()
    if not _NUMBER.fullmatch(text) or int(text) > U32_MAX:
        raise GrammarError("number cannot overflow u32", number)
    value = int(text)
    if value == 0 and not allow_zero:
        raise GrammarError("cannot repeat 0 times", number)
    return value


def _extend(node: ParserNode, end: Span) -> Span:
    return node.span.join(end)


def optional(node: ParserNode, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node?``, spanning up to the end of ``end``."""
    return ParserNode(Opt(node), _extend(node, end))


def repeat(node: ParserNode, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node*``."""
    return ParserNode(Rep(node), _extend(node, end))


def repeat_once(node: ParserNode, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node+``."""
    return ParserNode(RepOnce(node), _extend(node, end))


def repeat_exact(node: ParserNode, number: Span, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node{n}``; ``n`` must be positive."""
    count = parse_count(number, allow_zero=False)
    return ParserNode(RepExact(node, count), _extend(node, end))


def repeat_min(node: ParserNode, number: Span, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node{n,}``; ``n`` may be zero."""
    minimum = parse_count(number, allow_zero=True)
    return ParserNode(RepMin(node, minimum), _extend(node, end))


def repeat_max(node: ParserNode, number: Span, end: Span) -> ParserNode:
    """Wrap ``node`` as ``node{,n}``; ``n`` must be positive."""
    maximum = parse_count(number, allow_zero=False)
    return ParserNode(RepMax(node, maximum), _extend(node, end))


def repeat_min_max(
    node: ParserNode, min_number: Span, max_number: Span, end: Span
) -> ParserNode:
    """Wrap ``node`` as ``node{m, n}``; ``m`` may be zero, ``n`` must be positive."""
    minimum = parse_count(min_number, allow_zero=True)
    maximum = parse_count(max_number, allow_zero=False)
    return ParserNode(RepMinMax(node, minimum, maximum), _extend(node, end))


def sequence(lhs: ParserNode, rhs: ParserNode) -> ParserNode:
    """Combine two nodes as ``lhs ~ rhs``."""
    return ParserNode(Seq(lhs, rhs), lhs.span.join(rhs.span))


def choice(lhs: ParserNode, rhs: ParserNode) -> ParserNode:
    """Combine two nodes as ``lhs | rhs``."""
    return ParserNode(Choice(lhs, rhs), lhs.span.join(rhs.span))