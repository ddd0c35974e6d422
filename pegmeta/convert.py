"""Conversion of parsed, span-carrying rules into plain AST rules."""

from __future__ import annotations

from . import ast, nodes


def convert_node(node: nodes.ParserNode) -> ast.Expr:
    """Drop the spans of ``node`` and its descendants, giving an AST expression."""
    match node.expr:
        case nodes.Str(value):
            return ast.Str(value)
        case nodes.Insens(value):
            return ast.Insens(value)
        case nodes.Range(start, end):
            return ast.Range(start, end)
        case nodes.Ident(name):
            return ast.Ident(name)
        case nodes.PeekSlice(start, end):
            return ast.PeekSlice(start, end)
        case nodes.PosPred(inner):
            return ast.PosPred(convert_node(inner))
        case nodes.NegPred(inner):
            return ast.NegPred(convert_node(inner))
        case nodes.Seq(lhs, rhs):
            return ast.Seq(convert_node(lhs), convert_node(rhs))
        case nodes.Choice(lhs, rhs):
            return ast.Choice(convert_node(lhs), convert_node(rhs))
        case nodes.Opt(inner):
            return ast.Opt(convert_node(inner))
        case nodes.Rep(inner):
            return ast.Rep(convert_node(inner))
        case nodes.RepOnce(inner):
            return ast.RepOnce(convert_node(inner))
        case nodes.RepExact(inner, count):
            return ast.RepExact(convert_node(inner), count)
        case nodes.RepMin(inner, minimum):
            return ast.RepMin(convert_node(inner), minimum)
        case nodes.RepMax(inner, maximum):
            return ast.RepMax(convert_node(inner), maximum)
        case nodes.RepMinMax(inner, minimum, maximum):
            return ast.RepMinMax(convert_node(inner), minimum, maximum)
        case nodes.Push(inner):
            return ast.Push(convert_node(inner))
    raise TypeError(f"cannot convert {type(node.expr).__name__} to an AST expression")


def convert_rule(rule: nodes.ParserRule) -> ast.Rule:
    """Convert a parsed rule into an AST rule, discarding spans."""
    return ast.Rule(rule.name, rule.ty, convert_node(rule.node))