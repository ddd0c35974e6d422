import pytest

from pegmeta.ast import (
    Choice,
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
from pegmeta.rewrites import rotate, skip, unroll


def test_rotate_choices():
    rule = Rule(
        "rule",
        RuleType.NORMAL,
        Choice(Choice(Choice(Str("a"), Str("b")), Str("c")), Str("d")),
    )
    rotated = rotate(rule)
    assert rotated == Rule(
        "rule",
        RuleType.NORMAL,
        Choice(Str("a"), Choice(Str("b"), Choice(Str("c"), Str("d")))),
    )


def test_rotate_nested_sequences():
    rule = Rule(
        "rule",
        RuleType.ATOMIC,
        Rep(Seq(Seq(Str("a"), Str("b")), Seq(Str("c"), Str("d")))),
    )
    assert rotate(rule).expr == Rep(
        Seq(Str("a"), Seq(Str("b"), Seq(Str("c"), Str("d"))))
    )


def test_rotate_is_idempotent():
    rule = Rule("r", RuleType.SILENT, Seq(Seq(Seq(Str("a"), Str("b")), Str("c")), Str("d")))
    once = rotate(rule)
    assert rotate(once) == once


def test_skip_atomic():
    rule = Rule(
        "rule",
        RuleType.ATOMIC,
        Rep(Seq(NegPred(Choice(Str("a"), Str("b"))), Ident("ANY"))),
    )
    assert skip(rule) == Rule("rule", RuleType.ATOMIC, Skip(["a", "b"]))


def test_skip_ignores_non_atomic():
    rule = Rule(
        "rule",
        RuleType.NORMAL,
        Rep(Seq(NegPred(Choice(Str("a"), Str("b"))), Ident("ANY"))),
    )
    assert skip(rule) == rule


def test_skip_requires_any_and_strings():
    not_any = Rule(
        "rule", RuleType.ATOMIC, Rep(Seq(NegPred(Str("a")), Ident("other")))
    )
    not_str = Rule(
        "rule",
        RuleType.ATOMIC,
        Rep(Seq(NegPred(Choice(Ident("x"), Str("b"))), Ident("ANY"))),
    )
    assert skip(not_any) == not_any
    assert skip(not_str) == not_str


def test_unroll_exact():
    rule = Rule("rule", RuleType.ATOMIC, RepExact(Ident("a"), 3))
    assert unroll(rule).expr == Seq(Ident("a"), Seq(Ident("a"), Ident("a")))


def test_unroll_max():
    rule = Rule("rule", RuleType.ATOMIC, RepMax(Str("a"), 3))
    assert unroll(rule).expr == Seq(
        Opt(Str("a")), Seq(Opt(Str("a")), Opt(Str("a")))
    )


def test_unroll_min():
    rule = Rule("rule", RuleType.ATOMIC, RepMin(Str("a"), 2))
    assert unroll(rule).expr == Seq(Str("a"), Seq(Str("a"), Rep(Str("a"))))


def test_unroll_min_max():
    rule = Rule("rule", RuleType.ATOMIC, RepMinMax(Str("a"), 2, 3))
    assert unroll(rule).expr == Seq(Str("a"), Seq(Str("a"), Opt(Str("a"))))


def test_unroll_repeat_once():
    rule = Rule("rule", RuleType.NORMAL, RepOnce(Ident("x")))
    assert unroll(rule) == Rule("rule", RuleType.NORMAL, Seq(Ident("x"), Rep(Ident("x"))))


def test_unroll_single_exact_is_plain():
    rule = Rule("rule", RuleType.NORMAL, RepExact(Ident("x"), 1))
    assert unroll(rule).expr == Ident("x")


def test_unroll_zero_count_rejected():
    with pytest.raises(ValueError):
        unroll(Rule("rule", RuleType.NORMAL, RepExact(Ident("x"), 0)))
    with pytest.raises(ValueError):
        unroll(Rule("rule", RuleType.NORMAL, RepMax(Ident("x"), 0)))


def test_unroll_leaves_other_expressions():
    rule = Rule("rule", RuleType.NORMAL, Choice(Str("a"), Rep(Str("b"))))
    assert unroll(rule) == rule