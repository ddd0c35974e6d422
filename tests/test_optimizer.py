from pegmeta import ast
from pegmeta import optimized as o
from pegmeta.ast import Rule, RuleType
from pegmeta.optimized import OptimizedRule
from pegmeta.optimizer import optimize


def test_rotate():
    rules = [
        Rule(
            "rule",
            RuleType.NORMAL,
            ast.Choice(
                ast.Choice(ast.Choice(ast.Str("a"), ast.Str("b")), ast.Str("c")),
                ast.Str("d"),
            ),
        )
    ]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.NORMAL,
            o.Choice(o.Str("a"), o.Choice(o.Str("b"), o.Choice(o.Str("c"), o.Str("d")))),
        )
    ]
    assert optimize(rules) == expected


def test_skip():
    rules = [
        Rule(
            "rule",
            RuleType.ATOMIC,
            ast.Rep(
                ast.Seq(
                    ast.NegPred(ast.Choice(ast.Str("a"), ast.Str("b"))),
                    ast.Ident("ANY"),
                )
            ),
        )
    ]
    assert optimize(rules) == [OptimizedRule("rule", RuleType.ATOMIC, o.Skip(["a", "b"]))]


def test_concat_strings():
    rules = [
        Rule(
            "rule",
            RuleType.ATOMIC,
            ast.Seq(
                ast.Seq(ast.Str("a"), ast.Str("b")),
                ast.Seq(ast.Str("c"), ast.Str("d")),
            ),
        )
    ]
    assert optimize(rules) == [OptimizedRule("rule", RuleType.ATOMIC, o.Str("abcd"))]


def test_unroll_loop_exact():
    rules = [Rule("rule", RuleType.ATOMIC, ast.RepExact(ast.Ident("a"), 3))]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.ATOMIC,
            o.Seq(o.Ident("a"), o.Seq(o.Ident("a"), o.Ident("a"))),
        )
    ]
    assert optimize(rules) == expected


def test_unroll_loop_max():
    rules = [Rule("rule", RuleType.ATOMIC, ast.RepMax(ast.Str("a"), 3))]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.ATOMIC,
            o.Seq(o.Opt(o.Str("a")), o.Seq(o.Opt(o.Str("a")), o.Opt(o.Str("a")))),
        )
    ]
    assert optimize(rules) == expected


def test_unroll_loop_min():
    rules = [Rule("rule", RuleType.ATOMIC, ast.RepMin(ast.Str("a"), 2))]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.ATOMIC,
            o.Seq(o.Str("a"), o.Seq(o.Str("a"), o.Rep(o.Str("a")))),
        )
    ]
    assert optimize(rules) == expected


def test_unroll_loop_min_max():
    rules = [Rule("rule", RuleType.ATOMIC, ast.RepMinMax(ast.Str("a"), 2, 3))]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.ATOMIC,
            o.Seq(o.Str("a"), o.Seq(o.Str("a"), o.Opt(o.Str("a")))),
        )
    ]
    assert optimize(rules) == expected


def test_concat_insensitive_strings():
    rules = [
        Rule(
            "rule",
            RuleType.ATOMIC,
            ast.Seq(
                ast.Seq(ast.Insens("a"), ast.Insens("b")),
                ast.Seq(ast.Insens("c"), ast.Insens("d")),
            ),
        )
    ]
    assert optimize(rules) == [OptimizedRule("rule", RuleType.ATOMIC, o.Insens("abcd"))]


def test_long_common_sequence():
    rules = [
        Rule(
            "rule",
            RuleType.SILENT,
            ast.Choice(
                ast.Seq(ast.Ident("a"), ast.Seq(ast.Ident("b"), ast.Ident("c"))),
                ast.Seq(ast.Seq(ast.Ident("a"), ast.Ident("b")), ast.Ident("d")),
            ),
        )
    ]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.SILENT,
            o.Seq(
                o.Ident("a"),
                o.Seq(o.Ident("b"), o.Choice(o.Ident("c"), o.Ident("d"))),
            ),
        )
    ]
    assert optimize(rules) == expected


def test_short_common_sequence():
    rules = [
        Rule(
            "rule",
            RuleType.SILENT,
            ast.Choice(ast.Seq(ast.Ident("a"), ast.Ident("b")), ast.Ident("a")),
        )
    ]
    expected = [
        OptimizedRule("rule", RuleType.SILENT, o.Seq(o.Ident("a"), o.Opt(o.Ident("b"))))
    ]
    assert optimize(rules) == expected


def test_impossible_common_sequence():
    rules = [
        Rule(
            "rule",
            RuleType.SILENT,
            ast.Choice(ast.Ident("a"), ast.Seq(ast.Ident("a"), ast.Ident("b"))),
        )
    ]
    assert optimize(rules) == [OptimizedRule("rule", RuleType.SILENT, o.Ident("a"))]


def test_lister():
    rules = [
        Rule(
            "rule",
            RuleType.SILENT,
            ast.Seq(
                ast.Rep(ast.Seq(ast.Ident("a"), ast.Ident("b"))),
                ast.Ident("a"),
            ),
        )
    ]
    expected = [
        OptimizedRule(
            "rule",
            RuleType.SILENT,
            o.Seq(o.Ident("a"), o.Rep(o.Seq(o.Ident("b"), o.Ident("a")))),
        )
    ]
    assert optimize(rules) == expected


def test_stack_modifying_branch_is_restored():
    rules = [Rule("rule", RuleType.NORMAL, ast.Opt(ast.Push(ast.Str("a"))))]
    expected = [
        OptimizedRule("rule", RuleType.NORMAL, o.Opt(o.RestoreOnErr(o.Push(o.Str("a")))))
    ]
    assert optimize(rules) == expected


def test_restore_follows_other_rules():
    rules = [
        Rule("outer", RuleType.NORMAL, ast.Rep(ast.Ident("inner"))),
        Rule("inner", RuleType.NORMAL, ast.Push(ast.Str("x"))),
    ]
    result = optimize(rules)
    assert result[0].expr == o.Rep(o.RestoreOnErr(o.Ident("inner")))
    assert result[1].expr == o.Push(o.Str("x"))


def test_preserves_order_names_and_types():
    rules = [
        Rule("first", RuleType.COMPOUND_ATOMIC, ast.Str("a")),
        Rule("second", RuleType.NON_ATOMIC, ast.Ident("first")),
    ]
    result = optimize(rules)
    assert [(r.name, r.ty) for r in result] == [
        ("first", RuleType.COMPOUND_ATOMIC),
        ("second", RuleType.NON_ATOMIC),
    ]


def test_repeat_once_is_unrolled_for_any_rule_type():
    rules = [Rule("rule", RuleType.NORMAL, ast.RepOnce(ast.Ident("a")))]
    assert optimize(rules)[0].expr == o.Seq(o.Ident("a"), o.Rep(o.Ident("a")))


def test_empty_input():
    assert optimize([]) == []