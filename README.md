# pegmeta

Tools for working with PEG grammar definitions. The package provides an
expression tree for grammar rules, checks that catch grammars that cannot
work, and a chain of optimisation passes that rewrite rules into a simpler
form for code generation.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Building rules

A grammar rule is a `Rule` with a name, a `RuleType` (`NORMAL`, `SILENT`,
`ATOMIC`, `COMPOUND_ATOMIC` or `NON_ATOMIC`) and an expression built from
the frozen dataclasses in `pegmeta.ast`: `Str`, `Insens`, `Range`, `Ident`,
`PeekSlice`, `PosPred`, `NegPred`, `Seq`, `Choice`, `Opt`, `Rep`, `RepOnce`,
`RepExact`, `RepMin`, `RepMax`, `RepMinMax`, `Skip` and `Push`.

```python
from pegmeta.ast import Ident, Rep, Rule, RuleType, Seq, Str

rule = Rule("list", RuleType.NORMAL, Seq(Rep(Seq(Ident("item"), Str(","))), Ident("item")))
```

Every expression has `iter_top_down()`, which yields it and all its
sub-expressions in pre-order, and `map_top_down(f)` / `map_bottom_up(f)`,
which return a rewritten tree.

## Optimising

`pegmeta.optimizer.optimize(rules)` runs every pass over each rule in turn
(rotation, skip detection, loop unrolling, string concatenation, factoring,
list rewriting), converts the result into `pegmeta.optimized.OptimizedRule`
objects, and finally wraps branches that change the stack in
`RestoreOnErr`:

```python
from pegmeta.optimizer import optimize

optimized = optimize([rule])
```

The passes can be used one at a time:

- `pegmeta.rewrites`: `rotate`, `skip`, `unroll`
- `pegmeta.merges`: `concatenate`, `factor`, `list_rule`
- `pegmeta.optimized`: `to_optimized`, `to_optimized_rule`, `to_hash_map`
- `pegmeta.restorer`: `restore_on_err`, `child_modifies_state`

`to_optimized` raises `ValueError` for counted repetitions that have not
been unrolled.

## Rules with source spans

`pegmeta.nodes` holds the same kinds of expression, each wrapped in a
`ParserNode` that records the `Span` of grammar text it came from, and
`ParserRule`, which adds the span of the rule's name. `pegmeta.repetition`
has helpers that build such nodes for postfix and infix operators
(`optional`, `repeat`, `repeat_once`, `repeat_exact`, `repeat_min`,
`repeat_max`, `repeat_min_max`, `sequence`, `choice`). The counted forms
check their numbers with `parse_count` and raise `GrammarError` when a count
does not fit an unsigned 32-bit integer or is a zero that is not allowed.

`pegmeta.escapes` decodes literal text: `unescape` resolves backslash
escapes (`\n`, `\r`, `\t`, `\0`, `\\`, `\"`, `\'`, `\xNN`, `\u{...}`), and
`string_literal`, `insensitive_literal` and `char_literal` strip the quotes
of `"..."`, `^"..."` and `'...'` literals. Malformed input raises
`ValueError`.

`pegmeta.convert.convert_rule` and `convert_node` drop the spans and give
plain `pegmeta.ast` rules.

## Validating

`pegmeta.consume.consume_rules(rules)` checks span-carrying rules with
`pegmeta.validator.validate_ast` and returns plain `Rule` objects. The
checks find repetitions whose body cannot fail or does not consume input,
choices whose later branches cannot be reached, `WHITESPACE` or `COMMENT`
rules that cannot fail or do not consume input, and left recursion.

`pegmeta.definitions.validate_definitions(definitions, called_rules)` takes
the spans of defined and of referenced rule names. It reports names that are
reserved keywords, rules defined twice, and calls of rules that are neither
defined nor built in; otherwise it returns the referenced names that are not
defined in the grammar (the built-ins it uses), in order of first use.

Problems are raised as `pegmeta.grammar_error.GrammarErrors`, which holds
the individual `GrammarError` objects in `errors` and whose text points at
the offending part of the grammar:

```python
from pegmeta.ast import RuleType
from pegmeta.consume import consume_rules
from pegmeta.grammar_error import Span
from pegmeta.nodes import ParserNode, ParserRule, Str
from pegmeta.repetition import repeat

text = 'a = { ("")* }'
body = repeat(ParserNode(Str(""), Span(text, 6, 10)), Span(text, 10, 11))
consume_rules([ParserRule("a", Span(text, 0, 1), RuleType.NORMAL, body)])
```

```
grammar error

 --> 1:7
  |
1 | a = { ("")* }
  |       ^---^
  |
  = expression inside repetition cannot fail and will repeat infinitely
```

`format_errors` renders a list of errors in this form, and
`unwrap_or_report(errors, value)` returns `value` when the list is empty and
raises `GrammarErrors` otherwise.

## What the package does not do

There is no reader for grammar files: the package does not turn grammar
text into rules. Rules, and the spans the validator reports on, have to be
built in code as shown above. Nor does it generate or run a parser from the
optimised rules, and it has no command-line program.