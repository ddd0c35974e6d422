"""Checks on rule names: reserved words, duplicates and undefined references."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Sequence

from .grammar_error import GrammarError, GrammarErrors, Span

UNICODE_PROPERTY_NAMES: tuple[str, ...] = (
    # binary properties
    "ALPHABETIC",
    "BIDI_CONTROL",
    "CASE_IGNORABLE",
    "CASED",
    "CHANGES_WHEN_CASEFOLDED",
    "CHANGES_WHEN_CASEMAPPED",
    "CHANGES_WHEN_LOWERCASED",
    "CHANGES_WHEN_TITLECASED",
    "CHANGES_WHEN_UPPERCASED",
    "DASH",
    "DEFAULT_IGNORABLE_CODE_POINT",
    "DEPRECATED",
    "DIACRITIC",
    "EXTENDER",
    "GRAPHEME_BASE",
    "GRAPHEME_EXTEND",
    "GRAPHEME_LINK",
    "HEX_DIGIT",
    "HYPHEN",
    "IDS_BINARY_OPERATOR",
    "IDS_TRINARY_OPERATOR",
    "ID_CONTINUE",
    "ID_START",
    "IDEOGRAPHIC",
    "JOIN_CONTROL",
    "LOGICAL_ORDER_EXCEPTION",
    "LOWERCASE",
    "MATH",
    "NONCHARACTER_CODE_POINT",
    "OTHER_ALPHABETIC",
    "OTHER_DEFAULT_IGNORABLE_CODE_POINT",
    "OTHER_GRAPHEME_EXTEND",
    "OTHER_ID_CONTINUE",
    "OTHER_ID_START",
    "OTHER_LOWERCASE",
    "OTHER_MATH",
    "OTHER_UPPERCASE",
    "PATTERN_SYNTAX",
    "PATTERN_WHITE_SPACE",
    "PREPENDED_CONCATENATION_MARK",
    "QUOTATION_MARK",
    "RADICAL",
    "REGIONAL_INDICATOR",
    "SENTENCE_TERMINAL",
    "SOFT_DOTTED",
    "TERMINAL_PUNCTUATION",
    "UNIFIED_IDEOGRAPH",
    "UPPERCASE",
    "VARIATION_SELECTOR",
    "WHITE_SPACE",
    "XID_CONTINUE",
    "XID_START",
    # general categories
    "CASED_LETTER",
    "CLOSE_PUNCTUATION",
    "CONNECTOR_PUNCTUATION",
    "CONTROL",
    "CURRENCY_SYMBOL",
    "DASH_PUNCTUATION",
    "DECIMAL_NUMBER",
    "ENCLOSING_MARK",
    "FINAL_PUNCTUATION",
    "FORMAT",
    "INITIAL_PUNCTUATION",
    "LETTER",
    "LETTER_NUMBER",
    "LINE_SEPARATOR",
    "LOWERCASE_LETTER",
    "MARK",
    "MATH_SYMBOL",
    "MODIFIER_LETTER",
    "MODIFIER_SYMBOL",
    "NONSPACING_MARK",
    "NUMBER",
    "OPEN_PUNCTUATION",
    "OTHER",
    "OTHER_LETTER",
    "OTHER_NUMBER",
    "OTHER_PUNCTUATION",
    "OTHER_SYMBOL",
    "PARAGRAPH_SEPARATOR",
    "PRIVATE_USE",
    "PUNCTUATION",
    "SEPARATOR",
    "SPACE_SEPARATOR",
    "SPACING_MARK",
    "SURROGATE",
    "SYMBOL",
    "TITLECASE_LETTER",
    "UNASSIGNED",
    "UPPERCASE_LETTER",
)

RUST_KEYWORDS: frozenset[str] = frozenset(
    """
    abstract alignof as become box break const continue crate do else enum
    extern false final fn for if impl in let loop macro match mod move mut
    offsetof override priv proc pure pub ref return Self self sizeof static
    struct super trait true type typeof unsafe unsized use virtual where
    while yield
    """.split()
)

PEST_KEYWORDS: frozenset[str] = frozenset(
    ["_", "ANY", "DROP", "EOI", "PEEK", "PEEK_ALL", "POP", "POP_ALL", "PUSH", "SOI"]
)

BUILTINS: frozenset[str] = frozenset(
    [
        "ANY",
        "DROP",
        "EOI",
        "PEEK",
        "PEEK_ALL",
        "POP",
        "POP_ALL",
        "SOI",
        "ASCII_DIGIT",
        "ASCII_NONZERO_DIGIT",
        "ASCII_BIN_DIGIT",
        "ASCII_OCT_DIGIT",
        "ASCII_HEX_DIGIT",
        "ASCII_ALPHA_LOWER",
        "ASCII_ALPHA_UPPER",
        "ASCII_ALPHA",
        "ASCII_ALPHANUMERIC",
        "ASCII",
        "NEWLINE",
        *UNICODE_PROPERTY_NAMES,
    ]
)


def validate_rust_keywords(
    definitions: Iterable[Span], rust_keywords: AbstractSet[str] = RUST_KEYWORDS
) -> list[GrammarError]:
    """Report every rule definition whose name is a reserved host-language word."""
    return [
        GrammarError(f"{span.as_str()} is a rust keyword", span)
        for span in definitions
        if span.as_str() in rust_keywords
    ]


def validate_pest_keywords(
    definitions: Iterable[Span], pest_keywords: AbstractSet[str] = PEST_KEYWORDS
) -> list[GrammarError]:
    """Report every rule definition whose name is a grammar keyword."""
    return [
        GrammarError(f"{span.as_str()} is a pest keyword", span)
        for span in definitions
        if span.as_str() in pest_keywords
    ]


def validate_already_defined(definitions: Iterable[Span]) -> list[GrammarError]:
    """Report every definition of a name after the first one."""
    errors = []
    defined: set[str] = set()
    for span in definitions:
        name = span.as_str()
        if name in defined:
            errors.append(GrammarError(f"rule {name} already defined", span))
        else:
            defined.add(name)
    return errors


def validate_undefined(
    definitions: Iterable[Span],
    called_rules: Iterable[Span],
    builtins: AbstractSet[str] = BUILTINS,
) -> list[GrammarError]:
    """Report every call of a rule that is neither defined nor built in."""
    defined = {span.as_str() for span in definitions}
    return [
        GrammarError(f"rule {span.as_str()} is undefined", span)
        for span in called_rules
        if span.as_str() not in defined and span.as_str() not in builtins
    ]


def validate_definitions(
    definitions: Sequence[Span], called_rules: Sequence[Span]
) -> list[str]:
    """Check rule names and calls; return called names that are not defined.

    ``definitions`` holds the spans of defined rule names and
    ``called_rules`` the spans of names referenced in rule bodies. Raise
    GrammarErrors listing every problem found. The returned names are the
    built-ins the grammar relies on, in order of first use.
    """
    errors = [
        *validate_rust_keywords(definitions),
        *validate_pest_keywords(definitions),
        *validate_already_defined(definitions),
        *validate_undefined(definitions, called_rules),
    ]
    if errors:
        raise GrammarErrors(errors)
    defined = {span.as_str() for span in definitions}
    return list(dict.fromkeys(s.as_str() for s in called_rules if s.as_str() not in defined))