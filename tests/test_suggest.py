from __future__ import annotations

import fortran_suggest as fsuggest

SOURCE = (
    "subroutine foo(x)\nend subroutine foo\n"
    "function foobar(y)\nend function foobar\n"
    "module baz\n  interface g\n    module procedure foo\n  end interface g\nend module baz\n"
)


def test_edit_distance() -> None:
    assert fsuggest.edit_distance("", "abc") == 3
    assert fsuggest.edit_distance("kitten", "sitting") == 3
    assert fsuggest.edit_distance("bar", "baz") == 1
    assert fsuggest.edit_distance("same", "same") == 0


def test_declared_names_document_order_unique() -> None:
    assert fsuggest.declared_names(SOURCE) == ["foo", "foobar", "baz"]


def test_declared_units_report_kind_and_line() -> None:
    assert fsuggest.declared_units(SOURCE) == [
        ("subroutine", "foo", 1),
        ("function", "foobar", 3),
        ("module", "baz", 5),
    ]


def test_suggest_ranking() -> None:
    assert fsuggest.suggest(SOURCE, "bar") == ["foobar", "baz", "foo"]


def test_suggest_ties_follow_document_order() -> None:
    text = "subroutine abd()\nend subroutine abd\nsubroutine abc()\nend subroutine abc\n"
    assert fsuggest.suggest(text, "abx") == ["abd", "abc"]


def test_suggest_limit_and_determinism() -> None:
    first = fsuggest.suggest(SOURCE, "fo", limit=2)
    assert first == fsuggest.suggest(SOURCE, "fo", limit=2)
    assert first == ["foo", "foobar"]


def test_suggest_empty_source() -> None:
    assert fsuggest.suggest("program p\nend program p\n", "x") == []


def test_unnamed_end_statements_are_not_declarations() -> None:
    text = "function f(x)\n  f = x\nend function\n\nsubroutine g()\nend subroutine\n"
    assert fsuggest.declared_names(text) == ["f", "g"]
    assert fsuggest.declared_units(text) == [("function", "f", 1), ("subroutine", "g", 5)]


def test_declarations_in_comments_and_call_names_are_skipped() -> None:
    text = (
        "module m\n"
        "contains\n"
        "  ! see subroutine old_helper\n"
        "  pure integer function sq(n)\n"
        "    call subroutine_like(n)\n"
        "  end function sq\n"
        "end module\n"
    )
    assert fsuggest.declared_names(text) == ["m", "sq"]
