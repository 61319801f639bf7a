import pytest

from tagcloud.filters import (
    AcceptAll,
    AcceptNone,
    And,
    LengthFilter,
    MaxLengthFilter,
    MinLengthFilter,
    NonNull,
    Not,
    Or,
    RegExFilter,
)
from tagcloud.tag import Tag


def test_constant_filters() -> None:
    assert AcceptAll().accept(None)
    assert AcceptAll().accept(Tag("x"))
    assert not AcceptNone().accept(Tag("x"))


def test_non_null() -> None:
    assert NonNull().accept(Tag("x"))
    assert NonNull().accept(0)
    assert not NonNull().accept(None)


@pytest.mark.parametrize("element", [None, Tag("x"), "anything"])
def test_empty_combinators_reject_everything(element: object) -> None:
    assert not And().accept(element)
    assert not Or().accept(element)
    assert not Not(None).accept(element)
    assert not Not().accept(element)


def test_not_negates() -> None:
    assert not Not(AcceptAll()).accept(Tag("x"))
    assert Not(AcceptNone()).accept(Tag("x"))


def test_and_requires_every_child() -> None:
    flt = And(MinLengthFilter(2), MaxLengthFilter(4))
    assert flt.accept(Tag("abc"))
    assert not flt.accept(Tag("a"))
    assert not flt.accept(Tag("abcde"))


def test_or_requires_any_child() -> None:
    flt = Or(RegExFilter("a+"), RegExFilter("b+"))
    assert flt.accept(Tag("aaa"))
    assert flt.accept(Tag("bb"))
    assert not flt.accept(Tag("ab"))


def test_length_filters_are_inclusive() -> None:
    flt = LengthFilter(2, 3)
    assert not flt.accept(Tag("a"))
    assert flt.accept(Tag("ab"))
    assert flt.accept(Tag("abc"))
    assert not flt.accept(Tag("abcd"))
    assert MinLengthFilter(3).accept(Tag("abc"))
    assert not MinLengthFilter(3).accept(Tag("ab"))
    assert MaxLengthFilter(2).accept(Tag("ab"))
    assert not MaxLengthFilter(2).accept(Tag("abc"))


@pytest.mark.parametrize(
    "flt", [LengthFilter(0, 10), MinLengthFilter(0), MaxLengthFilter(10), RegExFilter(".*")]
)
def test_tag_filters_reject_missing_tag_or_name(flt) -> None:
    assert not flt.accept(None)
    assert not flt.accept(Tag(None))


def test_regex_filter_matches_whole_name() -> None:
    flt = RegExFilter("[a-z]+")
    assert flt.accept(Tag("cat"))
    assert not flt.accept(Tag("cat1"))
    assert not flt.accept(Tag("1cat"))


def test_filter_returns_new_list() -> None:
    tags = [Tag("a"), Tag("abc"), Tag("abcdef")]
    kept = MaxLengthFilter(3).filter(tags)
    assert [t.name for t in kept] == ["a", "abc"]
    assert len(tags) == 3


def test_filters_compare_by_value() -> None:
    assert MinLengthFilter(3) == MinLengthFilter(3)
    assert MinLengthFilter(3) != MinLengthFilter(4)
    assert MinLengthFilter(3) != MaxLengthFilter(3)
    assert And(MinLengthFilter(1), RegExFilter("a")) == And(MinLengthFilter(1), RegExFilter("a"))
    assert len({AcceptAll(), AcceptAll(), Not(AcceptAll()), Not(AcceptAll())}) == 2


@pytest.mark.parametrize(
    ("flt", "attr", "value"),
    [
        (LengthFilter(1, 5), "min_length", 2),
        (LengthFilter(1, 5), "max_length", 9),
        (MinLengthFilter(3), "min_length", 4),
        (MaxLengthFilter(3), "max_length", 4),
        (RegExFilter("a+"), "pattern", "b+"),
    ],
)
def test_filter_parameters_are_read_only(flt, attr, value) -> None:
    before = hash(flt)
    with pytest.raises(AttributeError):
        setattr(flt, attr, value)
    assert hash(flt) == before
    assert {flt} == {flt}
