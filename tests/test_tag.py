import datetime as dt

from tagcloud.tag import Rounding, Tag, by_name, by_score, by_score_desc, to_int


def test_score_arithmetic() -> None:
    tag = Tag("cat", score=2.0)
    tag.add(3.0)
    assert tag.score == 5.0
    tag.multiply(2.0)
    assert tag.score == 10.0
    tag.divide(4.0)
    assert tag.score == 2.5


def test_normalize_sets_norm_score_only() -> None:
    tag = Tag("cat", score=2.0)
    tag.normalize(8.0)
    assert tag.norm_score == 0.25
    assert tag.score == 2.0


def test_weight_as_int_rounding_modes() -> None:
    tag = Tag("cat")
    tag.weight = 2.5
    assert tag.weight_as_int() == 3
    assert tag.weight_as_int(Rounding.CEIL) == 3
    assert tag.weight_as_int(Rounding.FLOOR) == 2
    assert tag.weight_as_int(Rounding.ROUND) == 3
    tag.weight = 2.4
    assert tag.weight_as_int(Rounding.ROUND) == 2


def test_round_is_half_up_for_negatives() -> None:
    assert to_int(-2.5, Rounding.ROUND) == -2
    assert to_int(-2.6, Rounding.ROUND) == -3


def test_score_and_norm_score_as_int() -> None:
    tag = Tag("cat", score=1.2)
    tag.normalize(2.4)
    assert tag.score_as_int() == 2
    assert tag.score_as_int(Rounding.FLOOR) == 1
    assert tag.norm_score_as_int(Rounding.ROUND) == 1
    assert tag.norm_score_as_int(Rounding.FLOOR) == 0


def test_equality_and_hash_use_exact_name() -> None:
    first = Tag("Cat", link="a", score=1.0)
    second = Tag("Cat", link="b", score=9.0)
    assert first == second
    assert hash(first) == hash(second)
    assert Tag("Cat") != Tag("cat")
    assert len({first, second, Tag("cat")}) == 2


def test_created_at_defaults_to_now_utc() -> None:
    before = dt.datetime.now(dt.UTC)
    tag = Tag("cat")
    after = dt.datetime.now(dt.UTC)
    assert before <= tag.created_at <= after


def test_naive_created_at_is_taken_as_utc() -> None:
    tag = Tag("cat", created_at=dt.datetime(2024, 1, 1, 12, 0))
    assert tag.created_at == dt.datetime(2024, 1, 1, 12, 0, tzinfo=dt.UTC)


def test_copy_is_independent() -> None:
    tag = Tag("cat", link="l", score=3.0)
    tag.weight = 1.5
    clone = tag.copy()
    clone.name = "dog"
    clone.add(1.0)
    assert tag.name == "cat"
    assert tag.score == 3.0
    assert clone.weight == 1.5
    assert clone.created_at == tag.created_at


def test_sort_keys() -> None:
    tags = [Tag("b", score=2.0), Tag("A", score=2.0), Tag("c", score=5.0)]
    assert [t.name for t in sorted(tags, key=by_name)] == ["A", "b", "c"]
    assert [t.name for t in sorted(tags, key=by_name, reverse=True)] == ["c", "b", "A"]
    assert [t.name for t in sorted(tags, key=by_score)] == ["A", "b", "c"]
    assert [t.name for t in sorted(tags, key=by_score_desc)] == ["c", "A", "b"]
