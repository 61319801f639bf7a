import datetime as dt
import json

import pytest

from tagcloud.cloud import Cloud
from tagcloud.dictionary import DictionaryFilter
from tagcloud.filters import (
    AcceptAll,
    AcceptNone,
    And,
    Filter,
    LengthFilter,
    MaxLengthFilter,
    MinLengthFilter,
    NonNull,
    Not,
    Or,
    RegExFilter,
)
from tagcloud.serialize import (
    cloud_from_dict,
    cloud_to_dict,
    dumps,
    filter_from_dict,
    filter_to_dict,
    loads,
    tag_from_dict,
    tag_to_dict,
)
from tagcloud.tag import Rounding, Tag
from tagcloud.text_case import TagCase


def _configured_cloud() -> Cloud:
    cloud = Cloud(
        TagCase.CAPITALIZE,
        "es",
        min_weight=1.0,
        max_weight=80.0,
        max_tags_to_display=10,
        threshold=0.5,
        norm_threshold=0.1,
        tag_lifetime=60000,
        word_pattern=r"\w+",
        default_link="/tags/{}",
        rounding=Rounding.ROUND,
        input_filters=[MinLengthFilter(2), DictionaryFilter(["de", "la"])],
        output_filters=[Not(RegExFilter("[0-9]+"))],
    )
    cloud.add_tag(Tag("Gato", score=3.0))
    cloud.add_tag(Tag("perro", link="https://perros", score=1.5))
    cloud.add_tag(Tag("gato", score=1.0))
    return cloud


def test_tag_round_trip() -> None:
    created = dt.datetime(2024, 5, 1, 12, 30, tzinfo=dt.UTC)
    tag = Tag("cat", link="l", score=2.5, created_at=created)
    restored = tag_from_dict(json.loads(json.dumps(tag_to_dict(tag))))
    assert restored.name == "cat"
    assert restored.link == "l"
    assert restored.score == 2.5
    assert restored.created_at == created


def test_tag_from_dict_defaults() -> None:
    tag = tag_from_dict({"name": "cat"})
    assert tag.score == 1.0
    assert tag.link is None


@pytest.mark.parametrize(
    "flt",
    [
        AcceptAll(),
        AcceptNone(),
        NonNull(),
        Not(None),
        Not(MinLengthFilter(3)),
        And(),
        And(MinLengthFilter(1), Or(RegExFilter("a.*"), MaxLengthFilter(4))),
        LengthFilter(2, 9),
    ],
)
def test_filter_round_trip(flt: Filter) -> None:
    assert filter_from_dict(filter_to_dict(flt)) == flt


def test_dictionary_filter_round_trip() -> None:
    restored = filter_from_dict(filter_to_dict(DictionaryFilter(["b", "a"])))
    assert isinstance(restored, DictionaryFilter)
    assert restored.terms == frozenset({"a", "b"})


def test_unknown_filters_are_rejected() -> None:
    class Custom(Filter):
        def accept(self, element: object) -> bool:
            return True

    with pytest.raises(ValueError, match="unsupported filter type"):
        filter_to_dict(Custom())
    with pytest.raises(ValueError, match="unknown filter kind"):
        filter_from_dict({"kind": "mystery"})


def test_cloud_round_trip_preserves_everything() -> None:
    cloud = _configured_cloud()
    restored = loads(dumps(cloud))

    assert restored.size() == cloud.size() == 2
    assert {k: t.score for k, t in restored.entries().items()} == {"gato": 4.0, "perro": 1.5}
    assert restored.entries()["perro"].link == "https://perros"
    assert restored.entries()["gato"].created_at == cloud.entries()["gato"].created_at
    assert cloud_to_dict(restored) == cloud_to_dict(cloud)
    assert restored.tag_case == TagCase.CAPITALIZE
    assert restored.locale == "es"
    assert restored.min_weight == 1.0
    assert restored.max_weight == 80.0
    assert restored.max_tags_to_display == 10
    assert restored.threshold == 0.5
    assert restored.norm_threshold == 0.1
    assert restored.tag_lifetime == 60000
    assert restored.word_pattern == r"\w+"
    assert restored.default_link == "/tags/{}"
    assert restored.rounding == Rounding.ROUND
    assert MinLengthFilter(2) in restored.input_filters
    assert restored.output_filters == {Not(RegExFilter("[0-9]+"))}


def test_restored_cloud_keeps_working() -> None:
    restored = cloud_from_dict(cloud_to_dict(_configured_cloud()))
    restored.add_tag("la")
    restored.add_tag("perro")
    assert restored.size() == 2
    assert restored.get_tag("perro").score == 2.5


def test_loads_rejects_bad_input() -> None:
    with pytest.raises(ValueError, match="invalid cloud json"):
        loads("{nope")
    with pytest.raises(ValueError, match="must be an object"):
        loads("[]")
    with pytest.raises(ValueError, match="unsupported cloud snapshot version"):
        cloud_from_dict({"version": 99})


def test_cloud_from_dict_defaults() -> None:
    cloud = cloud_from_dict({})
    assert cloud.size() == 0
    assert cloud.max_weight == 4.0
    assert cloud.tag_case == TagCase.LOWER


def test_snapshot_with_naive_timestamps_honors_lifetime() -> None:
    snapshot = {
        "version": 1,
        "config": {"tag_lifetime": 60_000},
        "tags": {
            "old": {"name": "old", "score": 2.0, "created_at": "2026-01-01T00:00:00"},
            "new": {"name": "new", "score": 1.0, "created_at": "2026-01-01T00:05:00"},
        },
    }
    cloud = loads(json.dumps(snapshot))
    cloud.clock = lambda: dt.datetime(2026, 1, 1, 0, 5, 30, tzinfo=dt.UTC)
    assert cloud.get_tag("old").created_at.tzinfo is not None
    assert [t.name for t in cloud.tags()] == ["new"]
