"""JSON-compatible snapshots of tags, filters and whole clouds.

A cloud snapshot keeps the stored map verbatim (storage keys included), every
configuration field and both filter sets, so ``cloud_from_dict`` does not
re-run input filters or merging.
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Iterable
from typing import Any

from .cloud import (
    DEFAULT_MAX_TAGS_TO_DISPLAY,
    DEFAULT_MAX_WEIGHT,
    DEFAULT_MIN_WEIGHT,
    DEFAULT_WORD_PATTERN,
    Cloud,
)
from .dictionary import DictionaryFilter
from .filters import (
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
from .tag import Rounding, Tag
from .text_case import DEFAULT_LOCALE, TagCase

SNAPSHOT_VERSION = 1

_SIMPLE_FILTERS: dict[str, type[Filter]] = {
    AcceptAll.kind: AcceptAll,
    AcceptNone.kind: AcceptNone,
    NonNull.kind: NonNull,
}


def tag_to_dict(tag: Tag) -> dict[str, Any]:
    return {
        "name": tag.name,
        "link": tag.link,
        "score": tag.score,
        "created_at": tag.created_at.isoformat(),
    }


def tag_from_dict(data: dict[str, Any]) -> Tag:
    kwargs: dict[str, Any] = {}
    created_raw = data.get("created_at")
    if created_raw:
        kwargs["created_at"] = dt.datetime.fromisoformat(created_raw)
    return Tag(
        name=data.get("name"),
        link=data.get("link"),
        score=float(data.get("score", 1.0)),
        **kwargs,
    )


def filter_to_dict(flt: Filter | None) -> dict[str, Any] | None:
    if flt is None:
        return None
    if isinstance(flt, (AcceptAll, AcceptNone, NonNull)):
        return {"kind": flt.kind}
    if isinstance(flt, Not):
        return {"kind": flt.kind, "filter": filter_to_dict(flt.inner)}
    if isinstance(flt, (And, Or)):
        return {"kind": flt.kind, "filters": [filter_to_dict(f) for f in flt.filters]}
    if isinstance(flt, DictionaryFilter):
        return {"kind": flt.kind, "terms": sorted(flt.terms)}
    if isinstance(flt, LengthFilter):
        return {"kind": flt.kind, "min_length": flt.min_length, "max_length": flt.max_length}
    if isinstance(flt, MinLengthFilter):
        return {"kind": flt.kind, "min_length": flt.min_length}
    if isinstance(flt, MaxLengthFilter):
        return {"kind": flt.kind, "max_length": flt.max_length}
    if isinstance(flt, RegExFilter):
        return {"kind": flt.kind, "pattern": flt.pattern}
    raise ValueError(f"unsupported filter type: {type(flt).__name__}")


def filter_from_dict(data: dict[str, Any] | None) -> Filter | None:
    if data is None:
        return None
    kind = data.get("kind")
    if kind in _SIMPLE_FILTERS:
        return _SIMPLE_FILTERS[kind]()
    if kind == Not.kind:
        return Not(filter_from_dict(data.get("filter")))
    if kind in {And.kind, Or.kind}:
        children = [filter_from_dict(item) for item in data.get("filters") or []]
        combinator = And if kind == And.kind else Or
        return combinator(*(child for child in children if child is not None))
    if kind == DictionaryFilter.kind:
        return DictionaryFilter(data.get("terms") or [])
    if kind == LengthFilter.kind:
        return LengthFilter(int(data["min_length"]), int(data["max_length"]))
    if kind == MinLengthFilter.kind:
        return MinLengthFilter(int(data["min_length"]))
    if kind == MaxLengthFilter.kind:
        return MaxLengthFilter(int(data["max_length"]))
    if kind == RegExFilter.kind:
        return RegExFilter(str(data["pattern"]))
    raise ValueError(f"unknown filter kind: {kind!r}")


def _filters_to_list(filters: Iterable[Filter]) -> list[dict[str, Any]]:
    items = [filter_to_dict(flt) for flt in filters]
    return sorted(
        (item for item in items if item is not None),
        key=lambda item: json.dumps(item, sort_keys=True),
    )


def _filters_from_list(items: Iterable[dict[str, Any]] | None) -> list[Filter]:
    filters: list[Filter] = []
    for item in items or []:
        flt = filter_from_dict(item)
        if flt is not None:
            filters.append(flt)
    return filters


def cloud_to_dict(cloud: Cloud) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "config": {
            "min_weight": cloud.min_weight,
            "max_weight": cloud.max_weight,
            "max_tags_to_display": cloud.max_tags_to_display,
            "threshold": cloud.threshold,
            "norm_threshold": cloud.norm_threshold,
            "tag_lifetime": cloud.tag_lifetime,
            "word_pattern": cloud.word_pattern,
            "tag_case": cloud.tag_case.value,
            "locale": cloud.locale,
            "default_link": cloud.default_link,
            "rounding": cloud.rounding.value,
        },
        "input_filters": _filters_to_list(cloud.input_filters),
        "output_filters": _filters_to_list(cloud.output_filters),
        "tags": {key: tag_to_dict(tag) for key, tag in cloud.entries().items()},
    }


def cloud_from_dict(data: dict[str, Any]) -> Cloud:
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported cloud snapshot version: {version!r}")
    config = data.get("config") or {}
    cloud = Cloud(
        config.get("tag_case", TagCase.LOWER),
        config.get("locale", DEFAULT_LOCALE),
        min_weight=float(config.get("min_weight", DEFAULT_MIN_WEIGHT)),
        max_weight=float(config.get("max_weight", DEFAULT_MAX_WEIGHT)),
        max_tags_to_display=int(config.get("max_tags_to_display", DEFAULT_MAX_TAGS_TO_DISPLAY)),
        threshold=float(config.get("threshold", 0.0)),
        norm_threshold=float(config.get("norm_threshold", 0.0)),
        tag_lifetime=int(config.get("tag_lifetime", -1)),
        word_pattern=config.get("word_pattern", DEFAULT_WORD_PATTERN),
        default_link=config.get("default_link"),
        rounding=config.get("rounding", Rounding.CEIL),
        input_filters=_filters_from_list(data.get("input_filters")),
        output_filters=_filters_from_list(data.get("output_filters")),
    )
    cloud.restore({key: tag_from_dict(item) for key, item in (data.get("tags") or {}).items()})
    return cloud


def dumps(cloud: Cloud, **kwargs: Any) -> str:
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(cloud_to_dict(cloud), **kwargs)


def loads(text: str) -> Cloud:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid cloud json") from exc
    if not isinstance(data, dict):
        raise ValueError("cloud snapshot must be an object")
    return cloud_from_dict(data)
