"""Tag cloud storage plus the pipeline that turns raw scores into display weights."""

from __future__ import annotations

import datetime as dt
import logging
import math
import re
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .filters import Filter
from .tag import Rounding, Tag, by_name, by_score_desc, utcnow
from .text_case import DEFAULT_LOCALE, TagCase, adjust_case, storage_key

if TYPE_CHECKING:
    from .config import CloudConfig

logger = logging.getLogger(__name__)

# Dash punctuation allowed once inside a word.
_DASHES = (
    "\\-\u058a\u05be\u1400\u1806\u2010-\u2015\u2e17\u2e1a\u2e3a\u2e3b\u2e40"
    "\u301c\u3030\u30a0\ufe31\ufe32\ufe58\ufe63\uff0d"
)

# Two or more letters or digits, optionally joined by a single dash.
DEFAULT_WORD_PATTERN = rf"[^\W_]+[{_DASHES}]?[^\W_]+"

DEFAULT_MIN_WEIGHT = 0.0
DEFAULT_MAX_WEIGHT = 4.0
DEFAULT_MAX_TAGS_TO_DISPLAY = 50

_UNSET: Any = object()


def format_link(template: str, name: str) -> str:
    try:
        return template.format(name)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"invalid link format {template!r}") from exc


class Cloud:
    def __init__(
        self,
        tag_case: TagCase | str = TagCase.LOWER,
        locale: str = DEFAULT_LOCALE,
        *,
        min_weight: float = DEFAULT_MIN_WEIGHT,
        max_weight: float = DEFAULT_MAX_WEIGHT,
        max_tags_to_display: int = DEFAULT_MAX_TAGS_TO_DISPLAY,
        threshold: float = 0.0,
        norm_threshold: float = 0.0,
        tag_lifetime: int = -1,
        word_pattern: str | None = DEFAULT_WORD_PATTERN,
        default_link: str | None = None,
        rounding: Rounding | str = Rounding.CEIL,
        input_filters: Iterable[Filter] | None = None,
        output_filters: Iterable[Filter] | None = None,
        clock: Callable[[], dt.datetime] = utcnow,
    ) -> None:
        self._tags: dict[str, Tag] = {}
        self.tag_case = TagCase(tag_case)
        self.locale = locale
        self.min_weight = min_weight
        self.max_weight = max_weight
        self.max_tags_to_display = max_tags_to_display
        self.threshold = threshold
        self.norm_threshold = norm_threshold
        # Milliseconds; zero or negative keeps tags forever.
        self.tag_lifetime = tag_lifetime
        self.word_pattern = word_pattern
        self.default_link = default_link
        self.rounding = Rounding(rounding)
        self.input_filters: set[Filter] = set(input_filters or ())
        self.output_filters: set[Filter] = set(output_filters or ())
        self.clock = clock

    @classmethod
    def from_config(cls, config: CloudConfig, **kwargs: Any) -> Cloud:
        return cls(
            config.tag_case,
            config.locale,
            min_weight=config.min_weight,
            max_weight=config.max_weight,
            max_tags_to_display=config.max_tags_to_display,
            threshold=config.threshold,
            norm_threshold=config.norm_threshold,
            tag_lifetime=config.tag_lifetime,
            word_pattern=config.word_pattern,
            default_link=config.default_link,
            rounding=config.rounding,
            **kwargs,
        )

    def copy(self) -> Cloud:
        other = Cloud(
            self.tag_case,
            self.locale,
            min_weight=self.min_weight,
            max_weight=self.max_weight,
            max_tags_to_display=self.max_tags_to_display,
            threshold=self.threshold,
            norm_threshold=self.norm_threshold,
            tag_lifetime=self.tag_lifetime,
            word_pattern=self.word_pattern,
            default_link=self.default_link,
            rounding=self.rounding,
            input_filters=self.input_filters,
            output_filters=self.output_filters,
            clock=self.clock,
        )
        other._tags = dict(self._tags)
        return other

    @staticmethod
    def is_valid(tag: Tag | None) -> bool:
        return (
            tag is not None
            and bool(tag.name)
            and math.isfinite(tag.score)
            and tag.score > 0.0
        )

    def storage_key(self, name: str) -> str:
        return storage_key(name, self.tag_case, self.locale)

    def adjust_case(self, name: str) -> str:
        return adjust_case(name, self.tag_case, self.locale)

    # Insertion

    def add_tag(self, tag: Tag | str | None, link: str | None = None) -> None:
        if isinstance(tag, str):
            tag = Tag(tag, link)
        elif tag is not None and tag.link is None:
            tag.link = link
        if tag is None or not self.is_valid(tag):
            logger.debug("ignoring invalid tag %r", tag)
            return
        key = self.storage_key(tag.name)  # type: ignore[arg-type]
        for flt in self.input_filters:
            if not flt.accept(tag):
                logger.debug("input filter %r rejected tag %r", flt, tag.name)
                return
        if tag.link is None and self.default_link is not None:
            tag.link = format_link(self.default_link, tag.name)  # type: ignore[arg-type]

        existing = self._tags.get(key)
        if existing is not None:
            tag.add(existing.score)
            if tag.link is None:
                tag.link = existing.link
            if existing.created_at < tag.created_at:
                tag.created_at = existing.created_at
        self._tags[key] = tag

    def add_tags(self, tags: Iterable[Tag | str] | None) -> None:
        if tags is None:
            return
        for tag in tags:
            self.add_tag(tag)

    def add_text(self, text: str | None, link_format: str | None = _UNSET) -> None:
        """Add every word of ``text`` matched by ``word_pattern``.

        Each word gets a link built from ``link_format``; it defaults to the
        cloud's ``default_link`` and ``None`` leaves the words without links.
        """

        if link_format is _UNSET:
            link_format = self.default_link
        if self.word_pattern is None or text is None:
            return
        try:
            pattern = re.compile(self.word_pattern)
        except re.error as exc:
            raise ValueError(f"invalid word pattern {self.word_pattern!r}") from exc
        for match in pattern.finditer(text):
            word = match.group(0)
            link = format_link(link_format, word) if link_format is not None else None
            self.add_tag(Tag(word, link))

    # Lookup and removal

    def get_tag(self, name: Tag | str | None) -> Tag | None:
        """Return the stored tag for ``name``, applying the case policy to it in place."""

        if isinstance(name, Tag):
            name = name.name
        if name is None:
            return None
        tag = self._tags.get(self.storage_key(name))
        if tag is not None and tag.name is not None:
            tag.name = self.adjust_case(tag.name)
        return tag

    def remove_tag(self, name: Tag | str | None) -> None:
        if isinstance(name, Tag):
            name = name.name
        if name is None:
            return
        self._tags.pop(self.storage_key(name), None)

    def clear(self) -> None:
        self._tags.clear()

    def entries(self) -> dict[str, Tag]:
        """Shallow copy of the stored map, keyed by storage key."""

        return dict(self._tags)

    def restore(self, entries: dict[str, Tag]) -> None:
        # Snapshot loading: keys and tags are taken as-is, bypassing filters and merging.
        self._tags = dict(entries)

    def size(self) -> int:
        return len(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, name: object) -> bool:
        if isinstance(name, Tag):
            name = name.name
        if not isinstance(name, str):
            return False
        return self.storage_key(name) in self._tags

    # Output

    def output_tags(self) -> list[Tag]:
        """Build the displayable tags: filtered, weighted, capped and case adjusted.

        The returned tags are copies; their ``norm_score`` and ``weight`` only
        describe this result.
        """

        now = self.clock()
        max_score = 0.0
        survivors: list[Tag] = []
        for key, tag in list(self._tags.items()):
            if not self.is_valid(tag):
                logger.debug("purging invalid tag %r", key)
                del self._tags[key]
                continue
            if tag.score <= self.threshold:
                continue
            if self.tag_lifetime > 0 and _age_ms(tag, now) > self.tag_lifetime:
                continue
            if self._is_output_filtered(tag):
                continue
            survivors.append(tag.copy())
            if tag.score > max_score:
                max_score = tag.score

        if not math.isfinite(max_score) or max_score <= 0.0:
            return []

        weighted: list[Tag] = []
        for tag in survivors:
            tag.normalize(max_score)
            if tag.norm_score < self.norm_threshold:
                continue
            tag.weight = self.min_weight + tag.norm_score * (self.max_weight - self.min_weight)
            weighted.append(tag)

        if self.max_tags_to_display < 0 or len(self._tags) <= self.max_tags_to_display:
            kept = weighted
        else:
            kept = sorted(weighted, key=by_score_desc)[: self.max_tags_to_display]
        for tag in kept:
            if tag.name is not None:
                tag.name = self.adjust_case(tag.name)
        logger.debug("built output of %d tags from %d stored", len(kept), len(self._tags))
        return kept

    def tags(self, key: Callable[[Tag], Any] = by_name, *, reverse: bool = False) -> list[Tag]:
        return sorted(self.output_tags(), key=key, reverse=reverse)

    def all_tags(
        self, key: Callable[[Tag], Any] | None = None, *, reverse: bool = False
    ) -> list[Tag]:
        """Every stored tag, including hidden ones, as copies without weights."""

        result: list[Tag] = []
        for tag in self._tags.values():
            snapshot = tag.copy()
            snapshot.norm_score = 0.0
            snapshot.weight = 0.0
            result.append(snapshot)
        if key is not None:
            result.sort(key=key, reverse=reverse)
        return result

    def _is_output_filtered(self, tag: Tag) -> bool:
        return any(not flt.accept(tag) for flt in self.output_filters)

    # Filter registries

    def add_input_filter(self, flt: Filter) -> None:
        self.input_filters.add(flt)

    def remove_input_filter(self, flt: Filter) -> None:
        self.input_filters.discard(flt)

    def remove_input_filters(self, kind: type[Filter]) -> None:
        self.input_filters = {f for f in self.input_filters if not isinstance(f, kind)}

    def clear_input_filters(self) -> None:
        self.input_filters.clear()

    def add_output_filter(self, flt: Filter) -> None:
        self.output_filters.add(flt)

    def remove_output_filter(self, flt: Filter) -> None:
        self.output_filters.discard(flt)

    def remove_output_filters(self, kind: type[Filter]) -> None:
        self.output_filters = {f for f in self.output_filters if not isinstance(f, kind)}

    def clear_output_filters(self) -> None:
        self.output_filters.clear()


def _age_ms(tag: Tag, now: dt.datetime) -> float:
    return (now - tag.created_at).total_seconds() * 1000.0
