from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum


class Rounding(str, Enum):
    CEIL = "ceil"
    FLOOR = "floor"
    # Half up, so 2.5 -> 3 and -2.5 -> -2.
    ROUND = "round"


def to_int(value: float, rounding: Rounding | None = None) -> int:
    if rounding == Rounding.FLOOR:
        return math.floor(value)
    if rounding == Rounding.ROUND:
        return math.floor(value + 0.5)
    return math.ceil(value)


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


@dataclass(eq=False)
class Tag:
    """A named, scored item of a cloud.

    Equality and hashing use the exact name only. The cloud stores tags under a
    key derived from the name by its case policy, so two tags that share a
    storage slot can still compare unequal here.
    """

    name: str | None
    link: str | None = None
    score: float = 1.0
    created_at: dt.datetime = field(default_factory=utcnow)
    norm_score: float = 0.0
    weight: float = 0.0

    def __post_init__(self) -> None:
        # Naive timestamps are taken as UTC.
        if self.created_at.tzinfo is None:
            self.created_at = self.created_at.replace(tzinfo=dt.UTC)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Tag):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def add(self, value: float) -> None:
        self.score += value

    def multiply(self, factor: float) -> None:
        self.score *= factor

    def divide(self, factor: float) -> None:
        self.score /= factor

    def normalize(self, max_score: float) -> None:
        self.norm_score = self.score / max_score

    def weight_as_int(self, rounding: Rounding | None = None) -> int:
        return to_int(self.weight, rounding)

    def score_as_int(self, rounding: Rounding | None = None) -> int:
        return to_int(self.score, rounding)

    def norm_score_as_int(self, rounding: Rounding | None = None) -> int:
        return to_int(self.norm_score, rounding)

    def copy(self) -> Tag:
        return Tag(
            name=self.name,
            link=self.link,
            score=self.score,
            created_at=self.created_at,
            norm_score=self.norm_score,
            weight=self.weight,
        )


def by_name(tag: Tag) -> str:
    return (tag.name or "").lower()


def by_score(tag: Tag) -> tuple[float, str]:
    return (tag.score, by_name(tag))


def by_score_desc(tag: Tag) -> tuple[float, str]:
    return (-tag.score, by_name(tag))
