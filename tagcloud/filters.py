"""Predicates deciding which tags enter a cloud and which ones get displayed.

Every filter answers ``accept(element)``; ``filter(elements)`` returns a new
list holding the accepted elements. Filters other than the dictionary compare
by class and parameters, so a cloud's filter set never holds two equal ones.
"""

from __future__ import annotations

import re
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar

from .tag import Tag


class Filter(ABC):
    kind: ClassVar[str] = ""

    @abstractmethod
    def accept(self, element: Any) -> bool:
        raise NotImplementedError

    def filter(self, elements: Iterable[Any]) -> list[Any]:
        return [element for element in elements if self.accept(element)]

    def _params(self) -> tuple[Any, ...]:
        return ()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._params() == other._params()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._params()))

    def __repr__(self) -> str:
        params = ", ".join(repr(p) for p in self._params())
        return f"{type(self).__name__}({params})"


class AcceptAll(Filter):
    kind = "accept_all"

    def accept(self, element: Any) -> bool:
        return True


class AcceptNone(Filter):
    kind = "accept_none"

    def accept(self, element: Any) -> bool:
        return False


class NonNull(Filter):
    kind = "non_null"

    def accept(self, element: Any) -> bool:
        return element is not None


class Not(Filter):
    kind = "not"

    def __init__(self, inner: Filter | None = None) -> None:
        self._inner = inner

    @property
    def inner(self) -> Filter | None:
        return self._inner

    def accept(self, element: Any) -> bool:
        if self._inner is None:
            return False
        return not self._inner.accept(element)

    def _params(self) -> tuple[Any, ...]:
        return (self._inner,)


class And(Filter):
    """Accepts when every child accepts. Without children nothing passes."""

    kind = "and"

    def __init__(self, *filters: Filter) -> None:
        self._filters = tuple(filters)

    @property
    def filters(self) -> tuple[Filter, ...]:
        return self._filters

    def accept(self, element: Any) -> bool:
        if not self._filters:
            return False
        return all(f.accept(element) for f in self._filters)

    def _params(self) -> tuple[Any, ...]:
        return self._filters


class Or(Filter):
    """Accepts when any child accepts. Without children nothing passes."""

    kind = "or"

    def __init__(self, *filters: Filter) -> None:
        self._filters = tuple(filters)

    @property
    def filters(self) -> tuple[Filter, ...]:
        return self._filters

    def accept(self, element: Any) -> bool:
        return any(f.accept(element) for f in self._filters)

    def _params(self) -> tuple[Any, ...]:
        return self._filters


class TagFilter(Filter):
    """Base for predicates that inspect a tag's name."""

    @abstractmethod
    def accept(self, element: Tag | None) -> bool:
        raise NotImplementedError


class LengthFilter(TagFilter):
    kind = "length"

    def __init__(self, min_length: int = 0, max_length: int = sys.maxsize) -> None:
        self._min_length = min_length
        self._max_length = max_length

    @property
    def min_length(self) -> int:
        return self._min_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def accept(self, element: Tag | None) -> bool:
        if element is None or element.name is None:
            return False
        return self._min_length <= len(element.name) <= self._max_length

    def _params(self) -> tuple[Any, ...]:
        return (self._min_length, self._max_length)


class MinLengthFilter(TagFilter):
    kind = "min_length"

    def __init__(self, min_length: int = 0) -> None:
        self._min_length = min_length

    @property
    def min_length(self) -> int:
        return self._min_length

    def accept(self, element: Tag | None) -> bool:
        if element is None or element.name is None:
            return False
        return len(element.name) >= self._min_length

    def _params(self) -> tuple[Any, ...]:
        return (self._min_length,)


class MaxLengthFilter(TagFilter):
    kind = "max_length"

    def __init__(self, max_length: int = sys.maxsize) -> None:
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def accept(self, element: Tag | None) -> bool:
        if element is None or element.name is None:
            return False
        return len(element.name) <= self._max_length

    def _params(self) -> tuple[Any, ...]:
        return (self._max_length,)


class RegExFilter(TagFilter):
    kind = "regex"

    def __init__(self, pattern: str) -> None:
        self._pattern = pattern
        self._compiled = re.compile(pattern)

    @property
    def pattern(self) -> str:
        return self._pattern

    def accept(self, element: Tag | None) -> bool:
        if element is None or element.name is None:
            return False
        return self._compiled.fullmatch(element.name) is not None

    def _params(self) -> tuple[Any, ...]:
        return (self._pattern,)
