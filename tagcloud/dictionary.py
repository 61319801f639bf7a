from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from importlib import resources
from pathlib import Path
from typing import Any

from .filters import TagFilter
from .tag import Tag

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE = "dictionary_blacklist"
BUNDLE_SUFFIX = ".properties"

_PROPERTY_KEY_RE = re.compile(r"^((?:\\.|[^=:\s\\])+)")


def read_lines(source: str | os.PathLike[str] | Iterable[str]) -> list[str]:
    """Return the non-blank lines of a path, a text blob or an iterable of lines.

    Only ``os.PathLike`` sources are read from disk. A plain ``str`` is always
    the text itself, so pass ``Path("words.txt")`` to load a file.
    """

    if isinstance(source, os.PathLike):
        lines: Iterable[str] = Path(source).read_text(encoding="utf-8").splitlines()
    elif isinstance(source, str):
        lines = source.splitlines()
    else:
        lines = source
    terms: list[str] = []
    for line in lines:
        entry = line.strip()
        if entry:
            terms.append(entry)
    return terms


def parse_properties_keys(text: str) -> list[str]:
    keys: list[str] = []
    continued = False
    for raw in text.splitlines():
        line = raw.strip()
        if continued:
            continued = line.endswith("\\")
            continue
        if not line or line[0] in "#!":
            continue
        continued = line.endswith("\\")
        match = _PROPERTY_KEY_RE.match(line)
        if not match:
            continue
        key = re.sub(r"\\(.)", r"\1", match.group(1))
        if key:
            keys.append(key)
    return keys


def bundle_candidates(basename: str, locale: str | None) -> list[str]:
    """Bundle file names from most to least specific, e.g. name_pt_BR, name_pt, name."""

    names = [basename]
    parts = [p for p in (locale or "").replace("-", "_").split("_") if p]
    for index in range(len(parts)):
        names.append("_".join([basename, *parts[: index + 1]]))
    return [name + BUNDLE_SUFFIX for name in reversed(names)]


def _read_bundle_file(directory: Path | None, filename: str) -> str | None:
    if directory is None:
        resource = resources.files("tagcloud").joinpath("data").joinpath(filename)
        if not resource.is_file():
            return None
        return resource.read_text(encoding="utf-8")
    path = directory / filename
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("dictionary bundle read failed: %s", path, exc_info=exc)
        return None


def load_bundle_terms(
    locale: str | None = None,
    *,
    directory: str | os.PathLike[str] | None = None,
    basename: str = DEFAULT_BUNDLE,
) -> set[str]:
    """Collect the keys of a locale-keyed properties bundle and its parents.

    Without ``directory`` the bundles shipped in ``tagcloud/data`` are used.
    """

    base_dir = Path(directory).expanduser() if directory is not None else None
    terms: set[str] = set()
    found = False
    for filename in bundle_candidates(basename, locale):
        text = _read_bundle_file(base_dir, filename)
        if text is None:
            continue
        found = True
        terms.update(parse_properties_keys(text))
    if not found:
        raise FileNotFoundError(f"no dictionary bundle '{basename}' for locale {locale!r}")
    logger.debug("loaded %d dictionary terms for locale %s", len(terms), locale)
    return terms


class DictionaryFilter(TagFilter):
    """Rejects tags whose exact name is in a denylist.

    The denylist can be replaced at any time, so this filter compares and hashes
    by identity.
    """

    kind = "dictionary"

    def __init__(self, terms: Iterable[str | None] | None = None) -> None:
        self._terms: set[str] = set()
        if terms is not None:
            self.update(terms)

    @classmethod
    def from_lines(cls, source: str | os.PathLike[str] | Iterable[str]) -> DictionaryFilter:
        """Build a filter from the lines of ``source`` (see :func:`read_lines`)."""

        flt = cls()
        flt.update_from_lines(source)
        return flt

    @classmethod
    def from_bundle(
        cls,
        locale: str | None = None,
        *,
        directory: str | os.PathLike[str] | None = None,
        basename: str = DEFAULT_BUNDLE,
    ) -> DictionaryFilter:
        flt = cls()
        flt.update_from_bundle(locale, directory=directory, basename=basename)
        return flt

    @property
    def terms(self) -> frozenset[str]:
        return frozenset(self._terms)

    def update(self, terms: Iterable[str | None]) -> None:
        self._terms = {term for term in terms if term}

    def update_from_lines(self, source: str | os.PathLike[str] | Iterable[str]) -> None:
        self.update(read_lines(source))

    def update_from_bundle(
        self,
        locale: str | None = None,
        *,
        directory: str | os.PathLike[str] | None = None,
        basename: str = DEFAULT_BUNDLE,
    ) -> None:
        self.update(load_bundle_terms(locale, directory=directory, basename=basename))

    def accept(self, element: Tag | None) -> bool:
        if element is None:
            return True
        return element.name not in self._terms

    def _params(self) -> tuple[Any, ...]:
        return (sorted(self._terms),)

    __eq__ = object.__eq__
    __hash__ = object.__hash__
