from __future__ import annotations

__version__ = "0.1.0"

from .cloud import DEFAULT_WORD_PATTERN, Cloud, format_link  # noqa: E402
from .config import CloudConfig, load_config  # noqa: E402
from .dictionary import DictionaryFilter, load_bundle_terms  # noqa: E402
from .filters import (  # noqa: E402
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
    TagFilter,
)
from .tag import Rounding, Tag, by_name, by_score, by_score_desc  # noqa: E402
from .text_case import TagCase  # noqa: E402

__all__ = [
    "AcceptAll",
    "AcceptNone",
    "And",
    "Cloud",
    "CloudConfig",
    "DEFAULT_WORD_PATTERN",
    "DictionaryFilter",
    "Filter",
    "LengthFilter",
    "MaxLengthFilter",
    "MinLengthFilter",
    "NonNull",
    "Not",
    "Or",
    "RegExFilter",
    "Rounding",
    "Tag",
    "TagCase",
    "TagFilter",
    "__version__",
    "by_name",
    "by_score",
    "by_score_desc",
    "format_link",
    "load_bundle_terms",
    "load_config",
]
