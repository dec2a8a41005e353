"""Request-scoped inputs: options, the immutable request, and its session."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from . import Category

# Every session materializes the submitted text under this name.
SOURCE_FILENAME = "source.cpp"

STANDARD_PROFILES = ("c++11", "c++14", "c++17", "c++20", "c++23")


@dataclass(frozen=True, slots=True)
class AnalysisOptions:
    include_warnings: bool = True
    include_hints: bool = True
    strict_mode: bool = False
    standard_profile: str = "c++20"


@dataclass(frozen=True, slots=True)
class AnalysisRequest:
    """What to analyze and how.  Immutable for the lifetime of the request."""

    source_text: str
    requested_categories: frozenset[Category] = field(
        default_factory=lambda: frozenset(Category),
    )
    options: AnalysisOptions = field(default_factory=AnalysisOptions)

    @classmethod
    def build(
        cls,
        source_text: str,
        categories: Optional[Iterable[Category | str]] = None,
        options: Optional[AnalysisOptions] = None,
    ) -> "AnalysisRequest":
        """Build a request; ``categories=None`` selects every category."""
        parsed = frozenset(Category) if categories is None else Category.parse_many(categories)
        return cls(
            source_text=source_text,
            requested_categories=parsed,
            options=options or AnalysisOptions(),
        )


@dataclass(frozen=True, slots=True)
class AnalysisSession:
    """Isolated filesystem workspace owned by exactly one in-flight request."""

    session_id: str
    workspace_path: Path
    source_file_path: Path
