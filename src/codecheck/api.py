"""
codecheck.api
=============

Programmatic entrypoint for using codecheck as a backend engine.

Goals:
  - No argparse / CLI dependencies
  - Validate the inbound request contract once, at the edge
  - Stable, JSON-friendly outputs that match the bundled report schema

Non-goals:
  - Owning HTTP routing, auth or rate limiting; callers wrap this
  - Persisting reports; callers handle storage

Usage::

    from codecheck.api import analyze_source

    report, report_dict = analyze_source(code, categories=["security"])

Backends serving many requests should build one engine at startup and pass
it in, so tool probing happens once::

    engine = AnalysisEngine.create()
    report, report_dict = analyze_source(code, engine=engine)
"""

from __future__ import annotations

import dataclasses
import threading
from typing import Any, Iterable, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from codecheck.contracts.load import REPORT_SCHEMA, validate_instance
from codecheck.core.orchestrator import AnalysisEngine
from codecheck.model import Category
from codecheck.model.report import AnalysisReport
from codecheck.model.request import AnalysisOptions, AnalysisRequest

MAX_SOURCE_CHARS = 50_000

StandardProfile = Literal["c++11", "c++14", "c++17", "c++20", "c++23"]

__all__ = [
    "AnalysisOptionsModel",
    "AnalysisRequestModel",
    "MAX_SOURCE_CHARS",
    "analyze_source",
    "validate_instance",
]


class _ContractModel(BaseModel):
    # Accept both snake_case and the camelCase wire names.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class AnalysisOptionsModel(_ContractModel):
    include_warnings: bool = True
    include_hints: bool = True
    strict_mode: bool = False
    standard_profile: StandardProfile = "c++20"

    def to_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            include_warnings=self.include_warnings,
            include_hints=self.include_hints,
            strict_mode=self.strict_mode,
            standard_profile=self.standard_profile,
        )


class AnalysisRequestModel(_ContractModel):
    """Inbound request contract.

    Empty text is accepted here; the engine reports it as ``success=False``.
    Unknown category names are dropped, not rejected.
    """

    source_text: str = Field(max_length=MAX_SOURCE_CHARS)
    analysis_categories: Optional[list[str]] = None
    options: AnalysisOptionsModel = Field(default_factory=AnalysisOptionsModel)

    def to_request(self) -> AnalysisRequest:
        return AnalysisRequest.build(
            self.source_text,
            categories=self.analysis_categories,
            options=self.options.to_options(),
        )


# ── analyze_source ──────────────────────────────────────────────────


def analyze_source(
    source_text: str,
    categories: Optional[Iterable[Category | str]] = None,
    options: Optional[AnalysisOptions | Mapping[str, Any]] = None,
    *,
    engine: Optional[AnalysisEngine] = None,
    validate: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> tuple[AnalysisReport, dict[str, Any]]:
    """Analyze one snippet of C++ source text.

    Parameters
    ----------
    source_text:
        The untrusted source to analyze (at most 50 000 characters).
    categories:
        Category names or ``Category`` values.  ``None`` selects every
        category; an empty iterable runs nothing.
    options:
        ``AnalysisOptions`` or a mapping with the same keys (snake_case or
        camelCase).
    engine:
        A prebuilt engine.  If omitted, one is created (and tools probed)
        for this call.
    validate:
        If True, check the report dict against the bundled schema.

    Returns
    -------
    ``(AnalysisReport, report_dict)``
        The dataclass and the schema-aligned JSON dict.

    Raises
    ------
    pydantic.ValidationError
        If the request violates the inbound contract (too long, bad option).
    codecheck.errors.AnalysisCancelledError
        If *cancel_event* is set while the analysis is running.
    """
    if isinstance(options, AnalysisOptions):
        options = dataclasses.asdict(options)

    model = AnalysisRequestModel.model_validate(
        {
            "source_text": source_text,
            "analysis_categories": (
                None if categories is None
                else [c.value if isinstance(c, Category) else str(c) for c in categories]
            ),
            "options": dict(options or {}),
        }
    )

    eng = engine if engine is not None else AnalysisEngine.create()
    report = eng.analyze(model.to_request(), cancel_event=cancel_event)
    report_dict = report.to_dict()
    if validate:
        validate_instance(report_dict, REPORT_SCHEMA)
    return report, report_dict
