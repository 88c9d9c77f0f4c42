# -*- coding: utf-8 -*-
"""
Card builder.

Fields are collected with chained ``with_*``/``add_*`` calls and validated
all at once in ``build()``. Every violation is reported, not just the first.
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from cds_hooks.builders.errors import CardValidationError
from cds_hooks.builders.link import LinkBuilder
from cds_hooks.builders.suggestion import SuggestionBuilder
from cds_hooks.config.constants import (
    INDICATOR_CRITICAL,
    INDICATOR_INFO,
    INDICATOR_WARNING,
    INDICATORS,
    SELECTION_BEHAVIORS,
    UUID_SHAPE_REGEX,
)
from cds_hooks.core.cards import Card, Link, OverrideReason, Source, Suggestion

__all__ = [
    "CardBuilder",
    "create_info_card",
    "create_warning_card",
    "create_critical_card",
]

SourceLike = Union[Source, Dict[str, Any], str]


def _source_dict(source: SourceLike) -> Dict[str, Any]:
    if isinstance(source, Source):
        return source.model_dump(exclude_none=True)
    if isinstance(source, str):
        return {"label": source}
    return dict(source or {})


class CardBuilder:
    def __init__(self):
        self.reset()

    def reset(self) -> "CardBuilder":
        self._uuid: Optional[str] = None
        self._summary: Optional[str] = None
        self._detail: Optional[str] = None
        self._indicator: Optional[str] = None
        self._source: Optional[Dict[str, Any]] = None
        self._suggestions: List[Union[Suggestion, Dict[str, Any]]] = []
        self._links: List[Union[Link, Dict[str, Any]]] = []
        self._override_reasons: List[OverrideReason] = []
        self._selection_behavior: Optional[str] = None
        return self

    # --------- setters ---------
    def with_uuid(self, value: str) -> "CardBuilder":
        self._uuid = value
        return self

    def with_summary(self, summary: str) -> "CardBuilder":
        self._summary = summary
        return self

    def with_detail(self, detail: str) -> "CardBuilder":
        """Markdown body shown under the summary."""
        self._detail = detail
        return self

    def with_indicator(self, indicator: str) -> "CardBuilder":
        self._indicator = indicator
        return self

    def with_source(self, source: SourceLike) -> "CardBuilder":
        """Accepts a Source, a dict with at least ``label``, or a bare label."""
        self._source = _source_dict(source)
        return self

    def add_suggestion(self, suggestion: Union[Suggestion, Dict[str, Any]]) -> "CardBuilder":
        self._suggestions.append(suggestion)
        return self

    def with_suggestions(self, suggestions: List[Union[Suggestion, Dict[str, Any]]]) -> "CardBuilder":
        self._suggestions = list(suggestions)
        return self

    def add_link(self, link: Union[Link, Dict[str, Any]]) -> "CardBuilder":
        self._links.append(link)
        return self

    def with_links(self, links: List[Union[Link, Dict[str, Any]]]) -> "CardBuilder":
        self._links = list(links)
        return self

    def add_override_reason(self, display: str, code: Optional[Dict[str, str]] = None) -> "CardBuilder":
        self._override_reasons.append(OverrideReason(display=display, code=code))
        return self

    def with_selection_behavior(self, behavior: str) -> "CardBuilder":
        self._selection_behavior = behavior
        return self

    # --------- build ---------
    def _collect_suggestions(self, errors: List[str]) -> List[Suggestion]:
        out: List[Suggestion] = []
        for i, s in enumerate(self._suggestions):
            if isinstance(s, Suggestion):
                if not s.label.strip():
                    errors.append(f"suggestions[{i}].label is required")
                out.append(s)
                continue
            b = SuggestionBuilder().with_label(s.get("label"))
            if s.get("uuid") is not None:
                b.with_uuid(s["uuid"])
            if s.get("isRecommended") is not None:
                b.as_recommended(bool(s["isRecommended"]))
            for action in s.get("actions") or []:
                b.add_action(action)
            built, sub_errors = b.try_build()
            errors.extend(f"suggestions[{i}].{e}" for e in sub_errors)
            if built is not None:
                out.append(built)
        return out

    def _collect_links(self, errors: List[str]) -> List[Link]:
        out: List[Link] = []
        for i, link in enumerate(self._links):
            data = link.model_dump() if isinstance(link, Link) else dict(link or {})
            b = LinkBuilder().with_label(data.get("label")).with_url(data.get("url"))
            b.with_type(data.get("type"))
            if data.get("appContext") is not None:
                b.with_app_context(data["appContext"])
            built, sub_errors = b.try_build()
            errors.extend(f"links[{i}].{e}" for e in sub_errors)
            if built is not None:
                out.append(built)
        return out

    def build(self) -> Card:
        errors: List[str] = []

        if not self._summary or not self._summary.strip():
            errors.append("summary is required and cannot be empty")
        if not self._indicator:
            errors.append("indicator is required")
        elif self._indicator not in INDICATORS:
            errors.append(f"indicator must be 'info', 'warning', or 'critical', got '{self._indicator}'")
        if self._source is None:
            errors.append("source is required")
        elif not str(self._source.get("label") or "").strip():
            errors.append("source.label is required and cannot be empty")
        if self._uuid is not None and not UUID_SHAPE_REGEX.match(self._uuid):
            errors.append("uuid must be a valid UUID format")
        if self._selection_behavior is not None and self._selection_behavior not in SELECTION_BEHAVIORS:
            errors.append("selectionBehavior must be 'at-most-one' or 'any'")

        suggestions = self._collect_suggestions(errors)
        links = self._collect_links(errors)

        if errors:
            raise CardValidationError(errors)

        return Card(
            uuid=self._uuid or str(uuid.uuid4()),
            summary=self._summary,
            indicator=self._indicator,
            source=Source(**self._source),
            detail=self._detail,
            suggestions=suggestions or None,
            links=links or None,
            overrideReasons=self._override_reasons or None,
            selectionBehavior=self._selection_behavior,
        )

    def try_build(self) -> Tuple[Optional[Card], List[str]]:
        try:
            return self.build(), []
        except CardValidationError as exc:
            return None, exc.errors


def _simple_card(indicator: str, summary: str, source: SourceLike, detail: Optional[str]) -> Card:
    b = CardBuilder().with_summary(summary).with_indicator(indicator).with_source(source)
    if detail:
        b.with_detail(detail)
    return b.build()


def create_info_card(summary: str, source: SourceLike, detail: Optional[str] = None) -> Card:
    return _simple_card(INDICATOR_INFO, summary, source, detail)


def create_warning_card(summary: str, source: SourceLike, detail: Optional[str] = None) -> Card:
    return _simple_card(INDICATOR_WARNING, summary, source, detail)


def create_critical_card(summary: str, source: SourceLike, detail: Optional[str] = None) -> Card:
    return _simple_card(INDICATOR_CRITICAL, summary, source, detail)
