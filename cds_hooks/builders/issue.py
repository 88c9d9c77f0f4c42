# -*- coding: utf-8 -*-
"""Turn rule-engine issues and recommendations into wire cards."""

from typing import Dict, Optional

from cds_hooks.builders.card import CardBuilder
from cds_hooks.builders.link import create_guideline_link, is_valid_url
from cds_hooks.builders.suggestion import SuggestionBuilder
from cds_hooks.config.constants import SOURCE_LABELS
from cds_hooks.core.cards import Card
from cds_hooks.rules.issues import Issue, Recommendation

__all__ = ["issue_detail", "issue_to_card", "recommendation_detail", "recommendation_to_card"]

PRESCRIBED_LABEL = "Prescribed Medication"
ORDER_LABEL = "Order"


def issue_detail(issue: Issue, subject_label: str = PRESCRIBED_LABEL) -> str:
    detail = issue.description
    if issue.rationale:
        detail += f"\n\n**Rationale:** {issue.rationale}"
    if issue.interacting:
        detail += f"\n\n**Interacting Medication:** {issue.interacting}"
    detail += f"\n\n**{subject_label}:** {issue.subject_display}"
    return detail


def issue_to_card(
    issue: Issue,
    subject_label: str = PRESCRIBED_LABEL,
    default_source: Optional[Dict[str, str]] = None,
) -> Card:
    source = issue.source or default_source or {"label": SOURCE_LABELS["MEDICATION_SAFETY"]}
    builder = (
        CardBuilder()
        .with_uuid(issue.id)
        .with_summary(issue.title)
        .with_indicator(issue.severity)
        .with_source(source)
        .with_detail(issue_detail(issue, subject_label))
    )
    if issue.suggestion is not None:
        suggestion = SuggestionBuilder().with_label(issue.suggestion.label)
        for action in issue.suggestion.actions:
            suggestion.add_action(action)
        builder.add_suggestion(suggestion.build())
    return builder.build()


def recommendation_detail(rec: Recommendation) -> str:
    detail = rec.description
    if rec.rationale:
        detail += f"\n\n**Rationale:** {rec.rationale}"
    if rec.actions:
        detail += "\n\n**Recommended Actions:**\n" + "\n".join(f"- {a.description}" for a in rec.actions)
    return detail


def recommendation_to_card(rec: Recommendation) -> Card:
    """Guideline-sourced recommendations also get a link to the guideline."""
    source = rec.source or {"label": SOURCE_LABELS["CARE_PLAN"]}
    builder = (
        CardBuilder()
        .with_uuid(rec.id)
        .with_summary(rec.title)
        .with_indicator(rec.indicator)
        .with_source(source)
        .with_detail(recommendation_detail(rec))
    )
    url = source.get("url")
    if url and is_valid_url(url):
        builder.add_link(create_guideline_link(source["label"], url))
    return builder.build()
