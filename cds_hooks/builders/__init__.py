# -*- coding: utf-8 -*-
"""Validating builders for CDS Hooks cards, suggestions, actions and links."""

from cds_hooks.builders.errors import (
    BuilderValidationError,
    CardValidationError,
    SuggestionValidationError,
    ActionValidationError,
    LinkValidationError,
)
from cds_hooks.builders.card import (
    CardBuilder,
    create_info_card,
    create_warning_card,
    create_critical_card,
)
from cds_hooks.builders.suggestion import (
    ActionBuilder,
    SuggestionBuilder,
    create_delete_suggestion,
    create_create_suggestion,
    create_update_suggestion,
)
from cds_hooks.builders.link import (
    LinkBuilder,
    create_absolute_link,
    create_smart_link,
    create_guideline_link,
)
from cds_hooks.builders.issue import issue_to_card, recommendation_to_card

__all__ = [
    "BuilderValidationError",
    "CardValidationError",
    "SuggestionValidationError",
    "ActionValidationError",
    "LinkValidationError",
    "CardBuilder",
    "create_info_card",
    "create_warning_card",
    "create_critical_card",
    "ActionBuilder",
    "SuggestionBuilder",
    "create_delete_suggestion",
    "create_create_suggestion",
    "create_update_suggestion",
    "LinkBuilder",
    "create_absolute_link",
    "create_smart_link",
    "create_guideline_link",
    "issue_to_card",
    "recommendation_to_card",
]
