# -*- coding: utf-8 -*-
"""Validation errors raised by the card/suggestion/action/link builders."""

from typing import Iterable, List


class BuilderValidationError(ValueError):
    """Aggregated validation failure; ``errors`` lists every violation."""

    kind = "Builder"

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__(f"{self.kind} validation failed: {'; '.join(self.errors)}")


class CardValidationError(BuilderValidationError):
    kind = "Card"


class SuggestionValidationError(BuilderValidationError):
    kind = "Suggestion"


class ActionValidationError(BuilderValidationError):
    kind = "Action"


class LinkValidationError(BuilderValidationError):
    kind = "Link"
