# -*- coding: utf-8 -*-
"""
Response assembler.

Whatever order cards are added in, ``build()`` always applies:
    1. dedup by summary (case-insensitive, first wins; off by default)
    2. stable sort critical < warning < info (on by default)
    3. truncation to ``max_cards`` (10 by default)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Union

from cds_hooks.builders.suggestion import ActionBuilder
from cds_hooks.config.constants import (
    INDICATOR_CRITICAL,
    INDICATOR_INFO,
    INDICATOR_ORDER,
    INDICATOR_WARNING,
)
from cds_hooks.core.cards import Action, Card, HookResponse

__all__ = [
    "DEFAULT_MAX_CARDS",
    "ResponseAssembler",
    "ResponseStats",
    "create_response",
    "assemble_response",
    "create_empty_response",
    "get_response_stats",
]

DEFAULT_MAX_CARDS = 10


def _severity(card: Card) -> int:
    return INDICATOR_ORDER.get(card.indicator, INDICATOR_ORDER[INDICATOR_INFO])


def order_by_severity(cards: Iterable[Card]) -> List[Card]:
    # sorted() is stable, so ties keep insertion order
    return sorted(cards, key=_severity)


def dedupe_by_summary(cards: Iterable[Card]) -> List[Card]:
    seen = set()
    out: List[Card] = []
    for card in cards:
        key = card.summary.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(card)
    return out


class ResponseAssembler:
    def __init__(
        self,
        max_cards: int = DEFAULT_MAX_CARDS,
        sort_by_severity: bool = True,
        deduplicate_by_summary: bool = False,
    ):
        self.max_cards = max_cards
        self.sort_by_severity = sort_by_severity
        self.deduplicate_by_summary = deduplicate_by_summary
        self._cards: List[Card] = []
        self._system_actions: List[Action] = []

    # --------- cards ---------
    def add_card(self, card: Card) -> "ResponseAssembler":
        self._cards.append(card)
        return self

    def add_cards(self, cards: Iterable[Card]) -> "ResponseAssembler":
        self._cards.extend(cards)
        return self

    def add_card_if(self, condition: bool, card: Card) -> "ResponseAssembler":
        if condition:
            self._cards.append(card)
        return self

    # --------- system actions ---------
    def add_system_action(self, action: Union[Action, Dict[str, Any]]) -> "ResponseAssembler":
        """Actions applied by the EHR without user interaction."""
        if not isinstance(action, Action):
            action = ActionBuilder.from_dict(action).build()
        self._system_actions.append(action)
        return self

    def add_system_actions(self, actions: Iterable[Union[Action, Dict[str, Any]]]) -> "ResponseAssembler":
        for action in actions:
            self.add_system_action(action)
        return self

    # --------- options ---------
    def with_sort_by_severity(self, enabled: bool) -> "ResponseAssembler":
        self.sort_by_severity = enabled
        return self

    def with_deduplication(self, enabled: bool) -> "ResponseAssembler":
        self.deduplicate_by_summary = enabled
        return self

    # --------- inspection (pre-processing) ---------
    def card_count(self) -> int:
        return len(self._cards)

    def has_cards(self) -> bool:
        return bool(self._cards)

    def has_critical_cards(self) -> bool:
        return any(c.indicator == INDICATOR_CRITICAL for c in self._cards)

    def has_warning_cards(self) -> bool:
        return any(c.indicator == INDICATOR_WARNING for c in self._cards)

    # --------- build ---------
    def processed_cards(self) -> List[Card]:
        cards = list(self._cards)
        if self.deduplicate_by_summary:
            cards = dedupe_by_summary(cards)
        if self.sort_by_severity:
            cards = order_by_severity(cards)
        return cards[: max(self.max_cards, 0)]

    def build(self) -> HookResponse:
        return HookResponse(
            cards=self.processed_cards(),
            systemActions=list(self._system_actions) or None,
        )

    def build_empty(self) -> HookResponse:
        return HookResponse(cards=[])


def create_empty_response() -> HookResponse:
    return HookResponse(cards=[])


def create_response(cards: Iterable[Card]) -> HookResponse:
    """Default processing: sorted, at most 10 cards."""
    return ResponseAssembler().add_cards(cards).build()


def assemble_response(cards: Iterable[Card], max_cards: int = DEFAULT_MAX_CARDS) -> HookResponse:
    return ResponseAssembler(max_cards=max_cards).add_cards(cards).build()


@dataclass(frozen=True)
class ResponseStats:
    total_cards: int
    included_cards: int
    excluded_cards: int
    critical_count: int
    warning_count: int
    info_count: int


def get_response_stats(cards: List[Card], max_cards: int = DEFAULT_MAX_CARDS) -> ResponseStats:
    """Counts for the cards a default-configured assembler would emit."""
    included = order_by_severity(cards)[: max(max_cards, 0)]
    return ResponseStats(
        total_cards=len(cards),
        included_cards=len(included),
        excluded_cards=len(cards) - len(included),
        critical_count=sum(1 for c in included if c.indicator == INDICATOR_CRITICAL),
        warning_count=sum(1 for c in included if c.indicator == INDICATOR_WARNING),
        info_count=sum(1 for c in included if c.indicator == INDICATOR_INFO),
    )
