# -*- coding: utf-8 -*-
"""CDS Hooks 2.0 wire models (cards, suggestions, actions, links).

Instances are produced by the builders in ``cds_hooks.builders``, which run
all validation up front; the models themselves are frozen value objects.
Field names follow the wire format, so they are camelCase.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

Indicator = Literal["info", "warning", "critical"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation without unset optional fields."""
        return self.model_dump(exclude_none=True)


class Coding(_Frozen):
    system: str
    code: str
    display: Optional[str] = None


class Source(_Frozen):
    label: str
    url: Optional[str] = None
    icon: Optional[str] = None
    topic: Optional[Coding] = None


class Action(_Frozen):
    type: Literal["create", "update", "delete"]
    description: str
    resource: Optional[Dict[str, Any]] = None
    resourceId: Optional[str] = None


class Suggestion(_Frozen):
    label: str
    uuid: str
    isRecommended: Optional[bool] = None
    actions: Optional[List[Action]] = None


class Link(_Frozen):
    label: str
    url: str
    type: Literal["absolute", "smart"]
    appContext: Optional[str] = None


class OverrideReason(_Frozen):
    display: str
    code: Optional[Coding] = None


class Card(_Frozen):
    uuid: str
    summary: str
    indicator: Indicator
    source: Source
    detail: Optional[str] = None
    suggestions: Optional[List[Suggestion]] = None
    links: Optional[List[Link]] = None
    overrideReasons: Optional[List[OverrideReason]] = None
    selectionBehavior: Optional[Literal["at-most-one", "any"]] = None


class HookResponse(_Frozen):
    cards: List[Card]
    systemActions: Optional[List[Action]] = None
