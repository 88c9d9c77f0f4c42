# -*- coding: utf-8 -*-
"""Suggestion and action builders."""

import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from cds_hooks.builders.errors import ActionValidationError, SuggestionValidationError
from cds_hooks.config.constants import ACTION_TYPES, UUID_SHAPE_REGEX
from cds_hooks.core.cards import Action, Suggestion

__all__ = [
    "ActionBuilder",
    "SuggestionBuilder",
    "create_delete_suggestion",
    "create_create_suggestion",
    "create_update_suggestion",
]

ActionLike = Union[Action, Dict[str, Any]]


class ActionBuilder:
    """
    One create/update/delete action.

    create/update carry a FHIR resource payload; delete carries the
    reference of the resource to remove.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "ActionBuilder":
        self._type: Optional[str] = None
        self._description: Optional[str] = None
        self._resource: Optional[Dict[str, Any]] = None
        self._resource_id: Optional[str] = None
        return self

    def with_type(self, action_type: str) -> "ActionBuilder":
        self._type = action_type
        return self

    def with_description(self, description: str) -> "ActionBuilder":
        self._description = description
        return self

    def with_resource(self, resource: Dict[str, Any]) -> "ActionBuilder":
        self._resource = resource
        return self

    def with_resource_id(self, resource_id: str) -> "ActionBuilder":
        self._resource_id = resource_id
        return self

    def create(self, resource: Dict[str, Any], description: str) -> "ActionBuilder":
        return self.with_type("create").with_resource(resource).with_description(description)

    def update(self, resource: Dict[str, Any], description: str) -> "ActionBuilder":
        return self.with_type("update").with_resource(resource).with_description(description)

    def delete(self, resource_id: str, description: str) -> "ActionBuilder":
        return self.with_type("delete").with_resource_id(resource_id).with_description(description)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionBuilder":
        b = cls()
        b._type = data.get("type")
        b._description = data.get("description")
        b._resource = data.get("resource")
        b._resource_id = data.get("resourceId")
        return b

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not self._type:
            errors.append("action type is required")
        elif self._type not in ACTION_TYPES:
            errors.append(f"action type must be 'create', 'update', or 'delete', got '{self._type}'")
        if not self._description or not str(self._description).strip():
            errors.append("description is required")
        if self._type in ("create", "update"):
            if not isinstance(self._resource, dict):
                errors.append(f"resource is required for {self._type} action")
            elif not self._resource.get("resourceType"):
                errors.append("resource.resourceType is required")
        if self._type == "delete" and (not self._resource_id or not str(self._resource_id).strip()):
            errors.append("resourceId is required for delete action")
        return errors

    def build(self) -> Action:
        errors = self.validate()
        if errors:
            raise ActionValidationError(errors)
        if self._type == "delete":
            return Action(type="delete", description=self._description, resourceId=self._resource_id)
        return Action(type=self._type, description=self._description, resource=self._resource)

    def try_build(self) -> Tuple[Optional[Action], List[str]]:
        try:
            return self.build(), []
        except ActionValidationError as exc:
            return None, exc.errors


class SuggestionBuilder:
    """
    Accumulates a suggestion label, id and actions.

    Actions may be added as built ``Action`` objects or raw dicts; raw
    dicts are validated together with the suggestion in ``build()``.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "SuggestionBuilder":
        self._label: Optional[str] = None
        self._uuid: Optional[str] = None
        self._is_recommended: Optional[bool] = None
        self._actions: List[ActionLike] = []
        return self

    def with_label(self, label: str) -> "SuggestionBuilder":
        self._label = label
        return self

    def with_uuid(self, value: str) -> "SuggestionBuilder":
        self._uuid = value
        return self

    def as_recommended(self, recommended: bool = True) -> "SuggestionBuilder":
        self._is_recommended = recommended
        return self

    def add_action(self, action: ActionLike) -> "SuggestionBuilder":
        self._actions.append(action)
        return self

    def add_create_action(self, resource: Dict[str, Any], description: str) -> "SuggestionBuilder":
        return self.add_action({"type": "create", "description": description, "resource": resource})

    def add_update_action(self, resource: Dict[str, Any], description: str) -> "SuggestionBuilder":
        return self.add_action({"type": "update", "description": description, "resource": resource})

    def add_delete_action(self, resource_id: str, description: str) -> "SuggestionBuilder":
        return self.add_action({"type": "delete", "description": description, "resourceId": resource_id})

    def _built_actions(self, errors: List[str]) -> List[Action]:
        actions: List[Action] = []
        for i, action in enumerate(self._actions):
            if isinstance(action, Action):
                actions.append(action)
                continue
            built, action_errors = ActionBuilder.from_dict(action or {}).try_build()
            errors.extend(f"actions[{i}].{e}" for e in action_errors)
            if built is not None:
                actions.append(built)
        return actions

    def build(self) -> Suggestion:
        errors: List[str] = []
        if not self._label or not self._label.strip():
            errors.append("label is required")
        if self._uuid is not None and not UUID_SHAPE_REGEX.match(self._uuid):
            errors.append("uuid must be a valid UUID format")
        actions = self._built_actions(errors)
        if errors:
            raise SuggestionValidationError(errors)
        return Suggestion(
            label=self._label,
            uuid=self._uuid or str(uuid.uuid4()),
            isRecommended=self._is_recommended,
            actions=actions or None,
        )

    def try_build(self) -> Tuple[Optional[Suggestion], List[str]]:
        try:
            return self.build(), []
        except SuggestionValidationError as exc:
            return None, exc.errors


def create_delete_suggestion(label: str, resource_id: str, description: str) -> Suggestion:
    return SuggestionBuilder().with_label(label).add_delete_action(resource_id, description).build()


def create_create_suggestion(
    label: str,
    resource: Dict[str, Any],
    description: str,
    recommended: bool = False,
) -> Suggestion:
    b = SuggestionBuilder().with_label(label).add_create_action(resource, description)
    if recommended:
        b.as_recommended()
    return b.build()


def create_update_suggestion(label: str, resource: Dict[str, Any], description: str) -> Suggestion:
    return SuggestionBuilder().with_label(label).add_update_action(resource, description).build()
