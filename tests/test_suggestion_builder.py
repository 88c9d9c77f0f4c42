# -*- coding: utf-8 -*-
import pytest

from cds_hooks.builders import (
    ActionBuilder,
    ActionValidationError,
    SuggestionBuilder,
    SuggestionValidationError,
    create_create_suggestion,
    create_delete_suggestion,
    create_update_suggestion,
)
from cds_hooks.core.cards import Action

LAB = {"resourceType": "ServiceRequest", "status": "draft"}


class TestActionBuilder:
    """create/update/delete action validation."""

    def test_delete_action(self):
        action = ActionBuilder().delete("MedicationRequest/1", "Remove it").build()
        assert action.to_dict() == {
            "type": "delete",
            "description": "Remove it",
            "resourceId": "MedicationRequest/1",
        }

    def test_create_requires_resource_type(self):
        _, errors = ActionBuilder().create({"status": "draft"}, "Add lab").try_build()
        assert errors == ["resource.resourceType is required"]

    def test_update_requires_resource(self):
        _, errors = ActionBuilder().with_type("update").with_description("Change").try_build()
        assert errors == ["resource is required for update action"]

    def test_unknown_type(self):
        with pytest.raises(ActionValidationError) as exc:
            ActionBuilder().with_type("merge").with_description("x").build()
        assert exc.value.errors == ["action type must be 'create', 'update', or 'delete', got 'merge'"]

    def test_missing_everything(self):
        _, errors = ActionBuilder().try_build()
        assert errors == ["action type is required", "description is required"]

    def test_from_dict(self):
        action = ActionBuilder.from_dict(
            {"type": "create", "description": "Add lab", "resource": LAB}
        ).build()
        assert action.resource == LAB
        assert action.resourceId is None


class TestSuggestionBuilder:
    """Suggestion construction."""

    def test_label_required(self):
        with pytest.raises(SuggestionValidationError) as exc:
            SuggestionBuilder().build()
        assert exc.value.errors == ["label is required"]

    def test_mixed_actions(self):
        suggestion = (
            SuggestionBuilder()
            .with_label("Swap")
            .add_action(Action(type="delete", description="Drop", resourceId="MedicationRequest/1"))
            .add_create_action(LAB, "Add lab")
            .build()
        )
        assert [a.type for a in suggestion.actions] == ["delete", "create"]

    def test_action_errors_are_indexed(self):
        _, errors = (
            SuggestionBuilder()
            .with_label("Fix")
            .add_delete_action("MedicationRequest/1", "ok")
            .add_update_action({}, "bad")
            .try_build()
        )
        assert errors == ["actions[1].resource.resourceType is required"]

    def test_uuid_shape_checked(self):
        _, errors = SuggestionBuilder().with_label("Fix").with_uuid("abc").try_build()
        assert errors == ["uuid must be a valid UUID format"]

    def test_no_actions_omitted_on_wire(self):
        data = SuggestionBuilder().with_label("Acknowledge").build().to_dict()
        assert "actions" not in data
        assert "isRecommended" not in data


class TestSuggestionHelpers:
    def test_delete_suggestion(self):
        s = create_delete_suggestion("Remove", "MedicationRequest/9", "Remove duplicate")
        assert s.actions[0].resourceId == "MedicationRequest/9"

    def test_create_suggestion_recommended(self):
        assert create_create_suggestion("Add", LAB, "Add lab", recommended=True).isRecommended is True
        assert create_create_suggestion("Add", LAB, "Add lab").isRecommended is None

    def test_update_suggestion(self):
        s = create_update_suggestion("Update", {"resourceType": "MedicationRequest"}, "Lower dose")
        assert s.actions[0].type == "update"
