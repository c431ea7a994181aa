"""Unit tests for workflow definition and result schemas."""

import pytest
from pydantic import ValidationError

from automation.application.dtos.workflow import ExecutionResult, WorkflowActionDetail
from automation.schemas.workflow import ExecutionResultResponse, TriggerConfig, WorkflowDefinition


class TestWorkflowDefinition:
    """Save-time validation of workflow definitions."""

    def test_valid_definition(self, flag_high_value_tree: dict) -> None:
        definition = WorkflowDefinition(
            name="High value orders",
            trigger="ORDER_CREATED",
            logic_tree=flag_high_value_tree,
            priority=10,
        )
        assert definition.trigger == "ORDER_CREATED"
        assert definition.status == "DRAFT"
        assert definition.is_active is False

    def test_invalid_logic_tree_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unrecognized operation explode"):
            WorkflowDefinition(name="x", trigger="ORDER_CREATED", logic_tree={"explode": []})

    def test_unknown_trigger_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WorkflowDefinition(name="x", trigger="ORDER_SHIPPED", logic_tree={"==": [1, 1]})

    @pytest.mark.parametrize("priority", [-1, 101])
    def test_priority_out_of_range_rejected(self, priority: int) -> None:
        with pytest.raises(ValidationError):
            WorkflowDefinition(name="x", trigger="ORDER_CREATED", logic_tree={"==": [1, 1]}, priority=priority)

    def test_name_length_bounds(self) -> None:
        with pytest.raises(ValidationError):
            WorkflowDefinition(name="", trigger="ORDER_CREATED", logic_tree={"==": [1, 1]})
        with pytest.raises(ValidationError):
            WorkflowDefinition(name="n" * 101, trigger="ORDER_CREATED", logic_tree={"==": [1, 1]})


def test_trigger_config_logic_must_be_and_or() -> None:
    """logic accepts AND or OR only."""
    assert TriggerConfig(enabled=True, logic="OR").logic == "OR"
    with pytest.raises(ValidationError):
        TriggerConfig(logic="XOR")


def test_execution_result_response_from_dto() -> None:
    """Response model reads the ExecutionResult dataclass attributes."""
    result = ExecutionResult(
        success=True,
        actions=["FREEZE_ORDER"],
        details=[WorkflowActionDetail("wf_1", "Freeze", "FREEZE_ORDER", {"reason": "fraud"})],
        workflows_executed=2,
        execution_time_ms=12,
    )
    response = ExecutionResultResponse.model_validate(result)

    assert response.actions == ["FREEZE_ORDER"]
    assert response.details[0].config == {"reason": "fraud"}
    assert response.model_dump()["workflows_executed"] == 2
    assert result.to_dict()["details"][0]["workflow_id"] == "wf_1"
