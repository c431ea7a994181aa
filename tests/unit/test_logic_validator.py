"""Unit tests for save-time logic tree validation."""

import pytest

from automation.application.services.logic_validator import LogicValidator, validate_logic
from automation.domain.exceptions import ValidationException


def _nested_not(depth: int) -> dict:
    tree: object = True
    for _ in range(depth):
        tree = {"!": [tree]}
    return tree  # type: ignore[return-value]


class TestLogicValidator:
    """Tests for LogicValidator.validate and ensure_valid."""

    def test_valid_tree(self, flag_high_value_tree: dict) -> None:
        result = validate_logic(flag_high_value_tree)
        assert result.valid is True
        assert result.error is None

    @pytest.mark.parametrize("tree", [None, "string", 42, [1, 2]])
    def test_non_object_rejected(self, tree: object) -> None:
        result = validate_logic(tree)
        assert result.valid is False
        assert result.error == "Logic tree must be a JSON object"

    def test_unknown_operator_rejected(self) -> None:
        result = validate_logic({"explode": [1]})
        assert result.valid is False
        assert "Unrecognized operation explode" in result.error

    def test_unknown_operator_in_untaken_branch_rejected(self) -> None:
        """A branch the empty-context dry run never reaches is still checked."""
        result = validate_logic({"if": [False, {"bogus": []}, None]})
        assert result.valid is False

    def test_wrong_arity_rejected(self) -> None:
        result = validate_logic({">": [1]})
        assert result.valid is False
        assert "expects 2 operand" in result.error

    def test_depth_at_limit_accepted(self) -> None:
        assert validate_logic(_nested_not(10), max_depth=10).valid is True

    def test_depth_over_limit_rejected(self) -> None:
        result = validate_logic(_nested_not(11), max_depth=10)
        assert result.valid is False
        assert result.error == "Logic tree too deep (max nesting depth is 10)"

    def test_missing_variables_do_not_fail_dry_run(self) -> None:
        """Arithmetic over unresolved variables yields None instead of an error."""
        tree = {"if": [{">": [{"*": [{"var": "amount"}, 2]}, 100]}, {"action": "FLAG_FOR_REVIEW", "config": {}}, None]}
        assert validate_logic(tree).valid is True

    def test_unknown_action_type_rejected(self) -> None:
        tree = {"if": [True, {"action": "DROP_EVERYTHING", "config": {}}, None]}
        result = validate_logic(tree)
        assert result.valid is False
        assert result.error == "Unknown action type: DROP_EVERYTHING"

    def test_unknown_action_type_in_untaken_branch_rejected(self) -> None:
        tree = {"if": [False, {"action": "FREEZE_ORDER", "config": {}}, {"action": "FREEZE_ALL", "config": {}}]}
        assert validate_logic(tree).error == "Unknown action type: FREEZE_ALL"

    def test_runtime_error_in_dry_run_rejected(self) -> None:
        result = validate_logic({"/": [1, 0]})
        assert result.valid is False
        assert result.error == "Division by zero"

    def test_ensure_valid_raises_validation_exception(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            LogicValidator().ensure_valid({"explode": []})
        assert exc_info.value.error_code == "VALIDATION_ERROR"
        assert exc_info.value.details == {"field": "logic_tree"}

    def test_ensure_valid_passes_valid_tree(self, flag_high_value_tree: dict) -> None:
        LogicValidator().ensure_valid(flag_high_value_tree)
