"""Application services: rule evaluation, logic validation, trigger filtering."""

from automation.application.services.logic_validator import LogicValidator, validate_logic
from automation.application.services.rule_evaluator import RuleEvaluator, evaluate
from automation.application.services.trigger_filter import matches_trigger_config

__all__ = [
    "LogicValidator",
    "RuleEvaluator",
    "evaluate",
    "matches_trigger_config",
    "validate_logic",
]
