"""Planning module: survival plan generation, Rice Rule and soak scheduling."""

from .rice_rule_validator import (
    auto_fix_rice_rule,
    is_valid_combination,
    suggest_wet_dishes,
    validate_rice_rule,
)
from .soak_calculator import (
    SoakRequest,
    calculate_overnight_soak,
    calculate_soak_reminder,
    get_all_soak_reminders,
    is_too_late_to_soak,
)
from .survival_planner import SurvivalPlanInput, SurvivalPlanOutput, generate_survival_plan

__all__ = [
    "generate_survival_plan",
    "SurvivalPlanInput",
    "SurvivalPlanOutput",
    "validate_rice_rule",
    "auto_fix_rice_rule",
    "suggest_wet_dishes",
    "is_valid_combination",
    "calculate_soak_reminder",
    "is_too_late_to_soak",
    "get_all_soak_reminders",
    "calculate_overnight_soak",
    "SoakRequest",
]
