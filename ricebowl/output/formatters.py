"""Formatters for survival plan output (JSON and Markdown)."""

import json
from typing import Any, Dict, List, Optional, Sequence

from ricebowl.data_layer.models import (
    GroceryTask,
    NotificationIntent,
    PrepTask,
    Recipe,
    RiceRuleViolation,
)
from ricebowl.planning.survival_planner import SurvivalPlanOutput

MEAL_LABELS = {
    "breakfast": "Breakfast",
    "lunch": "Lunch",
    "dinner": "Dinner",
}


def format_quantity(quantity: float) -> str:
    """Format a quantity, dropping .0 for whole numbers (e.g. 2 or 1.5)."""
    if quantity == int(quantity):
        return str(int(quantity))
    return f"{quantity:.2f}".rstrip("0").rstrip(".")


def format_grocery_string(task: GroceryTask) -> str:
    """Format a grocery task as e.g. "200 g rice"."""
    qty = format_quantity(task.quantity)
    if task.unit:
        return f"{qty} {task.unit} {task.ingredient}"
    return f"{qty} {task.ingredient}"


def _recipe_label(recipe_id: Optional[str], recipes_by_id: Dict[str, Recipe]) -> str:
    if not recipe_id:
        return "Nothing planned"
    recipe = recipes_by_id.get(recipe_id)
    return recipe.name if recipe else recipe_id


def format_plan_markdown(
    result: SurvivalPlanOutput,
    recipes: Sequence[Recipe] = (),
) -> str:
    """Format a SurvivalPlanOutput as Markdown.

    Args:
        result: Output of generate_survival_plan
        recipes: Catalog used to show recipe names instead of ids

    Returns:
        Formatted Markdown string
    """
    plan = result.daily_plan
    recipes_by_id = {r.id: r for r in recipes}
    lines = [f"# Daily Plan for {plan.date}\n"]

    if plan.rice_rule_compliant:
        lines.append("✅ **Rice Rule satisfied**\n")
    else:
        lines.append("⚠️ **Rice Rule needs attention**\n")

    lines.append("## Meals")
    for meal, label in MEAL_LABELS.items():
        recipe_id = getattr(plan, f"{meal}_recipe_id")
        lines.append(f"- **{label}:** {_recipe_label(recipe_id, recipes_by_id)}")
    if plan.rice_rule_auto_added:
        added = _recipe_label(plan.rice_rule_auto_added, recipes_by_id)
        lines.append(f"- **Added for Rice Rule:** {added}")
    if plan.leftover_recipe_id:
        lines.append(f"- **Leftovers from:** {_recipe_label(plan.leftover_recipe_id, recipes_by_id)}")
    lines.append("")

    if result.rice_rule_violations:
        lines.append("## Rice Rule")
        for violation in result.rice_rule_violations:
            status = "fixed" if violation.auto_fix_recipe_id else "unresolved"
            lines.append(f"- {violation.meal}: {violation.message} ({status})")
        lines.append("")

    lines.append("## Grocery List")
    if result.grocery_list:
        for task in result.grocery_list:
            when = " (buy tonight)" if task.buy_tonight else ""
            lines.append(f"- [ ] {format_grocery_string(task)}{when}")
    else:
        lines.append("Nothing to buy.")
    lines.append("")

    if result.prep_tasks:
        lines.append("## Prep")
        for task in result.prep_tasks:
            lines.append(f"- {task.scheduled_time}: {task.description}")
        lines.append("")

    return "\n".join(lines)


def _grocery_json(task: GroceryTask) -> Dict[str, Any]:
    return {
        "id": task.id,
        "ingredient": task.ingredient,
        "quantity": task.quantity,
        "unit": task.unit,
        "is_completed": task.is_completed,
        "buy_tonight": task.buy_tonight,
        "display": format_grocery_string(task),
    }


def _prep_json(task: PrepTask) -> Dict[str, Any]:
    return {
        "id": task.id,
        "description": task.description,
        "recipe_id": task.recipe_id,
        "scheduled_time": task.scheduled_time,
        "is_soaking": task.is_soaking,
        "is_completed": task.is_completed,
    }


def _violation_json(violation: RiceRuleViolation) -> Dict[str, Any]:
    return {
        "meal": violation.meal,
        "recipe_id": violation.recipe_id,
        "issue": violation.issue,
        "auto_fix_recipe_id": violation.auto_fix_recipe_id,
        "message": violation.message,
    }


def _notification_json(intent: NotificationIntent) -> Dict[str, Any]:
    return {
        "id": intent.id,
        "user_id": intent.user_id,
        "type": intent.type,
        "title": intent.title,
        "body": intent.body,
        "data": intent.data,
        "scheduled_at": intent.scheduled_at.isoformat(),
        "is_critical": intent.is_critical,
        "is_persistent": intent.is_persistent,
        "max_per_day": intent.max_per_day,
    }


def format_plan_json(result: SurvivalPlanOutput) -> Dict[str, Any]:
    """Format a SurvivalPlanOutput as a JSON-ready dictionary."""
    plan = result.daily_plan
    grocery: List[Dict[str, Any]] = [_grocery_json(t) for t in result.grocery_list]
    prep: List[Dict[str, Any]] = [_prep_json(t) for t in result.prep_tasks]

    return {
        "daily_plan": {
            "id": plan.id,
            "user_id": plan.user_id,
            "date": plan.date,
            "breakfast_recipe_id": plan.breakfast_recipe_id,
            "lunch_recipe_id": plan.lunch_recipe_id,
            "dinner_recipe_id": plan.dinner_recipe_id,
            "snacks": list(plan.snacks),
            "rice_rule_compliant": plan.rice_rule_compliant,
            "rice_rule_auto_added": plan.rice_rule_auto_added,
            "breakfast_completed": plan.breakfast_completed,
            "lunch_completed": plan.lunch_completed,
            "dinner_completed": plan.dinner_completed,
            "lunch_eating_out": plan.lunch_eating_out,
            "dinner_eating_out": plan.dinner_eating_out,
            "cook_extra_for_tomorrow": plan.cook_extra_for_tomorrow,
            "leftover_recipe_id": plan.leftover_recipe_id,
            "grocery_tasks": [_grocery_json(t) for t in plan.grocery_tasks],
            "prep_tasks": [_prep_json(t) for t in plan.prep_tasks],
        },
        "grocery_list": grocery,
        "prep_tasks": prep,
        "notifications": [_notification_json(n) for n in result.notifications],
        "rice_rule_violations": [_violation_json(v) for v in result.rice_rule_violations],
    }


def format_plan_json_string(result: SurvivalPlanOutput, indent: int = 2) -> str:
    """Format a SurvivalPlanOutput as a JSON string."""
    return json.dumps(format_plan_json(result), indent=indent, ensure_ascii=False)
