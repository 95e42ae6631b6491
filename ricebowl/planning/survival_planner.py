"""Survival plan generator: builds a full day's plan from pantry, catalog and user.

Pipeline, in this order:
1. Leftover check (9 PM trigger)
2. Lunch planning (quick recipes, expiring ingredients first)
3. Dinner selection (Rice-First, best pantry coverage)
4. Rice Rule validation and auto-fix
5. Logistics (grocery shortfalls, soak prep tasks, soak alerts)

The generator is a pure function of its input. Missing data degrades to None
assignments and empty lists; nothing here raises for an empty catalog or
pantry.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ricebowl.clock import as_datetime, combine, format_clock, format_hours, parse_clock_time
from ricebowl.data_layer.models import (
    DailyPlan,
    GroceryTask,
    NotificationIntent,
    PantryItem,
    PrepTask,
    Recipe,
    RiceRuleViolation,
    UserProfile,
)
from ricebowl.notifications.generator import generate_notification
from ricebowl.planning.rice_rule_validator import (
    auto_fix_rice_rule,
    pantry_coverage,
    pantry_names,
    validate_rice_rule,
)
from ricebowl.planning.soak_calculator import calculate_soak_reminder

logger = logging.getLogger(__name__)

LEFTOVER_TRIGGER_HOUR = 21
EXPIRY_WINDOW_DAYS = 2
QUICK_TIME_TIER = 10
COMFORT_TIME_TIER = 30
COOK_EXTRA_MIN_TIER = 30
# Soak prep is always timed against dinner; the plan does not record which
# meal actually needs the soaked ingredient.
SOAK_MEAL_TYPE = "dinner"


@dataclass(frozen=True)
class LeftoverUpgrade:
    recipe_id: str
    description: str


LEFTOVER_UPGRADES: Dict[str, LeftoverUpgrade] = {
    "rice": LeftoverUpgrade("fried_rice", "Transform leftover rice into quick fried rice"),
    "dal": LeftoverUpgrade("dal_tadka", "Reheat with fresh tadka for enhanced flavor"),
    "roti": LeftoverUpgrade("roti_wrap", "Make wraps with available fillings"),
    "vegetables": LeftoverUpgrade("stir_fry", "Quick stir-fry with fresh aromatics"),
}
GENERIC_LEFTOVER_DESCRIPTION = "Use up leftovers to prevent waste"


@dataclass
class SurvivalPlanInput:
    user: UserProfile
    pantry_items: List[PantryItem]
    available_recipes: List[Recipe]
    current_date: str  # YYYY-MM-DD
    current_time: str  # HH:MM


@dataclass
class SurvivalPlanOutput:
    daily_plan: DailyPlan
    grocery_list: List[GroceryTask] = field(default_factory=list)
    prep_tasks: List[PrepTask] = field(default_factory=list)
    notifications: List[NotificationIntent] = field(default_factory=list)
    rice_rule_violations: List[RiceRuleViolation] = field(default_factory=list)


@dataclass
class LeftoverCheckResult:
    has_leftovers: bool
    original_recipe_id: Optional[str] = None
    suggested_upgrade: Optional[str] = None  # Upgrade recipe id, None for the generic case
    upgrade_description: Optional[str] = None


@dataclass
class LunchPlanResult:
    recipe_id: Optional[str]
    eating_out: bool = False
    cook_extra: bool = False


@dataclass
class DinnerPlanResult:
    recipe_id: Optional[str]
    is_rice_based: bool = False


@dataclass
class LogisticsResult:
    grocery_tasks: List[GroceryTask] = field(default_factory=list)
    prep_tasks: List[PrepTask] = field(default_factory=list)
    notifications: List[NotificationIntent] = field(default_factory=list)


def generate_survival_plan(plan_input: SurvivalPlanInput) -> SurvivalPlanOutput:
    """Generate a complete daily plan with logistics.

    Args:
        plan_input: User, pantry snapshot, recipe catalog and the current
            date and time

    Returns:
        SurvivalPlanOutput with the plan and the derived grocery, prep,
        notification and Rice Rule lists
    """
    user = plan_input.user
    pantry = plan_input.pantry_items
    recipes = plan_input.available_recipes
    now = combine(plan_input.current_date, plan_input.current_time)

    plan = DailyPlan.empty(user.id, plan_input.current_date)
    violations: List[RiceRuleViolation] = []

    # Step 1: leftovers
    leftovers = check_leftovers(pantry, plan_input.current_time)
    if leftovers.has_leftovers:
        plan.lunch_recipe_id = leftovers.suggested_upgrade or leftovers.original_recipe_id
        plan.leftover_recipe_id = leftovers.original_recipe_id
        logger.debug(
            "Leftovers found, lunch seeded with %s (%s)",
            plan.lunch_recipe_id,
            leftovers.upgrade_description,
        )
    else:
        # Step 2: lunch
        lunch = plan_lunch(pantry, recipes, now)
        plan.lunch_recipe_id = lunch.recipe_id
        plan.lunch_eating_out = lunch.eating_out
        plan.cook_extra_for_tomorrow = lunch.cook_extra

    # Step 3: dinner
    dinner = select_dinner(user, pantry, recipes)
    plan.dinner_recipe_id = dinner.recipe_id

    # Step 4: Rice Rule
    validation = validate_rice_rule(plan, recipes, user)
    if validation.is_valid:
        plan.rice_rule_compliant = True
    else:
        fix = auto_fix_rice_rule(validation.violations, recipes)
        violations.extend(fix.violations)
        if fix.fix_applied:
            plan.rice_rule_auto_added = fix.added_recipe_id
            plan.rice_rule_compliant = True
            logger.debug(fix.message)
        else:
            logger.warning(
                "Plan %s has %d unresolved Rice Rule violation(s): %s",
                plan.id,
                len(violations),
                fix.message,
            )

    # Step 5: logistics
    logistics = generate_logistics(
        plan, recipes, pantry, plan_input.current_time, plan_input.current_date
    )
    plan.grocery_tasks = list(logistics.grocery_tasks)
    plan.prep_tasks = list(logistics.prep_tasks)

    return SurvivalPlanOutput(
        daily_plan=plan,
        grocery_list=logistics.grocery_tasks,
        prep_tasks=logistics.prep_tasks,
        notifications=logistics.notifications,
        rice_rule_violations=violations,
    )


def check_leftovers(pantry_items: Sequence[PantryItem], current_time: str) -> LeftoverCheckResult:
    """Step 1: suggest a leftover upgrade, only during the 21:00 hour."""
    hour, _ = parse_clock_time(current_time, "current_time")
    leftover_items = [item for item in pantry_items if item.is_leftover]

    if hour != LEFTOVER_TRIGGER_HOUR or not leftover_items:
        return LeftoverCheckResult(has_leftovers=False)

    for item in leftover_items:
        upgrade = LEFTOVER_UPGRADES.get(item.ingredient_name.lower())
        if upgrade is not None:
            return LeftoverCheckResult(
                has_leftovers=True,
                original_recipe_id=item.leftover_from_recipe_id,
                suggested_upgrade=upgrade.recipe_id,
                upgrade_description=upgrade.description,
            )

    return LeftoverCheckResult(
        has_leftovers=True,
        original_recipe_id=leftover_items[0].leftover_from_recipe_id,
        suggested_upgrade=None,
        upgrade_description=GENERIC_LEFTOVER_DESCRIPTION,
    )


def days_until_expiry(item: PantryItem, now: datetime) -> Optional[int]:
    """Whole calendar days (ceiling) until the item expires, None without a date."""
    if item.expiry_date is None:
        return None
    seconds = (as_datetime(item.expiry_date) - now).total_seconds()
    return math.ceil(seconds / 86400)


def expiring_items(pantry_items: Sequence[PantryItem], now: datetime) -> List[PantryItem]:
    """Items expiring within EXPIRY_WINDOW_DAYS (inclusive), already expired included."""
    expiring = []
    for item in pantry_items:
        days = days_until_expiry(item, now)
        if days is not None and days <= EXPIRY_WINDOW_DAYS:
            expiring.append(item)
    return expiring


def plan_lunch(
    pantry_items: Sequence[PantryItem],
    recipes: Sequence[Recipe],
    now: datetime,
) -> LunchPlanResult:
    """Step 2: a free 10-minute recipe, preferring one that uses expiring stock."""
    quick_recipes = [r for r in recipes if r.time_tier == QUICK_TIME_TIER and not r.is_premium]
    expiring_names = {item.ingredient_name.lower() for item in expiring_items(pantry_items, now)}

    if expiring_names:
        for recipe in quick_recipes:
            if any(ing.name.lower() in expiring_names for ing in recipe.ingredients):
                # Unreachable while lunch is limited to the 10-minute tier; kept
                # until the intended threshold is confirmed.
                cook_extra = recipe.time_tier >= COOK_EXTRA_MIN_TIER
                return LunchPlanResult(recipe_id=recipe.id, eating_out=False, cook_extra=cook_extra)

    return LunchPlanResult(
        recipe_id=quick_recipes[0].id if quick_recipes else None,
        eating_out=False,
        cook_extra=False,
    )


def select_dinner(
    user: UserProfile,
    pantry_items: Sequence[PantryItem],
    recipes: Sequence[Recipe],
) -> DinnerPlanResult:
    """Step 3: Rice-First comfort food with the best pantry coverage."""
    candidates = list(recipes)
    if user.rice_preference:
        candidates = [r for r in candidates if r.is_rice_friendly]

    comfort = [
        r for r in candidates if r.time_tier == COMFORT_TIME_TIER and r.is_comfort_food
    ]
    available = pantry_names(pantry_items)
    scored = [(recipe, pantry_coverage(recipe, available)) for recipe in comfort]
    scored.sort(key=lambda pair: pair[1], reverse=True)

    if scored:
        best = scored[0][0]
        return DinnerPlanResult(recipe_id=best.id, is_rice_based=best.is_rice_friendly)
    if candidates:
        return DinnerPlanResult(recipe_id=candidates[0].id, is_rice_based=False)
    return DinnerPlanResult(recipe_id=None, is_rice_based=False)


def coerce_quantity(value) -> float:
    """Pantry quantity as a float; anything unparsable counts as zero."""
    if isinstance(value, bool):
        return 0.0
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(quantity) or math.isinf(quantity):
        return 0.0
    return quantity


def _required_totals(planned: Sequence[Recipe]) -> Dict[str, Dict[str, object]]:
    totals: Dict[str, Dict[str, object]] = {}
    for recipe in planned:
        for ing in recipe.required_ingredients():
            key = ing.name.lower()
            if key in totals:
                totals[key]["quantity"] += ing.quantity
            else:
                totals[key] = {"quantity": ing.quantity, "unit": ing.unit}
    return totals


def generate_logistics(
    plan: DailyPlan,
    recipes: Sequence[Recipe],
    pantry_items: Sequence[PantryItem],
    current_time: str,
    current_date: str,
) -> LogisticsResult:
    """Step 5: grocery shortfalls plus soak prep tasks and alerts.

    Every grocery task is flagged buy_tonight; there is no buy-tomorrow rule.
    """
    result = LogisticsResult()
    planned_ids = set(plan.planned_recipe_ids())
    planned = [r for r in recipes if r.id in planned_ids]

    # Later pantry entries with the same name win.
    pantry_map = {item.ingredient_name.lower(): item for item in pantry_items}

    for ingredient, required in _required_totals(planned).items():
        in_pantry = pantry_map.get(ingredient)
        pantry_quantity = coerce_quantity(in_pantry.quantity) if in_pantry else 0.0
        if in_pantry is None or pantry_quantity < required["quantity"]:
            result.grocery_tasks.append(
                GroceryTask(
                    id=f"grocery_{ingredient}_{plan.date}",
                    ingredient=ingredient,
                    quantity=required["quantity"] - pantry_quantity,
                    unit=required["unit"],
                    buy_tonight=True,
                )
            )

    for recipe in planned:
        if not (recipe.requires_soaking and recipe.soak_ingredient):
            continue
        reminder = calculate_soak_reminder(
            recipe.soak_hours, SOAK_MEAL_TYPE, current_time, current_date=current_date
        )
        hours = format_hours(recipe.soak_hours)
        result.prep_tasks.append(
            PrepTask(
                id=f"prep_soak_{recipe.id}",
                description=f"Soak {recipe.soak_ingredient} for {hours} hours",
                recipe_id=recipe.id,
                scheduled_time=reminder.reminder_time,
                is_soaking=True,
            )
        )
        alert = generate_notification(
            "soak_alert",
            {
                "ingredient": recipe.soak_ingredient,
                "hours": hours,
                "meal": SOAK_MEAL_TYPE,
                "time": format_clock(reminder.meal_ready_at),
                "scheduledTime": reminder.reminder_time,
            },
            scheduled_at=reminder.start_soaking_at,
            user_id=plan.user_id,
        )
        result.notifications.append(replace(alert, id=f"notif_soak_alert_{recipe.id}_{plan.date}"))

    logger.debug(
        "Logistics for %s: %d grocery task(s), %d prep task(s)",
        plan.id,
        len(result.grocery_tasks),
        len(result.prep_tasks),
    )
    return result
