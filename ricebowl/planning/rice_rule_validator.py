"""Rice Rule: a rice-friendly dry dish must not be served without a wet dish.

For users with the rice preference, rice plus a dry sabzi with no dal or
curry alongside is an incomplete meal. This module detects that per meal slot
and proposes a quick dal/curry/sambar to repair it.

Pure functions over a plan, the injected catalog and the user. No state.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ricebowl.data_layer.models import (
    ISSUE_DRY_WITHOUT_DAL,
    DailyPlan,
    PantryItem,
    Recipe,
    RiceRuleViolation,
    UserProfile,
)

logger = logging.getLogger(__name__)

# Breakfast and snacks are not subject to the rule.
CHECKED_MEALS = ("lunch", "dinner")

WET_DISH_KEYWORDS = ("dal", "curry", "sambar")
MAX_FIX_TIME_TIER = 30
MAX_SUGGESTIONS = 3


@dataclass
class RiceRuleValidationResult:
    is_valid: bool
    violations: List[RiceRuleViolation] = field(default_factory=list)


@dataclass
class AutoFixResult:
    """Outcome of an auto-fix attempt.

    violations is a new list; the input list is never modified.
    """

    fix_applied: bool
    added_recipe_id: Optional[str]
    message: str
    violations: List[RiceRuleViolation] = field(default_factory=list)


def needs_wet_accompaniment(recipe: Recipe) -> bool:
    """True for rice-friendly dry dishes that are not also wet."""
    return recipe.is_rice_friendly and recipe.is_dry and not recipe.is_wet


def _has_wet_accompaniment(plan: DailyPlan, recipe_map: Dict[str, Recipe]) -> bool:
    # Only the auto-added slot counts; side dishes are not modelled.
    if not plan.rice_rule_auto_added:
        return False
    added = recipe_map.get(plan.rice_rule_auto_added)
    return added is not None and added.is_wet


def validate_rice_rule(
    plan: DailyPlan,
    recipes: Sequence[Recipe],
    user: UserProfile,
) -> RiceRuleValidationResult:
    """Check lunch and dinner of a plan against the Rice Rule.

    Args:
        plan: Daily plan to check (not modified)
        recipes: Catalog used to resolve recipe ids
        user: User profile; the rule only applies with rice_preference

    Returns:
        RiceRuleValidationResult; is_valid is True iff there are no violations
    """
    if not user.rice_preference:
        return RiceRuleValidationResult(is_valid=True, violations=[])

    recipe_map = {recipe.id: recipe for recipe in recipes}
    violations: List[RiceRuleViolation] = []

    for meal in CHECKED_MEALS:
        recipe_id = getattr(plan, f"{meal}_recipe_id")
        if not recipe_id:
            continue
        recipe = recipe_map.get(recipe_id)
        if recipe is None:
            continue

        if needs_wet_accompaniment(recipe) and not _has_wet_accompaniment(plan, recipe_map):
            violations.append(
                RiceRuleViolation(
                    meal=meal,
                    recipe_id=recipe_id,
                    issue=ISSUE_DRY_WITHOUT_DAL,
                    message=(
                        f"{recipe.name} is a dry dish. "
                        "Add dal or curry for a complete meal with rice."
                    ),
                )
            )

    return RiceRuleValidationResult(is_valid=len(violations) == 0, violations=violations)


def _is_quick_dal(recipe: Recipe) -> bool:
    name = recipe.name.lower()
    return any(keyword in name for keyword in WET_DISH_KEYWORDS)


def auto_fix_rice_rule(
    violations: Sequence[RiceRuleViolation],
    recipes: Sequence[Recipe],
) -> AutoFixResult:
    """Pick one quick dal/curry/sambar to resolve every violation.

    Eligible dishes are wet, free and at most 30-minute tier; among those only
    dal, curry or sambar by name are considered, fastest tier first with
    catalog order breaking ties. No other wet dish is used as a fallback.
    """
    if not violations:
        return AutoFixResult(
            fix_applied=False, added_recipe_id=None, message="No violations to fix"
        )

    wet_dishes = [
        r for r in recipes if r.is_wet and not r.is_premium and r.time_tier <= MAX_FIX_TIME_TIER
    ]
    quick_dals = sorted((r for r in wet_dishes if _is_quick_dal(r)), key=lambda r: r.time_tier)

    if not quick_dals:
        logger.debug("No dal/curry/sambar among %d wet dishes", len(wet_dishes))
        return AutoFixResult(
            fix_applied=False,
            added_recipe_id=None,
            message="No suitable dal/curry found. Please add one manually.",
            violations=list(violations),
        )

    selected = quick_dals[0]
    return AutoFixResult(
        fix_applied=True,
        added_recipe_id=selected.id,
        message=f"Added {selected.name} to complete the meal",
        violations=[replace(v, auto_fix_recipe_id=selected.id) for v in violations],
    )


def pantry_names(pantry_items: Iterable[Union[str, PantryItem]]) -> set:
    """Lowercased ingredient names from plain names or PantryItem entries."""
    names = set()
    for item in pantry_items:
        name = item.ingredient_name if isinstance(item, PantryItem) else str(item)
        names.add(name.lower())
    return names


def pantry_coverage(recipe: Recipe, available: set) -> float:
    """Fraction of required ingredients present in `available` (lowercased names).

    A recipe with no required ingredients scores 0.0.
    """
    required = recipe.required_ingredients()
    if not required:
        return 0.0
    present = sum(1 for ing in required if ing.name.lower() in available)
    return present / len(required)


def suggest_wet_dishes(
    dry_recipe: Recipe,
    recipes: Sequence[Recipe],
    pantry_items: Iterable[Union[str, PantryItem]],
) -> List[Recipe]:
    """Top three free wet dishes ranked by how much of them the pantry covers.

    The ranking does not depend on dry_recipe itself; it only names the dish
    being paired.
    """
    available = pantry_names(pantry_items)
    scored = [
        (recipe, pantry_coverage(recipe, available))
        for recipe in recipes
        if recipe.is_wet and not recipe.is_premium
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [recipe for recipe, _ in scored[:MAX_SUGGESTIONS]]


def is_valid_combination(
    main_recipe: Recipe,
    side_recipe: Optional[Recipe],
    includes_rice: bool,
) -> bool:
    """Whether main + optional side is acceptable when served with or without rice."""
    if not includes_rice:
        return True
    if main_recipe.is_wet:
        return True
    if main_recipe.is_dry:
        return side_recipe is not None and side_recipe.is_wet
    return True
