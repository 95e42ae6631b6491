"""Data models for the survival planning engine."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union


MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")

ISSUE_DRY_WITHOUT_DAL = "dry_without_dal"
ISSUE_NO_RICE_OPTION = "no_rice_option"


@dataclass
class UserProfile:
    """Represents user preferences relevant to planning."""

    id: str
    name: str = ""
    rice_preference: bool = False  # Gates the Rice Rule
    dietary_restrictions: List[str] = field(default_factory=list)
    cuisine_preference: str = "mixed"


@dataclass
class RecipeIngredient:
    """Represents an ingredient line in a recipe."""

    name: str
    quantity: float
    unit: str
    is_optional: bool = False  # Optional ingredients never count toward shortfalls
    substitutes: List[str] = field(default_factory=list)


@dataclass
class Recipe:
    """Immutable catalog entry."""

    id: str
    name: str
    time_tier: int  # 1, 10 or 30 minute class
    ingredients: List[RecipeIngredient] = field(default_factory=list)
    is_rice_friendly: bool = False  # Can be eaten with rice
    is_wet: bool = False  # Has gravy/curry
    is_dry: bool = False  # Dry dish (needs dal/curry with rice)
    is_premium: bool = False
    is_comfort_food: bool = False
    requires_soaking: bool = False
    soak_ingredient: Optional[str] = None
    soak_hours: float = 0.0
    description: str = ""
    steps: List[str] = field(default_factory=list)
    cuisine: str = ""

    def required_ingredients(self) -> List[RecipeIngredient]:
        """Return the non-optional ingredients."""
        return [ing for ing in self.ingredients if not ing.is_optional]


@dataclass
class PantryItem:
    """An entry in the user's pantry.

    quantity keeps whatever the user entered; consumers coerce it to a number
    and treat anything unparsable as zero.
    """

    ingredient_name: str
    quantity: Union[float, str, None] = 0.0
    unit: str = ""
    expiry_date: Optional[Union[date, datetime]] = None
    is_leftover: bool = False
    leftover_from_recipe_id: Optional[str] = None
    category: str = "other"


@dataclass
class GroceryTask:
    """An ingredient shortfall that needs buying."""

    id: str
    ingredient: str
    quantity: float
    unit: str
    is_completed: bool = False
    buy_tonight: bool = True


@dataclass
class PrepTask:
    """A scheduled preparation action."""

    id: str
    description: str
    recipe_id: str
    scheduled_time: str  # HH:MM
    is_soaking: bool = False
    is_completed: bool = False


@dataclass(frozen=True)
class RiceRuleViolation:
    """One non-compliant meal found by the Rice Rule validator."""

    meal: str
    recipe_id: str
    issue: str  # "dry_without_dal" | "no_rice_option"
    message: str
    auto_fix_recipe_id: Optional[str] = None


@dataclass
class NotificationIntent:
    """Something that should be shown to the user at a given time.

    Delivery is handled elsewhere; this only records what and when.
    """

    id: str
    type: str
    title: str
    body: str
    scheduled_at: datetime
    user_id: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    is_critical: bool = False
    is_persistent: bool = False
    max_per_day: int = 1
    sent_at: Optional[datetime] = None
    dismissed_at: Optional[datetime] = None
    suppress_until: Optional[datetime] = None


@dataclass
class DailyPlan:
    """A full day's plan keyed by (user_id, date)."""

    id: str
    user_id: str
    date: str  # ISO date format
    breakfast_recipe_id: Optional[str] = None
    lunch_recipe_id: Optional[str] = None
    dinner_recipe_id: Optional[str] = None
    snacks: List[str] = field(default_factory=list)

    # Rice Rule
    rice_rule_compliant: bool = False
    rice_rule_auto_added: Optional[str] = None

    # Status
    breakfast_completed: bool = False
    lunch_completed: bool = False
    dinner_completed: bool = False

    # Eating out / cook once, eat twice
    lunch_eating_out: bool = False
    dinner_eating_out: bool = False
    cook_extra_for_tomorrow: bool = False
    leftover_recipe_id: Optional[str] = None

    # Logistics
    grocery_tasks: List[GroceryTask] = field(default_factory=list)
    prep_tasks: List[PrepTask] = field(default_factory=list)

    @classmethod
    def empty(cls, user_id: str, plan_date: str) -> "DailyPlan":
        """Create the blank template for a user and date."""
        return cls(id=f"plan_{user_id}_{plan_date}", user_id=user_id, date=plan_date)

    def planned_recipe_ids(self) -> List[str]:
        """Recipe ids assigned to breakfast, lunch, dinner and the Rice Rule slot."""
        ids = [
            self.breakfast_recipe_id,
            self.lunch_recipe_id,
            self.dinner_recipe_id,
            self.rice_rule_auto_added,
        ]
        return [recipe_id for recipe_id in ids if recipe_id]
