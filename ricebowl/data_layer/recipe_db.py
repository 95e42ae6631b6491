"""Recipe database for loading the recipe catalog from JSON."""
import json
import logging
from pathlib import Path
from typing import List, Optional

from ricebowl.data_layer.exceptions import InputValidationError, RecipeNotFoundError
from ricebowl.data_layer.models import Recipe, RecipeIngredient

logger = logging.getLogger(__name__)


def parse_recipe(recipe_data: dict) -> Recipe:
    """Parse a single recipe from dictionary data.

    Args:
        recipe_data: Dictionary containing recipe data

    Returns:
        Recipe object

    Raises:
        InputValidationError: If time_tier is not a positive whole number of
            minutes or soak_hours is negative
    """
    time_tier = _parse_time_tier(recipe_data["time_tier"])
    soak_hours = float(recipe_data.get("soak_hours", 0.0))
    if soak_hours < 0:
        raise InputValidationError("soak_hours", recipe_data["soak_hours"], "must be >= 0")

    ingredients = [parse_ingredient(ing) for ing in recipe_data.get("ingredients", [])]
    soak_ingredient = recipe_data.get("soak_ingredient")

    return Recipe(
        id=str(recipe_data["id"]),
        name=recipe_data["name"],
        time_tier=time_tier,
        ingredients=ingredients,
        is_rice_friendly=bool(recipe_data.get("is_rice_friendly", False)),
        is_wet=bool(recipe_data.get("is_wet", False)),
        is_dry=bool(recipe_data.get("is_dry", False)),
        is_premium=bool(recipe_data.get("is_premium", False)),
        is_comfort_food=bool(recipe_data.get("is_comfort_food", False)),
        requires_soaking=bool(recipe_data.get("requires_soaking", False)),
        soak_ingredient=str(soak_ingredient) if soak_ingredient else None,
        soak_hours=soak_hours,
        description=recipe_data.get("description", ""),
        steps=list(recipe_data.get("steps", [])),
        cuisine=recipe_data.get("cuisine", ""),
    )


def _parse_time_tier(value) -> int:
    """Positive whole number of minutes; 30, 30.0 and "30" are all accepted."""
    try:
        minutes = float(value)
        whole = not isinstance(value, bool) and minutes.is_integer()
    except (TypeError, ValueError):
        whole = False
    if not whole or minutes <= 0:
        raise InputValidationError("time_tier", value, "expected a positive whole number of minutes")
    return int(minutes)


def parse_ingredient(ing_data: dict) -> RecipeIngredient:
    """Parse a single recipe ingredient from dictionary data."""
    return RecipeIngredient(
        name=ing_data["name"],
        quantity=float(ing_data.get("quantity", 0.0)),
        unit=ing_data.get("unit", ""),
        is_optional=bool(ing_data.get("is_optional", False)),
        substitutes=[str(s) for s in ing_data.get("substitutes", [])],
    )


class RecipeDB:
    """Read-only recipe catalog loaded from JSON."""

    def __init__(self, json_path: str):
        """Initialize recipe database from JSON file.

        Args:
            json_path: Path to JSON file containing {"recipes": [...]}
        """
        self.json_path = Path(json_path)
        self._recipes: List[Recipe] = []
        self._load_recipes()

    def _load_recipes(self):
        """Load recipes from JSON file."""
        with open(self.json_path, "r") as f:
            data = json.load(f)

        for recipe_data in data.get("recipes", []):
            self._recipes.append(parse_recipe(recipe_data))
        logger.info("Loaded %d recipes from %s", len(self._recipes), self.json_path)

    def get_all_recipes(self) -> List[Recipe]:
        """Get all recipes in catalog order.

        Returns:
            Copy of the recipe list
        """
        return self._recipes.copy()

    def get_recipe_by_id(self, recipe_id: str) -> Optional[Recipe]:
        """Get a recipe by its ID.

        Args:
            recipe_id: Unique recipe identifier

        Returns:
            Recipe object if found, None otherwise
        """
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def require_recipe(self, recipe_id: str) -> Recipe:
        """Like get_recipe_by_id but raises RecipeNotFoundError when missing."""
        recipe = self.get_recipe_by_id(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe
