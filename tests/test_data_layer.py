"""Tests for data layer components."""
import pytest
import json
import yaml
from datetime import date
from pathlib import Path
from tempfile import NamedTemporaryFile

from ricebowl.data_layer.exceptions import InputValidationError, RecipeNotFoundError
from ricebowl.data_layer.models import DailyPlan, Recipe, RecipeIngredient
from ricebowl.data_layer.pantry_db import PantryDB
from ricebowl.data_layer.recipe_db import RecipeDB
from ricebowl.data_layer.user_profile import UserProfileLoader


def _write_temp(data, suffix=".json"):
    with NamedTemporaryFile(mode="w", suffix=suffix, delete=False) as f:
        if suffix == ".json":
            json.dump(data, f)
        else:
            yaml.dump(data, f)
        return f.name


class TestRecipeDB:
    """Tests for RecipeDB."""

    def test_load_recipes_from_json(self):
        """Test loading recipes from JSON file."""
        recipe_data = {
            "recipes": [
                {
                    "id": "r5",
                    "name": "Rajma Chawal",
                    "time_tier": 30,
                    "is_rice_friendly": True,
                    "is_wet": True,
                    "requires_soaking": True,
                    "soak_ingredient": "rajma",
                    "soak_hours": 8,
                    "ingredients": [
                        {"name": "rajma", "quantity": 150, "unit": "g"},
                        {"name": "coriander", "quantity": 1, "unit": "tbsp", "is_optional": True},
                    ],
                }
            ]
        }
        temp_path = _write_temp(recipe_data)

        try:
            db = RecipeDB(temp_path)
            recipes = db.get_all_recipes()
            assert len(recipes) == 1
            recipe = recipes[0]
            assert recipe.id == "r5"
            assert recipe.time_tier == 30
            assert recipe.is_wet is True
            assert recipe.is_dry is False
            assert recipe.requires_soaking is True
            assert recipe.soak_ingredient == "rajma"
            assert recipe.soak_hours == 8.0
            assert [ing.name for ing in recipe.required_ingredients()] == ["rajma"]
        finally:
            Path(temp_path).unlink()

    def test_flags_default_to_false(self):
        """Test that missing classification flags default to False."""
        temp_path = _write_temp({"recipes": [{"id": 7, "name": "Toast", "time_tier": "1"}]})

        try:
            recipe = RecipeDB(temp_path).get_all_recipes()[0]
            assert recipe.id == "7"
            assert recipe.time_tier == 1
            assert recipe.is_rice_friendly is False
            assert recipe.is_premium is False
            assert recipe.soak_ingredient is None
            assert recipe.ingredients == []
        finally:
            Path(temp_path).unlink()

    def test_get_recipe_by_id(self):
        """Test lookup by id and the raising variant."""
        temp_path = _write_temp(
            {"recipes": [{"id": "a", "name": "A", "time_tier": 10}, {"id": "b", "name": "B", "time_tier": 30}]}
        )

        try:
            db = RecipeDB(temp_path)
            assert db.get_recipe_by_id("b").name == "B"
            assert db.get_recipe_by_id("zzz") is None
            with pytest.raises(RecipeNotFoundError):
                db.require_recipe("zzz")
        finally:
            Path(temp_path).unlink()

    def test_get_all_recipes_returns_copy(self):
        temp_path = _write_temp({"recipes": [{"id": "a", "name": "A", "time_tier": 10}]})

        try:
            db = RecipeDB(temp_path)
            db.get_all_recipes().clear()
            assert len(db.get_all_recipes()) == 1
        finally:
            Path(temp_path).unlink()

    def test_any_positive_time_tier_loads(self):
        """Test that tiers other than 1/10/30 (e.g. a 20-minute dal) load."""
        temp_path = _write_temp(
            {"recipes": [{"id": "dal1", "name": "Dal Tadka", "time_tier": 20, "is_wet": True}]}
        )

        try:
            recipe = RecipeDB(temp_path).get_all_recipes()[0]
            assert recipe.time_tier == 20
            assert recipe.is_wet is True
        finally:
            Path(temp_path).unlink()

    @pytest.mark.parametrize("time_tier", [0, -10, 12.5, "quick", True])
    def test_invalid_time_tier(self, time_tier):
        temp_path = _write_temp({"recipes": [{"id": "a", "name": "A", "time_tier": time_tier}]})

        try:
            with pytest.raises(InputValidationError) as exc_info:
                RecipeDB(temp_path)
            assert exc_info.value.field == "time_tier"
        finally:
            Path(temp_path).unlink()

    def test_negative_soak_hours(self):
        recipe_data = {
            "recipes": [
                {
                    "id": "r5",
                    "name": "Rajma Chawal",
                    "time_tier": 30,
                    "requires_soaking": True,
                    "soak_ingredient": "rajma",
                    "soak_hours": -8,
                }
            ]
        }
        temp_path = _write_temp(recipe_data)

        try:
            with pytest.raises(InputValidationError) as exc_info:
                RecipeDB(temp_path)
            assert exc_info.value.field == "soak_hours"
        finally:
            Path(temp_path).unlink()

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            RecipeDB("/nonexistent/recipes.json")


class TestPantryDB:
    """Tests for PantryDB."""

    def test_load_pantry(self):
        pantry_data = {
            "pantry": [
                {"ingredient_name": "onion", "quantity": "3", "unit": "pieces"},
                {"ingredient_name": "tomato", "quantity": 1, "expiry_date": "2026-10-20"},
                {
                    "ingredient_name": "rice",
                    "quantity": "a bowl",
                    "is_leftover": True,
                    "leftover_from_recipe_id": "r5",
                },
            ]
        }
        temp_path = _write_temp(pantry_data)

        try:
            db = PantryDB(temp_path)
            items = db.get_all_items()
            assert len(items) == 3
            assert items[0].quantity == "3"
            assert items[0].expiry_date is None
            assert items[1].expiry_date == date(2026, 10, 20)
            assert items[2].category == "other"

            leftovers = db.get_leftovers()
            assert [item.ingredient_name for item in leftovers] == ["rice"]
            assert leftovers[0].leftover_from_recipe_id == "r5"
        finally:
            Path(temp_path).unlink()

    def test_bad_expiry_date(self):
        temp_path = _write_temp(
            {"pantry": [{"ingredient_name": "milk", "expiry_date": "next week"}]}
        )

        try:
            with pytest.raises(InputValidationError):
                PantryDB(temp_path)
        finally:
            Path(temp_path).unlink()


class TestUserProfileLoader:
    """Tests for UserProfileLoader."""

    def test_load_user_profile(self):
        """Test loading user profile from YAML."""
        profile_data = {
            "user": {"id": "u1", "name": "Ananya"},
            "preferences": {
                "rice_preference": True,
                "dietary_restrictions": ["no beef"],
                "cuisine_preference": "eastern_indian",
            },
        }
        temp_path = _write_temp(profile_data, suffix=".yaml")

        try:
            profile = UserProfileLoader(temp_path).load()
            assert profile.id == "u1"
            assert profile.name == "Ananya"
            assert profile.rice_preference is True
            assert profile.dietary_restrictions == ["no beef"]
            assert profile.cuisine_preference == "eastern_indian"
        finally:
            Path(temp_path).unlink()

    def test_preferences_are_optional(self):
        temp_path = _write_temp({"user": {"id": "u2"}}, suffix=".yaml")

        try:
            profile = UserProfileLoader(temp_path).load()
            assert profile.rice_preference is False
            assert profile.cuisine_preference == "mixed"
        finally:
            Path(temp_path).unlink()

    def test_empty_profile_file(self):
        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            temp_path = f.name

        try:
            with pytest.raises(InputValidationError):
                UserProfileLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()

    def test_user_section_must_be_mapping(self):
        temp_path = _write_temp({"user": "u1"}, suffix=".yaml")

        try:
            with pytest.raises(InputValidationError) as exc_info:
                UserProfileLoader(temp_path).load()
            assert exc_info.value.field == "user"
        finally:
            Path(temp_path).unlink()

    def test_missing_user_section(self):
        temp_path = _write_temp({"preferences": {"rice_preference": True}}, suffix=".yaml")

        try:
            with pytest.raises(KeyError):
                UserProfileLoader(temp_path).load()
        finally:
            Path(temp_path).unlink()


class TestModels:
    """Tests for model helpers."""

    def test_empty_plan(self):
        plan = DailyPlan.empty("u1", "2026-10-19")

        assert plan.id == "plan_u1_2026-10-19"
        assert plan.lunch_recipe_id is None
        assert plan.rice_rule_compliant is False
        assert plan.grocery_tasks == []

    def test_planned_recipe_ids_skip_empty_slots(self):
        plan = DailyPlan.empty("u1", "2026-10-19")
        plan.dinner_recipe_id = "r5"
        plan.rice_rule_auto_added = "r7"

        assert plan.planned_recipe_ids() == ["r5", "r7"]

    def test_required_ingredients(self):
        recipe = Recipe(
            id="r",
            name="r",
            time_tier=10,
            ingredients=[
                RecipeIngredient("a", 1, "g"),
                RecipeIngredient("b", 1, "g", is_optional=True),
            ],
        )
        assert [ing.name for ing in recipe.required_ingredients()] == ["a"]
