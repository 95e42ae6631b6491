"""FastAPI server for the RiceBowl survival planner."""

import os
from datetime import date
from typing import Any, Dict, List, Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.models import DailyPlan, PantryItem, UserProfile
from ricebowl.data_layer.recipe_db import RecipeDB
from ricebowl.output.formatters import format_plan_json
from ricebowl.planning.rice_rule_validator import auto_fix_rice_rule, validate_rice_rule
from ricebowl.planning.soak_calculator import calculate_soak_reminder, is_too_late_to_soak
from ricebowl.planning.survival_planner import SurvivalPlanInput, generate_survival_plan


recipes_path = os.environ.get("RICEBOWL_RECIPES", "data/recipes/recipes.json")

app = FastAPI(title="RiceBowl Survival Planner API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PantryItemModel(BaseModel):
    ingredient_name: str
    quantity: Union[float, str, None] = 0.0
    unit: str = ""
    expiry_date: Optional[date] = None
    is_leftover: bool = False
    leftover_from_recipe_id: Optional[str] = None


class PlanRequest(BaseModel):
    user_id: str
    rice_preference: bool = False
    pantry: List[PantryItemModel] = Field(default_factory=list)
    current_date: str
    current_time: str


class RiceRuleRequest(BaseModel):
    rice_preference: bool = True
    lunch_recipe_id: Optional[str] = None
    dinner_recipe_id: Optional[str] = None
    rice_rule_auto_added: Optional[str] = None
    auto_fix: bool = True


class SoakRequestModel(BaseModel):
    soak_hours: float
    meal_type: str
    current_time: str
    current_date: str
    custom_meal_time: Optional[str] = None


def _load_recipes():
    return RecipeDB(recipes_path).get_all_recipes()


def _to_pantry_item(item: PantryItemModel) -> PantryItem:
    return PantryItem(
        ingredient_name=item.ingredient_name,
        quantity=item.quantity,
        unit=item.unit,
        expiry_date=item.expiry_date,
        is_leftover=item.is_leftover,
        leftover_from_recipe_id=item.leftover_from_recipe_id,
    )


@app.post("/api/plan")
def plan_day(request: PlanRequest) -> Dict[str, Any]:
    try:
        result = generate_survival_plan(
            SurvivalPlanInput(
                user=UserProfile(id=request.user_id, rice_preference=request.rice_preference),
                pantry_items=[_to_pantry_item(item) for item in request.pantry],
                available_recipes=_load_recipes(),
                current_date=request.current_date,
                current_time=request.current_time,
            )
        )
        return format_plan_json(result)
    except InputValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/api/rice-rule/validate")
def check_rice_rule(request: RiceRuleRequest) -> Dict[str, Any]:
    try:
        recipes = _load_recipes()
        plan = DailyPlan.empty("adhoc", "")
        plan.lunch_recipe_id = request.lunch_recipe_id
        plan.dinner_recipe_id = request.dinner_recipe_id
        plan.rice_rule_auto_added = request.rice_rule_auto_added

        user = UserProfile(id="adhoc", rice_preference=request.rice_preference)
        validation = validate_rice_rule(plan, recipes, user)
        violations = validation.violations
        fix = None
        if request.auto_fix and violations:
            result = auto_fix_rice_rule(violations, recipes)
            violations = result.violations
            fix = {
                "fix_applied": result.fix_applied,
                "added_recipe_id": result.added_recipe_id,
                "message": result.message,
            }

        return {
            "is_valid": validation.is_valid,
            "violations": [
                {
                    "meal": v.meal,
                    "recipe_id": v.recipe_id,
                    "issue": v.issue,
                    "auto_fix_recipe_id": v.auto_fix_recipe_id,
                    "message": v.message,
                }
                for v in violations
            ],
            "fix": fix,
        }
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/api/soak/reminder")
def soak_reminder(request: SoakRequestModel) -> Dict[str, Any]:
    try:
        reminder = calculate_soak_reminder(
            request.soak_hours,
            request.meal_type,
            request.current_time,
            custom_meal_time=request.custom_meal_time,
            current_date=request.current_date,
        )
        too_late = is_too_late_to_soak(
            request.soak_hours,
            request.meal_type,
            request.current_time,
            custom_meal_time=request.custom_meal_time,
            current_date=request.current_date,
        )
    except InputValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return {
        "reminder_time": reminder.reminder_time,
        "start_soaking_at": reminder.start_soaking_at.isoformat(),
        "meal_ready_at": reminder.meal_ready_at.isoformat(),
        "hours_required": reminder.hours_required,
        "is_urgent": reminder.is_urgent,
        "message": reminder.message,
        "too_late": too_late.too_late,
        "alternative_meal": too_late.alternative_meal,
    }


@app.get("/api/recipes")
def list_recipes() -> List[Dict[str, Any]]:
    try:
        return [
            {"id": r.id, "name": r.name, "time_tier": r.time_tier}
            for r in _load_recipes()
        ]
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
