"""Pantry snapshot loader."""
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.models import PantryItem

logger = logging.getLogger(__name__)


def _parse_expiry(value) -> Optional[date]:
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InputValidationError("expiry_date", value, "expected YYYY-MM-DD") from None


def parse_pantry_item(item_data: dict) -> PantryItem:
    """Parse a single pantry entry.

    quantity is kept as given (number or string); the planner coerces it.
    """
    return PantryItem(
        ingredient_name=item_data["ingredient_name"],
        quantity=item_data.get("quantity", 0),
        unit=item_data.get("unit", ""),
        expiry_date=_parse_expiry(item_data.get("expiry_date")),
        is_leftover=bool(item_data.get("is_leftover", False)),
        leftover_from_recipe_id=item_data.get("leftover_from_recipe_id"),
        category=item_data.get("category", "other"),
    )


class PantryDB:
    """Pantry snapshot loaded from JSON ({"pantry": [...]})."""

    def __init__(self, json_path: str):
        self.json_path = Path(json_path)
        with open(self.json_path, "r") as f:
            data = json.load(f)
        self._items: List[PantryItem] = [parse_pantry_item(d) for d in data.get("pantry", [])]
        logger.info("Loaded %d pantry items from %s", len(self._items), self.json_path)

    def get_all_items(self) -> List[PantryItem]:
        return self._items.copy()

    def get_leftovers(self) -> List[PantryItem]:
        return [item for item in self._items if item.is_leftover]
