"""Custom exceptions for the survival planning engine."""
from typing import Any


class InputValidationError(ValueError):
    """Raised when a caller passes malformed input (bad clock time, negative duration, ...)."""

    def __init__(self, field: str, value: Any, reason: str):
        """Initialize exception with the offending field.

        Args:
            field: Name of the argument that failed validation
            value: The rejected value
            reason: Human-readable explanation
        """
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class RecipeNotFoundError(KeyError):
    """Raised when a recipe id is not present in the catalog."""

    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe '{recipe_id}' not found in recipe catalog")
