"""Output formatting for survival plans."""

from ricebowl.output.formatters import (
    format_grocery_string,
    format_plan_json,
    format_plan_json_string,
    format_plan_markdown,
)

__all__ = [
    "format_grocery_string",
    "format_plan_json",
    "format_plan_json_string",
    "format_plan_markdown",
]
