#!/usr/bin/env python3
"""Command-line interface for the RiceBowl survival planner."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

import yaml

from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.pantry_db import PantryDB
from ricebowl.data_layer.recipe_db import RecipeDB
from ricebowl.data_layer.user_profile import UserProfileLoader
from ricebowl.output.formatters import format_plan_json_string, format_plan_markdown
from ricebowl.planning.survival_planner import SurvivalPlanInput, generate_survival_plan

logger = logging.getLogger("ricebowl.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a daily survival plan from your pantry and recipe catalog"
    )
    parser.add_argument(
        "--profile",
        type=str,
        default="config/user_profile.yaml",
        help="Path to user profile YAML file (default: config/user_profile.yaml)",
    )
    parser.add_argument(
        "--recipes",
        type=str,
        default="data/recipes/recipes.json",
        help="Path to recipes JSON file (default: data/recipes/recipes.json)",
    )
    parser.add_argument(
        "--pantry",
        type=str,
        default="data/pantry/pantry.json",
        help="Path to pantry JSON file (default: data/pantry/pantry.json)",
    )
    parser.add_argument("--date", type=str, help="Plan date YYYY-MM-DD (default: today)")
    parser.add_argument("--time", type=str, help="Current time HH:MM (default: now)")
    parser.add_argument(
        "--output",
        type=str,
        choices=["markdown", "json", "both"],
        default="markdown",
        help="Output format: markdown (default), json, or both",
    )
    parser.add_argument(
        "--output-file",
        type=str,
        help="Optional file path to save output (default: print to stdout)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    paths = {
        "User profile": Path(args.profile),
        "Recipes": Path(args.recipes),
        "Pantry": Path(args.pantry),
    }
    for label, path in paths.items():
        if not path.exists():
            logger.error("%s file not found: %s", label, path)
            return 1

    # The only place the wall clock is read.
    now = datetime.now()
    current_date = args.date or now.strftime("%Y-%m-%d")
    current_time = args.time or now.strftime("%H:%M")

    try:
        user = UserProfileLoader(str(paths["User profile"])).load()
        recipes = RecipeDB(str(paths["Recipes"])).get_all_recipes()
        pantry = PantryDB(str(paths["Pantry"])).get_all_items()

        result = generate_survival_plan(
            SurvivalPlanInput(
                user=user,
                pantry_items=pantry,
                available_recipes=recipes,
                current_date=current_date,
                current_time=current_time,
            )
        )
    except InputValidationError as e:
        logger.error("Invalid input: %s", e)
        return 1
    except yaml.YAMLError as e:
        logger.error("Could not parse user profile %s: %s", paths["User profile"], e)
        return 1
    except (KeyError, ValueError, OSError) as e:
        logger.exception("Failed to build plan: %s", e)
        return 1

    outputs = []
    if args.output in ("markdown", "both"):
        outputs.append((".md", format_plan_markdown(result, recipes)))
    if args.output in ("json", "both"):
        outputs.append((".json", format_plan_json_string(result, indent=2)))

    for suffix, text in outputs:
        if args.output_file:
            output_path = Path(args.output_file)
            if args.output == "both":
                output_path = output_path.with_suffix(suffix)
            output_path.write_text(text, encoding="utf-8")
            logger.info("Output saved to %s", output_path)
        else:
            print(text)

    if result.daily_plan.rice_rule_compliant:
        logger.info("Plan generated for %s", current_date)
    else:
        logger.warning("Plan generated with unresolved Rice Rule violations")
    return 0


if __name__ == "__main__":
    sys.exit(main())
