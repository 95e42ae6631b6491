"""Soak scheduling: backward time arithmetic from meal time to soak start.

Example: an 8-hour soak for dinner at 20:00 means soaking starts at 12:00.

The meal is placed today if its clock time is still ahead of the current
time, otherwise tomorrow. Everything is computed relative to the caller's
current date and time; the system clock is never read.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from ricebowl.clock import (
    DateLike,
    combine,
    format_clock,
    format_hours,
    minutes_to_clock,
    parse_clock_time,
    time_to_minutes,
)
from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.models import MEAL_TYPES, Recipe

DEFAULT_MEAL_TIMES = {
    "breakfast": "08:00",
    "lunch": "13:00",
    "dinner": "20:00",
    "snack": "16:00",
}

# Order used to pick the fallback meal when soaking is too late.
MEAL_SEQUENCE = ("breakfast", "lunch", "snack", "dinner")

URGENT_HOURS = 1.0
NEAR_TERM_HOURS = 3.0


@dataclass(frozen=True)
class SoakReminder:
    """When to start soaking for one meal."""

    reminder_time: str  # HH:MM
    start_soaking_at: datetime
    meal_ready_at: datetime
    hours_required: float
    is_urgent: bool
    message: str


@dataclass(frozen=True)
class TooLateResult:
    too_late: bool
    alternative_meal: Optional[str]
    message: str


@dataclass(frozen=True)
class OvernightSoak:
    soak_at: str
    wake_up_check: str
    message: str


@dataclass(frozen=True)
class SoakRequest:
    """A recipe that needs soaking ahead of a given meal."""

    recipe_id: str
    name: str
    soak_hours: float
    soak_ingredient: str
    meal_type: str

    @classmethod
    def from_recipe(cls, recipe: Recipe, meal_type: str = "dinner") -> "SoakRequest":
        return cls(
            recipe_id=recipe.id,
            name=recipe.name,
            soak_hours=recipe.soak_hours,
            soak_ingredient=recipe.soak_ingredient or recipe.name,
            meal_type=meal_type,
        )


def _validate_meal_type(meal_type: str) -> None:
    if meal_type not in MEAL_TYPES:
        raise InputValidationError(
            "meal_type", meal_type, f"expected one of {', '.join(MEAL_TYPES)}"
        )


def _validate_soak_hours(soak_hours: float) -> None:
    if soak_hours is None or soak_hours < 0:
        raise InputValidationError("soak_hours", soak_hours, "must be >= 0")


def _meal_ready_at(now: datetime, meal_time: str) -> datetime:
    """Next occurrence of meal_time: today if still ahead of now, else tomorrow."""
    meal_hour, meal_minute = parse_clock_time(meal_time, "meal_time")
    meal_date = now.replace(hour=meal_hour, minute=meal_minute, second=0, microsecond=0)
    if (meal_hour, meal_minute) <= (now.hour, now.minute):
        meal_date += timedelta(days=1)
    return meal_date


def calculate_soak_reminder(
    soak_hours: float,
    meal_type: str,
    current_time: str,
    custom_meal_time: Optional[str] = None,
    *,
    current_date: DateLike,
) -> SoakReminder:
    """Calculate when to remind the user to start soaking.

    Args:
        soak_hours: Required soak duration (>= 0)
        meal_type: breakfast, lunch, dinner or snack
        current_time: Current clock time as HH:MM
        custom_meal_time: Optional HH:MM overriding the default meal time
        current_date: Date the current time belongs to

    Returns:
        SoakReminder with the soak start, meal time, urgency and message

    Raises:
        InputValidationError: On malformed times, unknown meal type or
            negative soak_hours
    """
    _validate_meal_type(meal_type)
    _validate_soak_hours(soak_hours)
    meal_time = custom_meal_time or DEFAULT_MEAL_TIMES[meal_type]

    now = combine(current_date, current_time)
    meal_ready_at = _meal_ready_at(now, meal_time)
    start_soaking_at = meal_ready_at - timedelta(hours=soak_hours)

    hours_until_soak = (start_soaking_at - now).total_seconds() / 3600
    is_urgent = hours_until_soak < URGENT_HOURS
    reminder_time = format_clock(start_soaking_at)
    hours_text = format_hours(soak_hours)

    if is_urgent:
        message = f"⚠️ URGENT: Start soaking NOW! You need {hours_text} hours for {meal_type}."
    elif hours_until_soak < NEAR_TERM_HOURS:
        message = (
            f"Reminder: Start soaking in {round(hours_until_soak * 60)} minutes "
            f"for {meal_type}."
        )
    else:
        message = (
            f"Prep ahead: Soak at {reminder_time} for {hours_text} hours "
            f"({meal_type} ready by {meal_time})."
        )

    return SoakReminder(
        reminder_time=reminder_time,
        start_soaking_at=start_soaking_at,
        meal_ready_at=meal_ready_at,
        hours_required=soak_hours,
        is_urgent=is_urgent,
        message=message,
    )


def next_meal_type(current: str) -> Optional[str]:
    """Next meal in MEAL_SEQUENCE, or None after the last slot of the day."""
    if current not in MEAL_SEQUENCE:
        return None
    index = MEAL_SEQUENCE.index(current)
    if index == len(MEAL_SEQUENCE) - 1:
        return None
    return MEAL_SEQUENCE[index + 1]


def is_too_late_to_soak(
    soak_hours: float,
    meal_type: str,
    current_time: str,
    custom_meal_time: Optional[str] = None,
    *,
    current_date: DateLike,
) -> TooLateResult:
    """Check whether the soak window for meal_type has already opened and passed."""
    reminder = calculate_soak_reminder(
        soak_hours, meal_type, current_time, custom_meal_time, current_date=current_date
    )
    now = combine(current_date, current_time)

    if reminder.start_soaking_at < now:
        next_meal = next_meal_type(meal_type)
        return TooLateResult(
            too_late=True,
            alternative_meal=next_meal,
            message=(
                f"Too late to soak for {meal_type}. "
                f"Consider this for {next_meal or 'tomorrow'} instead."
            ),
        )

    return TooLateResult(too_late=False, alternative_meal=None, message=reminder.message)


def get_all_soak_reminders(
    requests: Iterable[SoakRequest],
    current_time: str,
    current_date: DateLike,
) -> List[SoakReminder]:
    """Reminders for every request that needs soaking, earliest soak start first."""
    reminders = []
    for request in requests:
        if request.soak_hours <= 0:
            continue
        reminder = calculate_soak_reminder(
            request.soak_hours, request.meal_type, current_time, current_date=current_date
        )
        reminders.append(
            replace(reminder, message=f"Soak {request.soak_ingredient}: {reminder.message}")
        )
    return sorted(reminders, key=lambda r: r.start_soaking_at)


def calculate_overnight_soak(soak_hours: float, breakfast_time: str = "08:00") -> OvernightSoak:
    """Overnight schedule working backward from breakfast.

    The soak start wraps to the previous evening; the morning check is at
    half past the hour before breakfast.
    """
    _validate_soak_hours(soak_hours)
    breakfast_hour, _ = parse_clock_time(breakfast_time, "breakfast_time")
    soak_minutes = time_to_minutes(breakfast_time, "breakfast_time") - round(soak_hours * 60)
    soak_at = minutes_to_clock(soak_minutes)

    check_hour = breakfast_hour - 1 if breakfast_hour > 0 else 23
    wake_up_check = f"{check_hour:02d}:30"

    return OvernightSoak(
        soak_at=soak_at,
        wake_up_check=wake_up_check,
        message=(
            f"Soak at {soak_at} for {format_hours(soak_hours)}-hour prep. "
            f"Morning check: {wake_up_check}"
        ),
    )
