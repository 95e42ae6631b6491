"""Notification copy templates.

Placeholders are written as {{key}} and filled from the intent's data.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ricebowl.data_layer.exceptions import InputValidationError


@dataclass(frozen=True)
class NotificationTemplate:
    type: str
    title: str
    variations: Tuple[str, ...]  # First entry is the default body
    priority: str  # "critical", "high", "normal", "low"
    suppressible: bool
    max_per_day: int
    sound_enabled: bool


NOTIFICATION_TEMPLATES: Dict[str, NotificationTemplate] = {
    "grocery_scan": NotificationTemplate(
        type="grocery_scan",
        title="📋 Quick Supply Check",
        variations=(
            "Tomorrow's menu needs: {{items}}. Got 15 min before the stores close?",
            "Missing {{itemCount}} items for tomorrow. Quick detour on the way home?",
            "Your fridge needs backup: {{items}}. Evening grocery run?",
        ),
        priority="normal",
        suppressible=True,
        max_per_day=1,
        sound_enabled=False,
    ),
    "soak_alert": NotificationTemplate(
        type="soak_alert",
        title="⏰ Prep Window Open",
        variations=(
            "{{ingredient}} needs {{hours}}h soak. Start now for {{meal}} at {{time}}.",
            "Tonight's prep: {{ingredient}} → soak {{hours}}h for optimal {{meal}}.",
            "Critical prep window: {{ingredient}} must soak NOW for tomorrow's {{meal}}.",
        ),
        priority="critical",
        suppressible=False,  # Persistent until acted upon
        max_per_day=3,
        sound_enabled=True,
    ),
    "tea_time": NotificationTemplate(
        type="tea_time",
        title="☕ System Calibration",
        variations=(
            "Afternoon energy dip detected. Quick refuel: tea + light snack?",
            "4 PM slump incoming. Counter with chai + something crunchy?",
            "Brain fog warning: Your body's requesting a small reboot.",
        ),
        priority="low",
        suppressible=True,
        max_per_day=1,
        sound_enabled=False,
    ),
    "streak_share": NotificationTemplate(
        type="streak_share",
        title="🔥 Streak Milestone!",
        variations=(
            "{{streakCount}} days of consistent refueling! Share your achievement?",
            "You're on fire! 🔥 {{streakCount}}-day streak. Flex on your feed?",
            "Streak: {{streakCount}} | Status: Champion-level consistency.",
        ),
        priority="normal",
        suppressible=True,
        max_per_day=1,
        sound_enabled=True,
    ),
    "system_check": NotificationTemplate(
        type="system_check",
        title="🧠 Cognitive Load Alert",
        variations=(
            "Your cognitive load is peaking. Refuel now to prevent a crash. "
            "Bowl status: {{bowlState}}.",
            "System Check: 5 hours since last refuel. Initiating maintenance protocol.",
            "Warning: Operating on empty. Performance degradation imminent.",
        ),
        priority="high",
        suppressible=False,
        max_per_day=3,
        sound_enabled=True,
    ),
}


def get_template(notification_type: str) -> NotificationTemplate:
    try:
        return NOTIFICATION_TEMPLATES[notification_type]
    except KeyError:
        raise InputValidationError(
            "notification_type",
            notification_type,
            f"expected one of {', '.join(NOTIFICATION_TEMPLATES)}",
        ) from None


def fill_template(template: str, data: Dict[str, Any]) -> str:
    """Replace every {{key}} with str(data[key]); unknown placeholders stay as-is."""
    result = template
    for key, value in data.items():
        result = re.sub(r"\{\{" + re.escape(key) + r"\}\}", lambda _: str(value), result)
    return result
