"""Notification intents for soak alerts and daily nudges."""

from ricebowl.notifications.generator import (
    generate_notification,
    get_due_notifications,
    schedule_daily_notifications,
    should_suppress,
)
from ricebowl.notifications.templates import NOTIFICATION_TEMPLATES, fill_template

__all__ = [
    "generate_notification",
    "get_due_notifications",
    "schedule_daily_notifications",
    "should_suppress",
    "NOTIFICATION_TEMPLATES",
    "fill_template",
]
