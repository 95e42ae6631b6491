"""Build and filter notification intents.

Only decides what should be shown and when; delivery lives elsewhere.
"""

from datetime import datetime, time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ricebowl.clock import DateLike, parse_date
from ricebowl.data_layer.models import NotificationIntent
from ricebowl.notifications.templates import fill_template, get_template

GROCERY_SCAN_TIME = time(18, 0)
TEA_TIME = time(16, 0)


def generate_notification(
    notification_type: str,
    data: Dict[str, Any],
    scheduled_at: datetime,
    user_id: str = "",
    variant: int = 0,
) -> NotificationIntent:
    """Create an intent from the template for notification_type.

    Args:
        notification_type: Template key, e.g. "soak_alert"
        data: Values for the {{placeholders}}
        scheduled_at: When the notification should be shown
        user_id: Owner of the notification
        variant: Index into the template's copy variations (wraps around)

    Raises:
        InputValidationError: If notification_type has no template
    """
    template = get_template(notification_type)
    body_template = template.variations[variant % len(template.variations)]

    return NotificationIntent(
        id=f"notif_{notification_type}_{scheduled_at.strftime('%Y%m%d%H%M')}",
        type=notification_type,
        title=template.title,
        body=fill_template(body_template, data),
        scheduled_at=scheduled_at,
        user_id=user_id,
        data=dict(data),
        is_critical=template.priority == "critical",
        is_persistent=not template.suppressible,
        max_per_day=template.max_per_day,
    )


def should_suppress(
    intent: NotificationIntent,
    recent: Iterable[NotificationIntent],
    now: datetime,
) -> Tuple[bool, str]:
    """Decide whether an intent should be held back.

    The per-type daily limit applies first (even to critical alerts), then a
    user snooze via suppress_until.
    """
    template = get_template(intent.type)
    same_day = intent.scheduled_at.date()
    today_count = sum(
        1 for n in recent if n.type == intent.type and n.scheduled_at.date() == same_day
    )
    if today_count >= template.max_per_day:
        return True, f"Daily limit reached ({template.max_per_day}/day)"

    if intent.suppress_until is not None and now < intent.suppress_until:
        return True, "User snoozed this notification"

    return False, ""


def get_due_notifications(
    intents: Iterable[NotificationIntent],
    now: datetime,
) -> List[NotificationIntent]:
    """Intents not yet sent or dismissed whose scheduled time has arrived."""
    return [
        n
        for n in intents
        if n.sent_at is None and n.dismissed_at is None and n.scheduled_at <= now
    ]


def schedule_daily_notifications(
    user_id: str,
    current_date: DateLike,
    grocery_items: Optional[List[str]] = None,
) -> List[NotificationIntent]:
    """Fixed daily nudges: grocery scan at 18:00 and tea time at 16:00."""
    day = parse_date(current_date)
    items = grocery_items or []
    grocery = generate_notification(
        "grocery_scan",
        {
            "items": ", ".join(items) if items else "checking pantry...",
            "itemCount": len(items),
        },
        datetime.combine(day, GROCERY_SCAN_TIME),
        user_id=user_id,
    )
    tea = generate_notification(
        "tea_time", {}, datetime.combine(day, TEA_TIME), user_id=user_id
    )
    return [grocery, tea]
