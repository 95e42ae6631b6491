"""Unit tests for soak scheduling (backward time arithmetic)."""

from datetime import datetime

import pytest

from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.models import Recipe
from ricebowl.planning.soak_calculator import (
    DEFAULT_MEAL_TIMES,
    SoakRequest,
    calculate_overnight_soak,
    calculate_soak_reminder,
    get_all_soak_reminders,
    is_too_late_to_soak,
    next_meal_type,
)

TODAY = "2026-10-19"


class TestCalculateSoakReminder:
    """Tests for calculate_soak_reminder."""

    def test_soak_start_equal_to_now_is_urgent(self):
        """20:00 dinner minus 6h is 14:00, which is exactly now."""
        reminder = calculate_soak_reminder(6, "dinner", "14:00", current_date=TODAY)

        assert reminder.meal_ready_at == datetime(2026, 10, 19, 20, 0)
        assert reminder.start_soaking_at == datetime(2026, 10, 19, 14, 0)
        assert reminder.reminder_time == "14:00"
        assert reminder.is_urgent is True
        assert reminder.hours_required == 6
        assert reminder.message == "⚠️ URGENT: Start soaking NOW! You need 6 hours for dinner."

    def test_prep_ahead_message(self):
        reminder = calculate_soak_reminder(8, "dinner", "09:00", current_date=TODAY)

        assert reminder.reminder_time == "12:00"
        assert reminder.is_urgent is False
        assert reminder.message == "Prep ahead: Soak at 12:00 for 8 hours (dinner ready by 20:00)."

    def test_near_term_message_in_minutes(self):
        reminder = calculate_soak_reminder(8, "dinner", "10:30", current_date=TODAY)

        assert reminder.is_urgent is False
        assert reminder.message == "Reminder: Start soaking in 90 minutes for dinner."

    def test_one_hour_ahead_is_not_urgent(self):
        reminder = calculate_soak_reminder(8, "dinner", "11:00", current_date=TODAY)
        assert reminder.is_urgent is False

    def test_meal_already_passed_targets_tomorrow(self):
        reminder = calculate_soak_reminder(8, "dinner", "21:00", current_date=TODAY)

        assert reminder.meal_ready_at == datetime(2026, 10, 20, 20, 0)
        assert reminder.start_soaking_at == datetime(2026, 10, 20, 12, 0)
        assert reminder.is_urgent is False

    def test_meal_at_current_minute_targets_tomorrow(self):
        reminder = calculate_soak_reminder(1, "lunch", "13:00", current_date=TODAY)
        assert reminder.meal_ready_at == datetime(2026, 10, 20, 13, 0)

    def test_zero_hours_starts_at_meal_time(self):
        reminder = calculate_soak_reminder(0, "breakfast", "06:00", current_date=TODAY)

        assert reminder.start_soaking_at == reminder.meal_ready_at
        assert reminder.reminder_time == DEFAULT_MEAL_TIMES["breakfast"]

    def test_custom_meal_time(self):
        reminder = calculate_soak_reminder(
            2, "dinner", "10:00", custom_meal_time="19:00", current_date=TODAY
        )
        assert reminder.reminder_time == "17:00"
        assert "(dinner ready by 19:00)" in reminder.message

    def test_fractional_hours(self):
        reminder = calculate_soak_reminder(1.5, "snack", "08:00", current_date=TODAY)
        assert reminder.reminder_time == "14:30"
        assert "for 1.5 hours" in reminder.message

    def test_long_soak_crosses_midnight(self):
        reminder = calculate_soak_reminder(12, "breakfast", "10:00", current_date=TODAY)

        assert reminder.meal_ready_at == datetime(2026, 10, 20, 8, 0)
        assert reminder.start_soaking_at == datetime(2026, 10, 19, 20, 0)

    @pytest.mark.parametrize("hours", [0, 0.5, 1, 6, 12, 24, 36])
    def test_soak_start_never_after_meal(self, hours):
        reminder = calculate_soak_reminder(hours, "dinner", "07:15", current_date=TODAY)

        assert reminder.start_soaking_at <= reminder.meal_ready_at
        assert (reminder.start_soaking_at == reminder.meal_ready_at) == (hours == 0)

    def test_negative_hours_rejected(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_soak_reminder(-2, "dinner", "10:00", current_date=TODAY)
        assert exc_info.value.field == "soak_hours"

    @pytest.mark.parametrize("bad_time", ["25:00", "7pm", "12:60", "", "1200"])
    def test_malformed_current_time_rejected(self, bad_time):
        with pytest.raises(InputValidationError):
            calculate_soak_reminder(2, "dinner", bad_time, current_date=TODAY)

    def test_unknown_meal_type_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_soak_reminder(2, "brunch", "10:00", current_date=TODAY)

    def test_malformed_date_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_soak_reminder(2, "dinner", "10:00", current_date="19/10/2026")

    def test_current_date_is_required(self):
        with pytest.raises(TypeError):
            calculate_soak_reminder(2, "dinner", "10:00")
        with pytest.raises(InputValidationError) as exc_info:
            calculate_soak_reminder(2, "dinner", "10:00", current_date=None)
        assert exc_info.value.field == "current_date"


class TestIsTooLateToSoak:
    """Tests for is_too_late_to_soak and the meal fallback sequence."""

    def test_too_late_for_dinner_suggests_tomorrow(self):
        result = is_too_late_to_soak(8, "dinner", "14:00", current_date=TODAY)

        assert result.too_late is True
        assert result.alternative_meal is None
        assert result.message == "Too late to soak for dinner. Consider this for tomorrow instead."

    def test_too_late_for_lunch_suggests_snack(self):
        result = is_too_late_to_soak(6, "lunch", "10:00", current_date=TODAY)

        assert result.too_late is True
        assert result.alternative_meal == "snack"

    def test_too_late_for_breakfast_suggests_lunch(self):
        result = is_too_late_to_soak(2, "breakfast", "07:00", current_date=TODAY)
        assert result.alternative_meal == "lunch"

    def test_not_too_late_returns_reminder_message(self):
        result = is_too_late_to_soak(2, "dinner", "10:00", current_date=TODAY)
        reminder = calculate_soak_reminder(2, "dinner", "10:00", current_date=TODAY)

        assert result.too_late is False
        assert result.alternative_meal is None
        assert result.message == reminder.message

    def test_soak_start_exactly_now_is_not_too_late(self):
        result = is_too_late_to_soak(6, "dinner", "14:00", current_date=TODAY)
        assert result.too_late is False

    def test_custom_meal_time_moves_the_window(self):
        """A 22:00 dinner with a 2h soak still has 90 minutes at 18:30."""
        default = is_too_late_to_soak(2, "dinner", "18:30", current_date=TODAY)
        custom = is_too_late_to_soak(
            2, "dinner", "18:30", custom_meal_time="22:00", current_date=TODAY
        )

        assert default.too_late is True
        assert custom.too_late is False
        assert custom.message == "Reminder: Start soaking in 90 minutes for dinner."

    def test_next_meal_sequence(self):
        assert next_meal_type("breakfast") == "lunch"
        assert next_meal_type("lunch") == "snack"
        assert next_meal_type("snack") == "dinner"
        assert next_meal_type("dinner") is None


class TestGetAllSoakReminders:
    """Tests for get_all_soak_reminders."""

    def _requests(self):
        return [
            SoakRequest("a", "Chole", 2, "chickpeas", "dinner"),
            SoakRequest("b", "Rajma Chawal", 8, "rajma", "dinner"),
            SoakRequest("c", "Plain Rice", 0, "rice", "lunch"),
            SoakRequest("d", "Sprout Salad", 4, "moong", "lunch"),
        ]

    def test_sorted_by_soak_start(self):
        reminders = get_all_soak_reminders(self._requests(), "06:00", current_date=TODAY)

        assert [r.reminder_time for r in reminders] == ["09:00", "12:00", "18:00"]
        starts = [r.start_soaking_at for r in reminders]
        assert starts == sorted(starts)

    def test_sorting_independent_of_input_order(self):
        forward = get_all_soak_reminders(self._requests(), "06:00", current_date=TODAY)
        backward = get_all_soak_reminders(
            list(reversed(self._requests())), "06:00", current_date=TODAY
        )
        assert [r.start_soaking_at for r in forward] == [r.start_soaking_at for r in backward]

    def test_zero_hour_requests_dropped_and_messages_prefixed(self):
        reminders = get_all_soak_reminders(self._requests(), "06:00", current_date=TODAY)

        assert len(reminders) == 3
        assert reminders[0].message.startswith("Soak moong: ")
        assert reminders[1].message.startswith("Soak rajma: ")

    def test_empty_input(self):
        assert get_all_soak_reminders([], "06:00", current_date=TODAY) == []

    def test_request_from_recipe(self):
        chole = Recipe(
            id="c1",
            name="Chole",
            time_tier=30,
            requires_soaking=True,
            soak_ingredient="chickpeas",
            soak_hours=10,
        )
        request = SoakRequest.from_recipe(chole)
        reminders = get_all_soak_reminders([request], "08:00", current_date=TODAY)

        assert request.meal_type == "dinner"
        assert reminders[0].reminder_time == "10:00"
        assert reminders[0].message.startswith("Soak chickpeas: ")


class TestCalculateOvernightSoak:
    """Tests for calculate_overnight_soak."""

    def test_default_breakfast(self):
        result = calculate_overnight_soak(8)

        assert result.soak_at == "00:00"
        assert result.wake_up_check == "07:30"

    def test_wraps_to_previous_evening(self):
        result = calculate_overnight_soak(10, "07:00")

        assert result.soak_at == "21:00"
        assert result.wake_up_check == "06:30"
        assert result.message == "Soak at 21:00 for 10-hour prep. Morning check: 06:30"

    def test_breakfast_in_midnight_hour(self):
        result = calculate_overnight_soak(6, "00:30")

        assert result.soak_at == "18:30"
        assert result.wake_up_check == "23:30"
