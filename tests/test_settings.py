"""Tests for reading reminder settings."""

import json
from unittest.mock import patch

import pytest

from reminders import config
from reminders.settings import (
    ReminderSettings,
    load_settings,
    parse_settings,
    parse_time_of_day,
)


def test_missing_record_uses_defaults(store):
    """No settings saved yet -> everything enabled with default values."""
    settings = load_settings(store)

    assert settings == ReminderSettings()
    assert settings.water_enabled is True
    assert settings.water_interval_minutes == 60
    assert settings.exercise_enabled is True
    assert settings.exercise_time_of_day == "18:00"
    assert settings.daily_tip_enabled is True


def test_missing_keys_fall_back_to_defaults(store, write_settings):
    write_settings(store, waterEnabled=False)

    settings = load_settings(store)

    assert settings.water_enabled is False
    assert settings.water_interval_minutes == 60
    assert settings.exercise_time_of_day == "18:00"
    assert settings.daily_tip_enabled is True


def test_full_record(store, write_settings):
    write_settings(
        store,
        waterEnabled=True,
        waterIntervalMinutes=30,
        exerciseEnabled=True,
        exerciseTimeOfDay="07:30",
        dailyTipEnabled=False,
    )

    settings = load_settings(store)

    assert settings.water_interval_minutes == 30
    assert settings.exercise_time_of_day == "07:30"
    assert settings.daily_tip_enabled is False


def test_legacy_web_key_names_are_accepted(store, write_settings):
    """The original web settings screen used different key names."""
    write_settings(
        store,
        waterReminders=True,
        waterInterval=90,
        exerciseReminders=False,
        exerciseTime="06:15",
        dailyTipReminder=False,
    )

    settings = load_settings(store)

    assert settings.water_interval_minutes == 90
    assert settings.exercise_enabled is False
    assert settings.exercise_time_of_day == "06:15"
    assert settings.daily_tip_enabled is False


@pytest.mark.parametrize("interval", [0, -30, "soon", None, True, 12.5, "²", "¹²"])
def test_malformed_interval_disables_water_only(interval):
    settings = parse_settings({"waterEnabled": True, "waterIntervalMinutes": interval})

    assert settings.water_enabled is False
    assert settings.exercise_enabled is True
    assert settings.daily_tip_enabled is True


def test_numeric_string_interval_is_accepted():
    """<select> values can arrive as strings."""
    settings = parse_settings({"waterIntervalMinutes": "120"})
    assert settings.water_enabled is True
    assert settings.water_interval_minutes == 120


@pytest.mark.parametrize("value", ["25:00", "18:60", "6pm", "", 1800, None])
def test_malformed_exercise_time_disables_exercise_only(value):
    settings = parse_settings({"exerciseTimeOfDay": value})

    assert settings.exercise_enabled is False
    assert settings.exercise_time_of_day is None
    assert settings.water_enabled is True


def test_exercise_time_is_normalized():
    settings = parse_settings({"exerciseTimeOfDay": "7:05"})
    assert settings.exercise_time_of_day == "07:05"


def test_non_boolean_flag_disables_that_reminder():
    settings = parse_settings({"dailyTipEnabled": "yes"})

    assert settings.daily_tip_enabled is False
    assert settings.water_enabled is True


def test_corrupt_json_disables_everything(store):
    store.set(config.SETTINGS_KEY, "{not json")

    assert load_settings(store) == ReminderSettings.all_disabled()


def test_non_object_json_disables_everything(store):
    store.set(config.SETTINGS_KEY, json.dumps(["waterEnabled"]))

    assert load_settings(store) == ReminderSettings.all_disabled()


def test_unreadable_store_disables_everything(flaky_store):
    flaky_store.fail_reads = True

    assert load_settings(flaky_store) == ReminderSettings.all_disabled()


def test_settings_are_never_written(store):
    """Reading settings must not create or change the stored record."""
    load_settings(store)
    assert store.get(config.SETTINGS_KEY) is None


@pytest.mark.parametrize("value,expected", [
    ("09:00", (9, 0)),
    ("9:00", (9, 0)),
    ("23:59", (23, 59)),
    (" 18:00 ", (18, 0)),
    ("24:00", None),
    ("12:5", None),
    ("noon", None),
    (None, None),
])
def test_parse_time_of_day(value, expected):
    assert parse_time_of_day(value) == expected


def test_to_dict_uses_persisted_key_names():
    assert ReminderSettings().to_dict() == {
        "waterEnabled": True,
        "waterIntervalMinutes": 60,
        "exerciseEnabled": True,
        "exerciseTimeOfDay": "18:00",
        "dailyTipEnabled": True,
    }


def test_unexpected_parse_error_disables_everything(store, write_settings):
    write_settings(store, waterEnabled=True)

    with patch("reminders.settings.parse_settings", side_effect=RuntimeError("bad record")):
        assert load_settings(store) == ReminderSettings.all_disabled()
