"""Reminder domain configuration - cadence, defaults, storage keys and copy."""

# Ticker cadence (fixed, not per reminder type)
POLL_INTERVAL_SECONDS = 60

# In-app banner lifetime
BANNER_TIMEOUT_SECONDS = 10

# Daily tip fires once at this local time (not user-configurable)
DAILY_TIP_TIME = "09:00"

# Defaults applied when a settings key is missing
DEFAULT_WATER_ENABLED = True
DEFAULT_WATER_INTERVAL_MINUTES = 60
DEFAULT_EXERCISE_ENABLED = True
DEFAULT_EXERCISE_TIME = "18:00"
DEFAULT_DAILY_TIP_ENABLED = True

# Key-value store keys
SETTINGS_KEY = "notificationSettings"
LEDGER_KEY = "reminderLedger"
BROWSER_PERMISSION_KEY = "notificationPermission"
MOBILE_NOTIFICATIONS_KEY = "notifications"

# Notification copy
NOTIFICATION_TITLE = "Fit Buddy Reminder"
TEST_NOTIFICATION_TITLE = "Fit Buddy Test"
TEST_NOTIFICATION_MESSAGE = "This is a test notification! 🎉"

MESSAGES = {
    "water": "💧 Time to hydrate! Remember to drink some water.",
    "exercise": "💪 Time for your workout! Let's get moving.",
    "tip": "✨ Check out today's wellness tip in Fit Buddy!",
}

# HTTP timeout for push sinks
SINK_TIMEOUT_SECONDS = 10
