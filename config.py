"""Global configuration for the wellness reminder scheduler."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Local data (reminder ledger + client key-value store)
DATA_DIR = Path(os.getenv("REMINDER_DATA_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "fit-buddy"))
REMINDER_DB = os.getenv("REMINDER_DB", str(DATA_DIR / "reminders.db"))

# Timezone used for exercise / daily tip times (empty = host local time)
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE", "")

# OS notification channel: "browser", "mobile" or "none"
NOTIFICATION_CHANNEL = os.getenv("NOTIFICATION_CHANNEL", "none").lower()

# Browser notifications go through a web-push relay
WEB_PUSH_RELAY_URL = os.getenv("WEB_PUSH_RELAY_URL")

# Mobile notifications go through an ntfy-compatible push server
NTFY_SERVER = os.getenv("NTFY_SERVER", "https://ntfy.sh")
NTFY_TOPIC = os.getenv("NTFY_TOPIC")

# Logging
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("REMINDER_LOG_LEVEL", "INFO").upper()
