#!/usr/bin/env python3
"""Helper script to check and create a .env file for the follow-up tracker settings."""

import sys
from pathlib import Path

TEMPLATE = """# Customer Follow-up Tracker configuration
FOLLOWUP_API_PREFIX=/api
FOLLOWUP_LOG_LEVEL=INFO

# Where customers.json, preferences.json and exports/ are written
FOLLOWUP_DATA_ROOT=./data

# IANA zone for reminder times and "today"; leave commented to use the system zone
# FOLLOWUP_TIMEZONE=Asia/Riyadh

# Reminder alert text ({count} is the number of customers due today)
# FOLLOWUP_NOTIFICATION_TITLE=Follow-up calls due
# FOLLOWUP_NOTIFICATION_MESSAGE=You have {count} customer(s) to call today

# JSON array or comma-separated list
# FOLLOWUP_FRONTEND_ALLOWED_ORIGINS=http://localhost:5173,http://127.0.0.1:5173
"""


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and re-run this script to verify the configuration.")
        return

    print(f"Found .env file at: {env_file}")
    sys.path.insert(0, str(project_root / "src"))
    try:
        from followup_tracker.config import Settings

        loaded = Settings(_env_file=env_file)
    except Exception as e:
        print(f"Error loading config: {e}")
        print("Make sure variables use the FOLLOWUP_ prefix and values are valid.")
        sys.exit(1)

    print(f"Data root:        {loaded.data_root}")
    print(f"Export directory: {loaded.export_root}")
    print(f"Timezone:         {loaded.timezone or 'system default'}")
    print(f"Default reminder: {loaded.default_reminder_hour:02d}:{loaded.default_reminder_minute:02d}")
    print(f"Allowed origins:  {', '.join(loaded.frontend_allowed_origins) or '(none)'}")

    if loaded.timezone:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(loaded.timezone)
        except ZoneInfoNotFoundError:
            print(f"Unknown timezone '{loaded.timezone}'")
            sys.exit(1)
    print("Configuration OK")


if __name__ == "__main__":
    main()
