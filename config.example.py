# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets (the API token belongs in .env, which is gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKNEST_APP_NAME": "App display name (default: tasknest).",
    "TASKNEST_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKNEST_DATA_DIR": "Local data directory for logs (default: .local/tasknest).",
    # Task API
    "TASKNEST_API_URL": "Base URL of the task REST API. Empty => in-memory demo backend.",
    "TASKNEST_API_TOKEN": "Bearer token sent with every API request (optional).",
    "TASKNEST_REQUEST_TIMEOUT_SECONDS": "Per-request timeout in seconds (default: 10, minimum 1).",
    "TASKNEST_PAGE_LIMIT": "Tasks per page for list calls (default: 20).",
    # Locale / views
    "TASKNEST_LOCALE": "Language for labels and string collation: he or en (default: he).",
    "TASKNEST_FIRST_WEEKDAY": "First day of the week: a name like sunday/monday or 0..6 (Monday=0). Default: sunday.",
    "TASKNEST_CALENDAR_PAD_WEEKS": "Pad the calendar grid's last week with blanks (true/false, default: false).",
    # Connectors
    "TASKNEST_CONSOLE_ENABLED": "Enable the console connector (true/false, default: true).",
}
