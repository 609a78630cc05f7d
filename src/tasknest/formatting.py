# src/tasknest/formatting.py

"""
Display formatting (pure functions).

Only used to render labels. Calendar arithmetic works on weekday indexes and
never depends on these names.
"""

from __future__ import annotations

import calendar
from datetime import date

# Sunday-first, the way the Israeli calendar prints a week.
_WEEKDAYS_SUNDAY_FIRST: dict[str, tuple[str, ...]] = {
    "he": ("ראשון", "שני", "שלישי", "רביעי", "חמישי", "שישי", "שבת"),
    "en": ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "he": (
        "ינואר", "פברואר", "מרץ", "אפריל", "מאי", "יוני",
        "יולי", "אוגוסט", "ספטמבר", "אוקטובר", "נובמבר", "דצמבר",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

_RELATIVE: dict[str, dict[str, str]] = {
    "he": {"today": "היום", "tomorrow": "מחר", "yesterday": "אתמול", "in_days": "בעוד {n} ימים"},
    "en": {"today": "Today", "tomorrow": "Tomorrow", "yesterday": "Yesterday", "in_days": "in {n} days"},
}

_STATUS_LABELS: dict[str, dict[str, str]] = {
    "he": {"pending": "ממתין", "in-progress": "בתהליך", "completed": "הושלם"},
    "en": {"pending": "Pending", "in-progress": "In progress", "completed": "Completed"},
}

_PRIORITY_LABELS: dict[str, dict[str, str]] = {
    "he": {"low": "נמוכה", "medium": "בינונית", "high": "גבוהה"},
    "en": {"low": "Low", "medium": "Medium", "high": "High"},
}


def _lang(lang: str | None) -> str:
    base = (lang or "en").replace("_", "-").split("-", 1)[0].lower()
    return base if base in _MONTHS else "en"


def weekday_names(lang: str | None = "he", first_weekday: int = calendar.SUNDAY) -> tuple[str, ...]:
    """Seven weekday names starting at first_weekday (calendar numbering, MONDAY=0)."""
    names = _WEEKDAYS_SUNDAY_FIRST[_lang(lang)]
    # Sunday-first table index of calendar weekday w is (w + 1) % 7.
    start = (first_weekday + 1) % 7
    return names[start:] + names[:start]


def weekday_name(day: date, lang: str | None = "he") -> str:
    return _WEEKDAYS_SUNDAY_FIRST[_lang(lang)][(day.weekday() + 1) % 7]


def month_name(month: int, lang: str | None = "he") -> str:
    return _MONTHS[_lang(lang)][month - 1]


def format_short_date(day: date) -> str:
    """Israeli numeric format dd/MM/yyyy."""
    return day.strftime("%d/%m/%Y")


def format_long_date(day: date, lang: str | None = "he") -> str:
    lang = _lang(lang)
    if lang == "he":
        return f"{day.day} {month_name(day.month, lang)} {day.year}, יום {weekday_name(day, lang)}"
    return f"{weekday_name(day, lang)}, {month_name(day.month, lang)} {day.day}, {day.year}"


def relative_date_label(day: date, today: date | None = None, lang: str | None = "he") -> str:
    """today / tomorrow / yesterday / in N days (within a week) / short date."""
    if today is None:
        today = date.today()
    words = _RELATIVE[_lang(lang)]
    diff = (day - today).days
    if diff == 0:
        return words["today"]
    if diff == 1:
        return words["tomorrow"]
    if diff == -1:
        return words["yesterday"]
    if 0 < diff < 7:
        return words["in_days"].format(n=diff)
    return format_short_date(day)


def is_weekend(day: date) -> bool:
    # Friday and Saturday.
    return day.weekday() in (calendar.FRIDAY, calendar.SATURDAY)


def status_label(status: str, lang: str | None = "he") -> str:
    return _STATUS_LABELS[_lang(lang)].get(str(status), str(status))


def priority_label(priority: str, lang: str | None = "he") -> str:
    return _PRIORITY_LABELS[_lang(lang)].get(str(priority), str(priority))
