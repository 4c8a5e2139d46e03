"""Option lists and labels for the recurring-date widget controls."""

import calendar
from typing import Dict

from recurwidget.models.recurrence import EndCondition, Frequency, Weekday

FREQUENCY_LABELS: Dict[Frequency, str] = {
    Frequency.YEARLY: "Yearly",
    Frequency.MONTHLY: "Monthly",
    Frequency.WEEKLY: "Weekly",
    Frequency.DAILY: "Daily",
    Frequency.HOURLY: "Hourly",
    Frequency.MINUTELY: "Minutely",
    Frequency.SECONDLY: "Secondly",
}

# Suffix shown after the interval box: "Every [2] Week(s)".
INTERVAL_UNIT_LABELS: Dict[Frequency, str] = {
    Frequency.YEARLY: "Year(s)",
    Frequency.MONTHLY: "Month(s)",
    Frequency.WEEKLY: "Week(s)",
    Frequency.DAILY: "Day(s)",
    Frequency.HOURLY: "Hour(s)",
    Frequency.MINUTELY: "Minute(s)",
    Frequency.SECONDLY: "Second(s)",
}

WEEK_OF_MONTH_OPTIONS: Dict[str, str] = {
    "+1": "First",
    "+2": "Second",
    "+3": "Third",
    "+4": "Fourth",
    "+5": "Fifth",
    "-1": "Last",
}

# calendar.day_name is Monday-first, same as Weekday.
WEEKDAY_LABELS: Dict[Weekday, str] = {day: calendar.day_name[i] for i, day in enumerate(Weekday)}

MONTH_LABELS: Dict[int, str] = {m: calendar.month_abbr[m] for m in range(1, 13)}

UNTIL_OPTIONS: Dict[EndCondition, str] = {
    EndCondition.NEVER: "Never",
    EndCondition.COUNT: "After",
    EndCondition.DATE: "Date",
}
