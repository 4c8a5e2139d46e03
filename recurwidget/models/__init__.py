"""Data models for recurwidget."""

from recurwidget.models.recurrence import EndCondition, Frequency, RecurrenceSettings, Weekday
from recurwidget.models.widget import WidgetSettings, WidgetState

__all__ = [
    "EndCondition",
    "Frequency",
    "RecurrenceSettings",
    "Weekday",
    "WidgetSettings",
    "WidgetState",
]
