"""Form-value layer of the recurring-date widget.

The widget submits one nested values dict per field delta:

    {
        "repeat": "" | "WEEKLY" | ...,
        "repeat_settings": {
            "interval": 1,
            "until_op": "never" | "count" | "date",
            "until": {"date": {"until_date": "YYYY-MM-DD"}, "count": {"until_count": 5}},
            "day_of_week": ["MO", ...],
            "week_of_month": ["+1", "-1", ...],
            "month_of_year": [1, 12, ...],
        },
        "rrule": "RRULE:...",
    }

This module seeds those values from a stored rule, turns submitted values back
into a rule, and describes which settings controls are visible. It never
renders markup.
"""

from __future__ import annotations

import copy
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from recurwidget.models.recurrence import EndCondition, Frequency, RecurrenceSettings, WEEKDAY_FREQUENCIES
from recurwidget.models.widget import WidgetSettings, WidgetState
from recurwidget.recurrence.mapper import from_rule, to_rule
from recurwidget.widget.options import (
    FREQUENCY_LABELS,
    INTERVAL_UNIT_LABELS,
    MONTH_LABELS,
    UNTIL_OPTIONS,
    WEEK_OF_MONTH_OPTIONS,
    WEEKDAY_LABELS,
)

logger = logging.getLogger(__name__)

DATE_STORAGE_FORMAT = "%Y-%m-%d"

_DEFAULT_VALUES: Dict[str, Any] = {
    "repeat": "",
    "repeat_settings": {
        "interval": 1,
        "until_op": "never",
        "until": {
            "date": {"until_date": None},
            "count": {"until_count": None},
        },
        "day_of_week": [],
        "week_of_month": [],
        "month_of_year": [],
    },
}


def default_values() -> Dict[str, Any]:
    """Fresh copy of the widget's default form values."""
    return copy.deepcopy(_DEFAULT_VALUES)


def merge_deep(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Recursively merge ``override`` over ``base`` into a new dict.

    Nested dicts merge key by key; lists and scalars in ``override`` replace.
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_deep(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _checked(values: Any) -> List[Any]:
    """Selected entries of a checkbox group (list, or dict of key -> key/0)."""
    if not values:
        return []
    if isinstance(values, dict):
        values = values.values()
    return [v for v in values if v]


def _format_storage_date(value: Any) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_STORAGE_FORMAT)
    return value or None


def values_from_settings(settings: RecurrenceSettings) -> Dict[str, Any]:
    """Render settings as nested form values."""
    values = default_values()
    values["repeat"] = settings.frequency.value if settings.frequency else ""
    rs = values["repeat_settings"]
    rs["interval"] = settings.interval
    rs["until_op"] = settings.end_condition.value
    rs["until"]["count"]["until_count"] = settings.occurrence_count
    rs["until"]["date"]["until_date"] = _format_storage_date(settings.until_date)
    rs["day_of_week"] = [d.value for d in settings.weekdays]
    rs["week_of_month"] = [f"{n:+d}" for n in settings.week_ordinals]
    rs["month_of_year"] = list(settings.months_of_year)
    return values


def values_from_rule(rule_string: str, reference: Optional[datetime] = None) -> Dict[str, Any]:
    """Seed form values from a stored rule.

    Raises:
        RuleParseError: If the rule string is malformed
    """
    return values_from_settings(from_rule(rule_string, reference))


def settings_from_values(values: Optional[Dict[str, Any]]) -> RecurrenceSettings:
    """Build settings from submitted form values merged over the defaults.

    Raises:
        pydantic.ValidationError: If a submitted value has the wrong type or range
    """
    values = merge_deep(default_values(), values)
    rs = values.get("repeat_settings") or {}
    until = rs.get("until") or {}
    return RecurrenceSettings(
        frequency=values.get("repeat") or None,
        interval=rs.get("interval") or 1,
        end_condition=rs.get("until_op") or "never",
        occurrence_count=(until.get("count") or {}).get("until_count") or None,
        until_date=(until.get("date") or {}).get("until_date") or None,
        weekdays=_checked(rs.get("day_of_week")),
        week_ordinals=_checked(rs.get("week_of_month")),
        months_of_year=_checked(rs.get("month_of_year")),
    )


def rule_from_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``values`` with ``rrule`` built from its settings.

    ``values["repeat"]`` must be set; callers skip deltas without a frequency.
    """
    out = copy.deepcopy(values)
    out["rrule"] = to_rule(settings_from_values(values))
    return out


def massage_form_values(deltas: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert submitted widget values into field values, one per delta.

    Deltas with a repeat frequency gain an ``rrule``; deltas without one pass
    through untouched.
    """
    out: List[Dict[str, Any]] = []
    for delta, value in enumerate(deltas):
        if value.get("repeat"):
            value = rule_from_values(merge_deep(default_values(), value))
            logger.debug(f"Delta {delta}: built {value['rrule']}")
        out.append(value)
    return out


def repeat_options(
    allowed: Iterable[Frequency], current: Optional[str] = None
) -> Dict[str, str]:
    """Repeat select options limited to ``allowed``.

    A ``current`` frequency outside ``allowed`` is kept so existing values
    still render.
    """
    enabled = {Frequency(f).value for f in allowed}
    if current:
        enabled.add(Frequency(current).value)
    return {f.value: label for f, label in FREQUENCY_LABELS.items() if f.value in enabled}


def configure(values: Optional[Dict[str, Any]]) -> WidgetState:
    """Widget state remembering the submitted repeat frequency for the settings rebuild."""
    return WidgetState(repeat_setting=(values or {}).get("repeat") or "")


def element_values(
    rule_string: Optional[str],
    submitted: Optional[Dict[str, Any]] = None,
    state: Optional[WidgetState] = None,
    reference: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Values a widget element renders with.

    Precedence, lowest first: defaults, the stored rule, submitted values,
    then a frequency remembered in the widget state.
    """
    values = dict(submitted or {})
    if rule_string:
        values = merge_deep(values_from_rule(rule_string, reference), values)
    values = merge_deep(default_values(), values)
    if state is not None and state.repeat_setting is not None:
        repeat = state.repeat_setting
        values["repeat"] = repeat.value if isinstance(repeat, Frequency) else repeat
    return values


def settings_fieldset(values: Dict[str, Any]) -> Dict[str, Any]:
    """Describe the repeat settings controls for the current values."""
    repeat = values.get("repeat") or ""
    if not repeat:
        return {"hidden": True, "repeat": None, "controls": {}}

    freq = Frequency(repeat)
    rs = values.get("repeat_settings") or {}
    until = rs.get("until") or {}

    controls: Dict[str, Any] = {
        "interval": {
            "type": "number",
            "min": 1,
            "required": True,
            "prefix": "Every",
            "suffix": INTERVAL_UNIT_LABELS[freq],
            "default_value": rs.get("interval") or 1,
        },
        "until": {
            "type": "radios",
            "options": {op.value: label for op, label in UNTIL_OPTIONS.items()},
            "default_value": rs.get("until_op") or EndCondition.NEVER.value,
            "count": {
                "type": "number",
                "min": 1,
                "suffix": "Occurrences",
                "default_value": (until.get("count") or {}).get("until_count"),
            },
            "date": {
                "type": "date",
                "default_value": _format_storage_date((until.get("date") or {}).get("until_date")),
            },
        },
    }

    if freq in WEEKDAY_FREQUENCIES:
        controls["day_of_week"] = {
            "type": "checkboxes",
            "title": "Day of week",
            "options": {d.value: label for d, label in WEEKDAY_LABELS.items()},
            "default_value": _checked(rs.get("day_of_week")),
        }

    if freq == Frequency.MONTHLY:
        controls["week_of_month"] = {
            "type": "checkboxes",
            "title": "Week",
            "options": dict(WEEK_OF_MONTH_OPTIONS),
            "default_value": _checked(rs.get("week_of_month")),
        }
        controls["month_of_year"] = {
            "type": "checkboxes",
            "title": "Only in",
            "options": {str(m): label for m, label in MONTH_LABELS.items()},
            "default_value": _checked(rs.get("month_of_year")),
        }

    return {"hidden": False, "repeat": freq.value, "controls": controls}


def build_element(
    rule_string: Optional[str],
    submitted: Optional[Dict[str, Any]],
    widget_settings: WidgetSettings,
    state: Optional[WidgetState] = None,
    reference: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Full description of one widget element: Repeat select plus settings fieldset."""
    values = element_values(rule_string, submitted, state, reference)
    return {
        "repeat": {
            "options": repeat_options(widget_settings.allowed_repeat_types, values["repeat"]),
            "default_value": values["repeat"],
        },
        "repeat_settings": settings_fieldset(values),
        "values": values,
    }
