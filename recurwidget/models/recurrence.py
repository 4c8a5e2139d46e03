"""Recurrence models for recurwidget.

RecurrenceSettings is the structured form of what an editor picks in the
recurring-date widget. It is built fresh per request, either from submitted
form values or from an existing RRULE string, and discarded afterwards.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Frequency(str, Enum):
    """RRULE FREQ values, longest period first."""

    YEARLY = "YEARLY"
    MONTHLY = "MONTHLY"
    WEEKLY = "WEEKLY"
    DAILY = "DAILY"
    HOURLY = "HOURLY"
    MINUTELY = "MINUTELY"
    SECONDLY = "SECONDLY"


class Weekday(str, Enum):
    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"
    SU = "SU"


class EndCondition(str, Enum):
    """How a recurrence ends."""

    NEVER = "never"
    COUNT = "count"
    DATE = "date"


# Frequencies for which weekday / week-of-month selections apply.
WEEKDAY_FREQUENCIES = (Frequency.MONTHLY, Frequency.WEEKLY)

_WEEKDAY_ORDER = {day: i for i, day in enumerate(Weekday)}


def ordinal_sort_key(n: int) -> tuple[bool, int]:
    # +1..+5 first, then "last" style negatives (-1, -2, ...)
    return (n < 0, abs(n))


def _dedupe(values):
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class RecurrenceSettings(BaseModel):
    """Structured recurrence definition behind the widget.

    Notes:
    - weekdays / week_ordinals / months_of_year behave as sets: duplicates are
      dropped and values are kept in canonical order so rule output is stable.
    - occurrence_count and until_date are only read for the matching
      end_condition; stray values are ignored, not rejected.
    """

    frequency: Optional[Frequency] = Field(None, description="RRULE FREQ, or None when not repeating")
    interval: int = Field(1, ge=1, description="Every N units of the frequency")

    end_condition: EndCondition = EndCondition.NEVER
    occurrence_count: Optional[int] = Field(None, ge=1, description="Occurrences when end_condition=count")
    until_date: Optional[date] = Field(None, description="Last day when end_condition=date")

    weekdays: List[Weekday] = Field(default_factory=list)
    week_ordinals: List[int] = Field(
        default_factory=list, description="Nth weekday of the period, e.g. +1 first, -1 last"
    )
    months_of_year: List[int] = Field(default_factory=list)

    @field_validator("frequency", mode="before")
    @classmethod
    def _normalize_frequency(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @field_validator("weekdays", mode="before")
    @classmethod
    def _normalize_weekdays(cls, v):
        if v is None:
            return []
        return [d.strip().upper() if isinstance(d, str) else d for d in v]

    @field_validator("weekdays")
    @classmethod
    def _order_weekdays(cls, v: List[Weekday]) -> List[Weekday]:
        return sorted(_dedupe(v), key=_WEEKDAY_ORDER.__getitem__)

    @field_validator("week_ordinals", mode="before")
    @classmethod
    def _parse_week_ordinals(cls, v):
        if v is None:
            return []
        # Form checkboxes submit ordinals as "+2" / "-1"
        return [int(n) if isinstance(n, str) else n for n in v]

    @field_validator("week_ordinals")
    @classmethod
    def _validate_week_ordinals(cls, v: List[int]) -> List[int]:
        for n in v:
            if n == 0 or abs(n) > 53:
                raise ValueError(f"week ordinal out of range: {n}")
        return sorted(_dedupe(v), key=ordinal_sort_key)

    @field_validator("months_of_year", mode="before")
    @classmethod
    def _parse_months(cls, v):
        if v is None:
            return []
        return v

    @field_validator("months_of_year")
    @classmethod
    def _validate_months(cls, v: List[int]) -> List[int]:
        for m in v:
            if m < 1 or m > 12:
                raise ValueError(f"month out of range: {m}")
        return sorted(set(v))
