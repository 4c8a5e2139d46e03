"""Map between widget RecurrenceSettings and RRULE strings."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ValidationError

from recurwidget.models.recurrence import (
    EndCondition,
    RecurrenceSettings,
    WEEKDAY_FREQUENCIES,
    Weekday,
)
from recurwidget.recurrence.grammar import (
    RuleParseError,
    format_until,
    parse_rule_parts,
    parse_until,
    serialize_parts,
)

logger = logging.getLogger(__name__)

# BYDAY token: optional signed 1-2 digit ordinal, then a weekday code ("+2MO", "-1FR", "WE").
# dateutil also accepts its own "MO(+2)" spelling.
_BYDAY_RE = re.compile(
    r"^(?P<ordinal>[+-]?\d{1,2})?(?P<day>MO|TU|WE|TH|FR|SA|SU)(?:\((?P<suffix>[+-]?\d{1,2})\))?$"
)


def _is_empty(value: Optional[str]) -> bool:
    # Any zero spelling ("0", "00", "+0") counts as empty, so COUNT=0 falls through to UNTIL / never.
    if value is None or not value.strip():
        return True
    try:
        return int(value) == 0
    except ValueError:
        return False


def _split_byday(byday: str) -> tuple[List[int], List[str]]:
    ordinals: List[int] = []
    days: List[str] = []
    for token in byday.split(","):
        token = token.strip().upper()
        if not token:
            continue
        m = _BYDAY_RE.match(token)
        if not m:
            raise RuleParseError(f"Invalid BYDAY token: {token}")
        ordinal = m.group("ordinal") or m.group("suffix")
        if ordinal:
            ordinals.append(int(ordinal))
        days.append(m.group("day"))
    return ordinals, days


def _format_ordinal(n: int) -> str:
    return f"{n:+d}"


def from_rule(rule_string: str, reference: Optional[datetime] = None) -> RecurrenceSettings:
    """Decode an RRULE string into widget settings.

    Only the first rule of a multi-rule recurrence is mapped.

    Args:
        rule_string: Recurrence rule, with or without the "RRULE:" label
        reference: Start date/time used to expand the rule; defaults to now

    Returns:
        RecurrenceSettings seeded from FREQ, INTERVAL, COUNT/UNTIL, BYDAY, BYMONTH

    Raises:
        RuleParseError: If the rule string is malformed
    """
    parts = parse_rule_parts(rule_string, reference)

    values: Dict[str, object] = {
        "frequency": parts.get("FREQ"),
        "interval": parts.get("INTERVAL") or 1,
    }

    if not _is_empty(parts.get("COUNT")):
        values["end_condition"] = EndCondition.COUNT
        values["occurrence_count"] = int(parts["COUNT"])
    elif not _is_empty(parts.get("UNTIL")):
        values["end_condition"] = EndCondition.DATE
        values["until_date"] = parse_until(parts["UNTIL"])
    else:
        values["end_condition"] = EndCondition.NEVER

    if parts.get("BYDAY"):
        ordinals, days = _split_byday(parts["BYDAY"])
        values["week_ordinals"] = ordinals
        values["weekdays"] = days

    if parts.get("BYMONTH"):
        values["months_of_year"] = [int(m) for m in parts["BYMONTH"].split(",") if m.strip()]

    try:
        settings = RecurrenceSettings(**values)
    except ValidationError as e:
        raise RuleParseError(f"Rule values out of range: {e}", rule=rule_string) from e
    logger.debug(f"Decoded rule {rule_string!r} -> {settings.frequency} every {settings.interval}")
    return settings


def _byday(weekdays: List[Weekday], ordinals: List[int]) -> str:
    codes = [d.value if isinstance(d, Weekday) else str(d) for d in weekdays]
    if ordinals:
        return ",".join(_format_ordinal(n) + code for n in ordinals for code in codes)
    return ",".join(codes)


def to_rule(settings: RecurrenceSettings) -> str:
    """Encode widget settings as an "RRULE:..." string.

    The caller must skip settings without a frequency. A missing count or
    until date for the chosen end condition simply leaves that part out.

    Raises:
        RuleParseError: If the grammar rejects the assembled rule
    """
    parts: Dict[str, object] = {
        "FREQ": settings.frequency.value,
        "INTERVAL": settings.interval,
    }

    if settings.end_condition == EndCondition.COUNT:
        parts["COUNT"] = settings.occurrence_count
    elif settings.end_condition == EndCondition.DATE:
        parts["UNTIL"] = format_until(settings.until_date) if settings.until_date else None

    if settings.frequency in WEEKDAY_FREQUENCIES and settings.weekdays:
        parts["BYDAY"] = _byday(settings.weekdays, settings.week_ordinals)

    if settings.months_of_year:
        parts["BYMONTH"] = ",".join(str(m) for m in settings.months_of_year)

    rule = serialize_parts(parts)
    logger.debug(f"Encoded settings -> {rule}")
    return rule


class RecurrenceMapper:
    """Bidirectional settings <-> RRULE mapping with a fixed reference date.

    Handy when one request decodes several stored rules against the same
    field start date.
    """

    def __init__(self, reference: Optional[datetime] = None):
        self.reference = reference

    def from_rule(self, rule_string: str) -> RecurrenceSettings:
        return from_rule(rule_string, self.reference)

    def to_rule(self, settings: RecurrenceSettings) -> str:
        return to_rule(settings)
