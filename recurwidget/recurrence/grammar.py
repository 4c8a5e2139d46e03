"""RRULE grammar adapter backed by python-dateutil.

dateutil owns the recurrence grammar: every rule string going in or out of the
widget is checked with ``rrulestr``. This module only splits the first rule of
a recurrence into its named parts and joins parts back into ``RRULE:`` text.
"""

from __future__ import annotations

import logging
import warnings
from datetime import date, datetime
from typing import Dict, List, Mapping, Optional

from dateutil import parser as date_parser
from dateutil.rrule import rrulestr

logger = logging.getLogger(__name__)

RRULE_PREFIX = "RRULE:"

# dateutil warns (and plans to reject) when COUNT and UNTIL appear together.
_COUNT_AND_UNTIL_WARNING = r"Using both .count. and .until."


class RuleParseError(ValueError):
    """A rule string the recurrence grammar rejects. Surfaced as a 400."""

    def __init__(self, message: str, *, rule: Optional[str] = None):
        super().__init__(message)
        self.rule = rule


def _naive(dt: Optional[datetime]) -> datetime:
    # UNTIL timezones are ignored, so DTSTART must be naive too or dateutil refuses the pair.
    if dt is None:
        dt = datetime.now()
    elif not isinstance(dt, datetime):
        dt = datetime.combine(dt, datetime.min.time())
    return dt.replace(tzinfo=None, microsecond=0)


def _unfold(text: str) -> List[str]:
    """Undo RFC 5545 line folding and drop blank lines."""
    lines: List[str] = []
    for raw in text.splitlines():
        line = raw.rstrip()
        if not line:
            continue
        if lines and line[0] in (" ", "\t"):
            lines[-1] += line[1:]
        else:
            lines.append(line.strip())
    return lines


def _rule_lines(text: str) -> List[str]:
    """Return the values of every RRULE line, in order."""
    out: List[str] = []
    for line in _unfold(text):
        if ":" not in line:
            name, value = "RRULE", line
        else:
            name, value = line.split(":", 1)
        if name.split(";")[0] == "RRULE":
            out.append(value)
    return out


def validate_rule(rule_string: str, reference: Optional[datetime] = None) -> None:
    """Raise RuleParseError unless dateutil accepts the whole recurrence.

    Rules carrying both COUNT and UNTIL are accepted; the mapper decides
    which one wins.
    """
    if not rule_string or not rule_string.strip():
        raise RuleParseError("Recurrence rule is empty", rule=rule_string)
    try:
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message=_COUNT_AND_UNTIL_WARNING, category=DeprecationWarning)
            rrulestr(
                rule_string,
                dtstart=_naive(reference),
                forceset=True,
                unfold=True,
                ignoretz=True,
            )
    except (ValueError, TypeError) as e:
        raise RuleParseError(f"Invalid recurrence rule: {e}", rule=rule_string) from e


def parse_rule_parts(rule_string: str, reference: Optional[datetime] = None) -> Dict[str, str]:
    """Parse a recurrence into the named parts of its first rule.

    Args:
        rule_string: "RRULE:FREQ=...", a bare "FREQ=..." or a multi-line
            recurrence (DTSTART / RRULE / EXRULE / RDATE / EXDATE lines)
        reference: DTSTART used to expand the rule while validating; defaults to now

    Returns:
        Mapping of upper-cased part name to its value as written, e.g.
        {"FREQ": "MONTHLY", "BYDAY": "+1MO,-1FR"}

    Raises:
        RuleParseError: If the grammar rejects the string or it holds no RRULE
    """
    validate_rule(rule_string, reference)

    rules = _rule_lines(rule_string.upper())
    if not rules:
        raise RuleParseError("Recurrence has no RRULE", rule=rule_string)
    if len(rules) > 1:
        logger.warning(f"Recurrence has {len(rules)} rules; only the first is mapped")

    parts: Dict[str, str] = {}
    for pair in rules[0].split(";"):
        if not pair:
            continue
        name, value = pair.split("=", 1)
        parts[name.strip()] = value.strip()
    return parts


def parse_until(value: str) -> date:
    """Calendar date of an UNTIL value (DATE or DATE-TIME form)."""
    try:
        return date_parser.parse(value, ignoretz=True).date()
    except (ValueError, OverflowError) as e:
        raise RuleParseError(f"Invalid UNTIL value: {value}") from e


def format_until(day: date) -> str:
    """UNTIL value covering the whole of ``day``, as end of day in UTC.

    Settings only keep the calendar date, so any time of day on a decoded
    UNTIL is lost: ``20261231T120000Z`` comes back as ``20261231T235959Z``.
    """
    return f"{day.strftime('%Y%m%d')}T235959Z"


def serialize_parts(parts: Mapping[str, object]) -> str:
    """Join rule parts into canonical ``RRULE:`` text.

    Parts are written in insertion order; None / empty values are skipped.
    The result is checked with dateutil before it is returned.

    Raises:
        RuleParseError: If the grammar rejects the assembled rule
    """
    body = ";".join(
        f"{name}={value}" for name, value in parts.items() if value is not None and value != ""
    )
    rule = RRULE_PREFIX + body
    validate_rule(rule)
    return rule
