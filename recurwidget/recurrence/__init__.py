"""Recurrence rule mapping for recurwidget."""

from recurwidget.recurrence.grammar import RuleParseError, parse_rule_parts, serialize_parts
from recurwidget.recurrence.mapper import RecurrenceMapper, from_rule, to_rule

__all__ = [
    "RecurrenceMapper",
    "RuleParseError",
    "from_rule",
    "parse_rule_parts",
    "serialize_parts",
    "to_rule",
]
