"""Tests for mapping between RecurrenceSettings and RRULE strings."""

import pytest
from datetime import date

from recurwidget.models.recurrence import EndCondition, Frequency, RecurrenceSettings, Weekday
from recurwidget.recurrence.grammar import RuleParseError, parse_rule_parts
from recurwidget.recurrence.mapper import RecurrenceMapper, from_rule, to_rule


def _rule_parts(rule: str) -> dict:
    """Order-insensitive view of a rule: part name -> set of comma values."""
    return {k: set(v.split(",")) for k, v in parse_rule_parts(rule).items()}


class TestFromRule:
    """Decoding stored rules into widget settings."""

    def test_weekly_with_interval_and_days(self, reference_date):
        s = from_rule("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE", reference_date)
        assert s.frequency == Frequency.WEEKLY
        assert s.interval == 2
        assert s.end_condition == EndCondition.NEVER
        assert s.weekdays == [Weekday.MO, Weekday.WE]
        assert s.week_ordinals == []
        assert s.occurrence_count is None
        assert s.until_date is None

    def test_monthly_with_ordinals(self, reference_date):
        s = from_rule("FREQ=MONTHLY;BYDAY=+1MO,-1FR", reference_date)
        assert s.frequency == Frequency.MONTHLY
        assert set(s.week_ordinals) == {1, -1}
        assert set(s.weekdays) == {Weekday.MO, Weekday.FR}

    def test_interval_defaults_to_one(self, reference_date):
        assert from_rule("RRULE:FREQ=DAILY", reference_date).interval == 1

    def test_count_end_condition(self, reference_date):
        s = from_rule("RRULE:FREQ=DAILY;COUNT=5", reference_date)
        assert s.end_condition == EndCondition.COUNT
        assert s.occurrence_count == 5
        assert s.until_date is None

    def test_until_end_condition(self, reference_date):
        s = from_rule("RRULE:FREQ=WEEKLY;UNTIL=20261231T235959Z;BYDAY=TU", reference_date)
        assert s.end_condition == EndCondition.DATE
        assert s.until_date == date(2026, 12, 31)
        assert s.occurrence_count is None

    def test_until_date_only_value(self, reference_date):
        s = from_rule("FREQ=DAILY;UNTIL=20270301", reference_date)
        assert s.until_date == date(2027, 3, 1)

    @pytest.mark.parametrize("count", ["0", "00", "+0"])
    def test_count_zero_is_treated_as_absent(self, reference_date, count):
        s = from_rule(f"FREQ=DAILY;COUNT={count}", reference_date)
        assert s.end_condition == EndCondition.NEVER
        assert s.occurrence_count is None

    @pytest.mark.filterwarnings("error")
    def test_count_zero_falls_through_to_until(self, reference_date):
        s = from_rule("FREQ=DAILY;COUNT=0;UNTIL=20261231", reference_date)
        assert s.end_condition == EndCondition.DATE
        assert s.until_date == date(2026, 12, 31)

    @pytest.mark.filterwarnings("error")
    def test_count_wins_over_until(self, reference_date):
        s = from_rule("FREQ=DAILY;COUNT=3;UNTIL=20261231", reference_date)
        assert s.end_condition == EndCondition.COUNT
        assert s.occurrence_count == 3
        assert s.until_date is None

    def test_months_of_year(self, reference_date):
        s = from_rule("FREQ=MONTHLY;BYMONTH=12,3,6", reference_date)
        assert s.months_of_year == [3, 6, 12]

    def test_byday_is_case_insensitive(self, reference_date):
        s = from_rule("freq=weekly;byday=mo,fr", reference_date)
        assert s.weekdays == [Weekday.MO, Weekday.FR]

    def test_duplicate_ordinals_and_days_collapse(self, reference_date):
        s = from_rule("FREQ=MONTHLY;BYDAY=+1MO,+1WE,+3MO,+3WE", reference_date)
        assert s.week_ordinals == [1, 3]
        assert s.weekdays == [Weekday.MO, Weekday.WE]

    def test_unsigned_ordinal(self, reference_date):
        s = from_rule("FREQ=MONTHLY;BYDAY=2TH", reference_date)
        assert s.week_ordinals == [2]
        assert s.weekdays == [Weekday.TH]

    def test_only_first_rule_is_mapped(self, reference_date):
        rule = "RRULE:FREQ=WEEKLY;BYDAY=MO\nRRULE:FREQ=MONTHLY;BYMONTHDAY=1"
        s = from_rule(rule, reference_date)
        assert s.frequency == Frequency.WEEKLY
        assert s.weekdays == [Weekday.MO]

    def test_dtstart_line_is_accepted(self, reference_date):
        s = from_rule("DTSTART:20260101T090000\nRRULE:FREQ=DAILY;COUNT=3", reference_date)
        assert s.frequency == Frequency.DAILY
        assert s.occurrence_count == 3

    def test_reference_defaults_to_now(self):
        assert from_rule("FREQ=YEARLY").frequency == Frequency.YEARLY

    @pytest.mark.parametrize(
        "rule",
        ["", "FREQ=FORTNIGHTLY", "BYDAY=MO", "FREQ=DAILY;FOO=1", "FREQ=WEEKLY;BYDAY=XX"],
    )
    def test_malformed_rule_raises(self, rule, reference_date):
        with pytest.raises(RuleParseError):
            from_rule(rule, reference_date)


class TestToRule:
    """Encoding widget settings as RRULE strings."""

    def test_daily_count(self):
        s = RecurrenceSettings(
            frequency=Frequency.DAILY, interval=1, end_condition=EndCondition.COUNT, occurrence_count=5
        )
        rule = to_rule(s)
        assert rule.startswith("RRULE:")
        assert "FREQ=DAILY;INTERVAL=1;COUNT=5" in rule

    def test_monthly_ordinal_byday(self):
        s = RecurrenceSettings(
            frequency=Frequency.MONTHLY, weekdays=["MO"], week_ordinals=[2]
        )
        assert to_rule(s) == "RRULE:FREQ=MONTHLY;INTERVAL=1;BYDAY=+2MO"

    def test_byday_cross_product_is_ordinal_major(self):
        s = RecurrenceSettings(
            frequency=Frequency.MONTHLY, weekdays=["FR", "MO"], week_ordinals=[-1, 1]
        )
        assert to_rule(s) == "RRULE:FREQ=MONTHLY;INTERVAL=1;BYDAY=+1MO,+1FR,-1MO,-1FR"

    def test_weekly_days_without_ordinals(self, weekly_until_year_end):
        assert to_rule(weekly_until_year_end) == (
            "RRULE:FREQ=WEEKLY;INTERVAL=2;UNTIL=20261231T235959Z;BYDAY=MO,WE"
        )

    def test_weekdays_ignored_for_other_frequencies(self):
        s = RecurrenceSettings(frequency=Frequency.DAILY, weekdays=["MO"], week_ordinals=[1])
        assert to_rule(s) == "RRULE:FREQ=DAILY;INTERVAL=1"

    def test_months_of_year(self):
        s = RecurrenceSettings(frequency=Frequency.MONTHLY, months_of_year=[6, 1])
        assert to_rule(s) == "RRULE:FREQ=MONTHLY;INTERVAL=1;BYMONTH=1,6"

    def test_never_has_no_end_part(self):
        s = RecurrenceSettings(
            frequency=Frequency.WEEKLY, occurrence_count=3, until_date=date(2026, 5, 1)
        )
        rule = to_rule(s)
        assert "COUNT" not in rule
        assert "UNTIL" not in rule

    def test_missing_count_is_not_validated(self):
        s = RecurrenceSettings(frequency=Frequency.DAILY, end_condition=EndCondition.COUNT)
        assert to_rule(s) == "RRULE:FREQ=DAILY;INTERVAL=1"

    def test_missing_until_date_is_not_validated(self):
        s = RecurrenceSettings(frequency=Frequency.DAILY, end_condition=EndCondition.DATE)
        assert to_rule(s) == "RRULE:FREQ=DAILY;INTERVAL=1"


class TestRoundTrip:
    """to_rule(from_rule(s)) keeps the meaning of s."""

    @pytest.mark.parametrize(
        "rule",
        [
            "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE",
            "FREQ=MONTHLY;INTERVAL=3;COUNT=10;BYDAY=+2TU,-1TU;BYMONTH=3,6,9",
            "FREQ=DAILY;INTERVAL=1;UNTIL=20261231T235959Z",
            "FREQ=YEARLY;INTERVAL=1;COUNT=4",
            "FREQ=MONTHLY;INTERVAL=1;BYDAY=SA,SU",
        ],
    )
    def test_round_trip_preserves_parts(self, rule, reference_date):
        assert _rule_parts(to_rule(from_rule(rule, reference_date))) == _rule_parts(rule)

    def test_fixture_settings_round_trip(self, monthly_last_friday, reference_date):
        assert from_rule(to_rule(monthly_last_friday), reference_date) == monthly_last_friday

    def test_until_keeps_only_the_calendar_date(self, reference_date):
        rule = to_rule(from_rule("FREQ=HOURLY;UNTIL=20261231T120000Z", reference_date))
        assert rule == "RRULE:FREQ=HOURLY;INTERVAL=1;UNTIL=20261231T235959Z"


class TestRecurrenceMapper:
    def test_uses_fixed_reference(self, reference_date):
        mapper = RecurrenceMapper(reference_date)
        s = mapper.from_rule("FREQ=WEEKLY;BYDAY=FR")
        assert mapper.to_rule(s) == "RRULE:FREQ=WEEKLY;INTERVAL=1;BYDAY=FR"
