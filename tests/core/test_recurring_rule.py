"""
Test suite for recurring rule parsing.

System role: Verification of the recurring rule contract
"""

from datetime import date

import pytest

from training_backend.core.exceptions import InvalidRecurrenceRuleError
from training_backend.models.recurrence import (
    DailyRule,
    MonthlyRule,
    WeeklyRule,
    dump_recurring_rule,
    parse_recurring_rule,
)


class TestParseRecurringRule:
    """Test suite for parse_recurring_rule()."""

    def test_selects_variant_by_frequency(self) -> None:
        """Test the frequency tag picks the rule variant."""
        assert isinstance(parse_recurring_rule({"frequency": "DAILY"}), DailyRule)
        assert isinstance(parse_recurring_rule({"frequency": "WEEKLY"}), WeeklyRule)
        assert isinstance(parse_recurring_rule({"frequency": "MONTHLY"}), MonthlyRule)

    def test_weekly_days_are_sorted_and_deduplicated(self) -> None:
        """Test days_of_week is normalized."""
        rule = parse_recurring_rule({"frequency": "WEEKLY", "days_of_week": [5, 1, 3, 3]})

        assert rule.days_of_week == [1, 3, 5]

    def test_days_of_week_ignored_for_daily(self) -> None:
        """Test days_of_week is not a field of DAILY rules."""
        rule = parse_recurring_rule({"frequency": "DAILY", "days_of_week": [1, 2]})

        assert not hasattr(rule, "days_of_week")

    def test_parses_end_date_string(self) -> None:
        """Test ISO date strings become dates."""
        rule = parse_recurring_rule({"frequency": "MONTHLY", "end_date": "2026-12-31"})

        assert rule.end_date == date(2026, 12, 31)

    def test_typed_rule_is_returned_unchanged(self) -> None:
        """Test an already typed rule passes through."""
        rule = WeeklyRule(days_of_week=[2])

        assert parse_recurring_rule(rule) is rule

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            {},
            {"frequency": "YEARLY"},
            {"frequency": "DAILY", "interval": 0},
            {"frequency": "DAILY", "interval": 100},
            {"frequency": "WEEKLY", "days_of_week": []},
            {"frequency": "WEEKLY", "days_of_week": [7]},
            {"frequency": "DAILY", "end_after_occurrences": 0},
            {"frequency": "DAILY", "end_after_occurrences": 366},
            "WEEKLY",
        ],
    )
    def test_invalid_rules_raise(self, raw) -> None:
        """Test malformed rules raise InvalidRecurrenceRuleError."""
        with pytest.raises(InvalidRecurrenceRuleError) as exc_info:
            parse_recurring_rule(raw)

        assert exc_info.value.details["field"] == "recurring_rule"


class TestDumpRecurringRule:
    """Test suite for dump_recurring_rule()."""

    def test_dump_omits_unset_limits(self) -> None:
        """Test stored JSON only carries set fields."""
        rule = WeeklyRule(days_of_week=[3, 1])

        assert dump_recurring_rule(rule) == {
            "frequency": "WEEKLY",
            "interval": 1,
            "days_of_week": [1, 3],
        }

    def test_dump_renders_dates_as_strings(self) -> None:
        """Test end_date is JSON serializable."""
        dumped = dump_recurring_rule(DailyRule(end_date=date(2026, 5, 1)))

        assert dumped["end_date"] == "2026-05-01"

    def test_dump_none(self) -> None:
        assert dump_recurring_rule(None) is None
