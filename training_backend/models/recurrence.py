"""
Recurring rule schemas.

A recurring rule is a tagged variant keyed by ``frequency``:

    {"frequency": "WEEKLY", "interval": 1, "days_of_week": [1, 3, 5], "end_after_occurrences": 12}

``days_of_week`` uses 0=Sunday .. 6=Saturday and only exists on WEEKLY
rules. ``end_date`` is the last calendar date (inclusive, UTC) that may
carry an occurrence. When both limits are set, the first one reached
stops generation.

Dependencies: pydantic
System role: Recurrence rule contract, validated before it reaches the calculator
"""

from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from training_backend.core.exceptions import InvalidRecurrenceRuleError

Weekday = Annotated[int, Field(ge=0, le=6)]


class _RuleBase(BaseModel):
    """Fields shared by every frequency."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    interval: int = Field(default=1, ge=1, le=99, description="Periods between occurrences")
    end_date: date | None = Field(default=None, description="Last date carrying an occurrence")
    end_after_occurrences: int | None = Field(
        default=None, ge=1, le=365, description="Stop after this many occurrences"
    )


class DailyRule(_RuleBase):
    """Every ``interval`` days."""

    frequency: Literal["DAILY"] = "DAILY"


class WeeklyRule(_RuleBase):
    """Selected weekdays every ``interval`` weeks."""

    frequency: Literal["WEEKLY"] = "WEEKLY"
    days_of_week: list[Weekday] | None = Field(
        default=None,
        min_length=1,
        description="0=Sun..6=Sat; defaults to the first occurrence's weekday",
    )

    @field_validator("days_of_week")
    @classmethod
    def _normalize_days(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        return sorted(set(value))


class MonthlyRule(_RuleBase):
    """Same day of month every ``interval`` months."""

    frequency: Literal["MONTHLY"] = "MONTHLY"


RecurringRule = Annotated[
    Union[DailyRule, WeeklyRule, MonthlyRule],
    Field(discriminator="frequency"),
]

_rule_adapter: TypeAdapter[RecurringRule] = TypeAdapter(RecurringRule)


def parse_recurring_rule(raw: Any) -> DailyRule | WeeklyRule | MonthlyRule:
    """
    Validate a stored or submitted rule into its typed variant.

    Args:
        raw: Rule dict (as stored in the session row) or an already typed rule

    Returns:
        The typed rule variant

    Raises:
        InvalidRecurrenceRuleError: If the rule is missing or malformed
    """
    if isinstance(raw, (DailyRule, WeeklyRule, MonthlyRule)):
        return raw
    if raw is None:
        raise InvalidRecurrenceRuleError("Recurring sessions require a recurring rule")
    try:
        return _rule_adapter.validate_python(raw)
    except PydanticValidationError as e:
        raise InvalidRecurrenceRuleError(
            "Invalid recurring rule",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def dump_recurring_rule(rule: DailyRule | WeeklyRule | MonthlyRule | None) -> dict | None:
    """Serialize a rule for JSON storage on the session row."""
    if rule is None:
        return None
    return rule.model_dump(mode="json", exclude_none=True)
